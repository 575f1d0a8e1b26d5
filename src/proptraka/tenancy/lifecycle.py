# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Status transitions for tenancies and revenue transactions.

Records are immutable; each helper returns an updated, re-validated copy and
raises ``InvalidTransitionError`` for moves the lifecycle does not allow.
Statuses only move forward (see ``TransactionStatusEnum``) and an ended
tenancy stays ended.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, TypeVar

from pydantic import BaseModel

from ..core.errors import InvalidTransitionError
from ..core.primitives import (
    ALLOWED_STATUS_TRANSITIONS,
    TenancyStatusEnum,
    TransactionStatusEnum,
    coerce_date,
)
from ..models import RevenueTransaction, Tenancy

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Tolerance for float comparisons on currency amounts
AMOUNT_TOLERANCE = 1e-9


def _replace(record: ModelT, **changes) -> ModelT:
    """Copy with changes applied and all validators re-run (``model_copy`` skips them)."""
    return type(record).model_validate({**record.model_dump(), **changes})


def can_transition(current: TransactionStatusEnum, target: TransactionStatusEnum) -> bool:
    return target in ALLOWED_STATUS_TRANSITIONS[current]


def transition_status(
    tx: RevenueTransaction, target: TransactionStatusEnum, **changes
) -> RevenueTransaction:
    """Move a transaction to ``target`` status, enforcing forward-only transitions."""
    if not can_transition(tx.status, target):
        raise InvalidTransitionError(f"transaction {tx.id}", tx.status.value, target.value)
    return _replace(tx, status=target, **changes)


def mark_paid(tx: RevenueTransaction, payment_date: date) -> RevenueTransaction:
    """Settle a charge in full on ``payment_date``."""
    paid = transition_status(
        tx,
        TransactionStatusEnum.PAID,
        payment_date=coerce_date(payment_date),
        amount_paid=tx.amount,
    )
    logger.info(f"Transaction {tx.id} marked paid on {paid.payment_date}")
    return paid


def record_payment(
    tx: RevenueTransaction, amount: float, payment_date: date
) -> RevenueTransaction:
    """
    Record money received against a charge.

    A payment that covers the remaining balance settles the charge (status
    Paid, payment date set). Anything less leaves it Partial; the payment date
    is only recorded on full settlement.

    Raises:
        ValueError: If the amount is not positive or exceeds the balance
        InvalidTransitionError: If the charge is already paid or waived
    """
    if amount <= 0:
        raise ValueError(f"payment amount must be positive, got {amount}")
    if tx.status.is_settled:
        raise InvalidTransitionError(
            f"transaction {tx.id}", tx.status.value, TransactionStatusEnum.PAID.value
        )

    balance = tx.amount - tx.amount_paid
    if amount > balance + AMOUNT_TOLERANCE:
        raise ValueError(
            f"payment of {amount} exceeds the outstanding balance {balance} on {tx.id}"
        )
    if amount >= balance - AMOUNT_TOLERANCE:
        return mark_paid(tx, payment_date)

    new_amount_paid = tx.amount_paid + amount
    if tx.status == TransactionStatusEnum.PARTIAL:
        partial = _replace(tx, amount_paid=new_amount_paid)
    else:
        partial = transition_status(
            tx, TransactionStatusEnum.PARTIAL, amount_paid=new_amount_paid
        )
    logger.info(
        f"Partial payment of {amount} on {tx.id}; {partial.outstanding} outstanding"
    )
    return partial


def waive(tx: RevenueTransaction) -> RevenueTransaction:
    """Write off whatever is still owed on a charge."""
    waived = transition_status(tx, TransactionStatusEnum.WAIVED)
    logger.info(f"Transaction {tx.id} waived ({tx.outstanding} written off)")
    return waived


def mark_overdue(tx: RevenueTransaction, as_of: date) -> RevenueTransaction:
    """
    Refresh the stored Overdue label on a pending charge that has fallen due.

    Charges that are not pending, or not yet due, are returned unchanged.
    """
    if tx.status == TransactionStatusEnum.PENDING and tx.is_overdue(coerce_date(as_of)):
        return transition_status(tx, TransactionStatusEnum.OVERDUE)
    return tx


def refresh_overdue_labels(
    transactions: Iterable[RevenueTransaction], as_of: date
) -> List[RevenueTransaction]:
    """Apply ``mark_overdue`` to every transaction, preserving order."""
    return [mark_overdue(tx, as_of) for tx in transactions]


def end_tenancy(tenancy: Tenancy, end_date: date) -> Tenancy:
    """
    Close a tenancy on ``end_date``.

    Raises:
        InvalidTransitionError: If the tenancy has already ended
        pydantic.ValidationError: If ``end_date`` is before the start date
    """
    if tenancy.status == TenancyStatusEnum.ENDED:
        raise InvalidTransitionError(
            f"tenancy {tenancy.id}", tenancy.status.value, TenancyStatusEnum.ENDED.value
        )
    ended = _replace(tenancy, end_date=coerce_date(end_date), status=TenancyStatusEnum.ENDED)
    logger.info(f"Tenancy {tenancy.id} ended on {ended.end_date}")
    return ended
