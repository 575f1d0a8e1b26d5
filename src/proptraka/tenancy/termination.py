# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Early tenancy termination planner.

Given a tenancy, its transactions and a requested new end date, work out
which scheduled charges have to be cancelled. The planner never touches a
store: it returns a ``TerminationPlan`` that the caller applies as one atomic
batch (delete the charges, then end the tenancy).

Safety rules:
- a charge with money received (paid or partially paid) is never cancelled,
  so the financial history survives the termination;
- a request that fails validation yields no deletions at all; there is no
  partial termination.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional, Union

from ..arrears.frame import TenancyLike, TransactionLike, coerce_tenancies, coerce_transactions
from ..core.primitives import (
    GlobalSettings,
    TerminationSettings,
    ValidationErrorCode,
    coerce_date,
)
from ..core.primitives import today as current_date
from ..models import RevenueTransaction, Tenancy, TerminationPlan, ValidationError

logger = logging.getLogger(__name__)


def _termination_settings(
    settings: Optional[Union[TerminationSettings, GlobalSettings]],
) -> TerminationSettings:
    if settings is None:
        return TerminationSettings()
    if isinstance(settings, GlobalSettings):
        return settings.termination
    return settings


def validate_termination_date(
    tenancy: Tenancy,
    new_end_date: date,
    today: date,
    settings: Optional[Union[TerminationSettings, GlobalSettings]] = None,
) -> List[ValidationError]:
    """
    Check a requested end date against the tenancy and today's date.

    The new end date must fall within the lease (start <= new <= end; open
    ended leases have no upper bound) and, unless configured otherwise, must
    not be in the future: termination records a move-out that already
    happened. Only active tenancies can be terminated.

    Returns:
        Every violation found (empty when the request is valid)
    """
    cfg = _termination_settings(settings)
    errors: List[ValidationError] = []

    if not tenancy.is_active:
        errors.append(
            ValidationError(
                code=ValidationErrorCode.NOT_ACTIVE,
                field="status",
                message=f"Tenancy {tenancy.id} has already ended.",
            )
        )
    if new_end_date < tenancy.start_date:
        errors.append(
            ValidationError(
                code=ValidationErrorCode.BEFORE_START,
                message=(
                    f"New end date {new_end_date.isoformat()} is before the tenancy "
                    f"start date {tenancy.start_date.isoformat()}."
                ),
            )
        )
    if tenancy.end_date is not None and new_end_date > tenancy.end_date:
        errors.append(
            ValidationError(
                code=ValidationErrorCode.AFTER_END,
                message=(
                    f"New end date {new_end_date.isoformat()} is after the current "
                    f"end date {tenancy.end_date.isoformat()}; use a renewal instead."
                ),
            )
        )
    if not cfg.allow_future_end_date and new_end_date > today:
        errors.append(
            ValidationError(
                code=ValidationErrorCode.IN_FUTURE,
                message=(
                    f"New end date {new_end_date.isoformat()} is in the future; "
                    "a tenancy can only be ended once the tenant has moved out."
                ),
            )
        )
    return errors


def cancellable_transactions(
    tenancy_id: str, transactions: Iterable[RevenueTransaction], new_end_date: date
) -> List[RevenueTransaction]:
    """
    Charges of one tenancy that fall due after ``new_end_date`` with nothing received.

    Ordered by due date, then id.
    """
    return sorted(
        (
            tx
            for tx in transactions
            if tx.tenancy_id == tenancy_id
            and tx.due_date > new_end_date
            and not tx.is_paid
            and tx.amount_paid == 0
        ),
        key=lambda tx: (tx.due_date, tx.id),
    )


def plan_early_termination(
    tenancy: TenancyLike,
    transactions: Iterable[TransactionLike],
    new_end_date: date,
    today: Optional[date] = None,
    settings: Optional[Union[TerminationSettings, GlobalSettings]] = None,
) -> TerminationPlan:
    """
    Plan the early termination of a tenancy.

    Args:
        tenancy: Tenancy being ended
        transactions: Transactions to consider; records of other tenancies
            are ignored
        new_end_date: Requested last day of the tenancy
        today: Reference "now"; defaults to the current date
        settings: Termination rules

    Returns:
        A plan with either validation errors and no deletions, or the ids of
        the charges to delete. Identical inputs always give an identical plan.

    Raises:
        DataIntegrityError: If the tenancy or any transaction is malformed
    """
    (record,) = coerce_tenancies([tenancy])
    new_end_date = coerce_date(new_end_date)
    today = current_date() if today is None else coerce_date(today)

    errors = validate_termination_date(record, new_end_date, today, settings)
    if errors:
        logger.warning(
            f"Termination of tenancy {record.id} to {new_end_date} rejected: "
            + "; ".join(e.message for e in errors)
        )
        return TerminationPlan(
            tenancy_id=record.id, new_end_date=new_end_date, errors=tuple(errors)
        )

    to_delete = cancellable_transactions(
        record.id, coerce_transactions(transactions), new_end_date
    )
    logger.debug(
        f"Termination of tenancy {record.id} to {new_end_date}: "
        f"{len(to_delete)} scheduled charges to cancel"
    )
    return TerminationPlan(
        tenancy_id=record.id,
        new_end_date=new_end_date,
        to_delete=tuple(tx.id for tx in to_delete),
    )
