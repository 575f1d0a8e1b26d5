# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
In-memory reference implementation of the store interfaces.

Used by tests, demos and any caller that already holds a portfolio in
memory. Writes are serialised with a re-entrant lock and every batch is
validated in full before the first record is touched, so a failed batch
leaves the store unchanged.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..core.errors import (
    InvalidTransitionError,
    NotFoundError,
    PreconditionFailure,
    TerminationRejected,
)
from ..core.primitives import coerce_date
from ..models import ChangeLogEntry, RevenueTransaction, Tenancy, TerminationPlan
from ..tenancy.lifecycle import can_transition, end_tenancy, mark_paid, record_payment
from ..tenancy.termination import cancellable_transactions
from .base import PortfolioStore

logger = logging.getLogger(__name__)


@dataclass
class InMemoryStore(PortfolioStore):
    """
    Dictionary-backed store for tenancies, transactions and the changelog.

    Records are immutable models, so handing them out never exposes internal
    state; updates swap in new instances under the lock.
    """

    _tenancies: Dict[str, Tenancy] = field(default_factory=dict, init=False, repr=False)
    _transactions: Dict[str, RevenueTransaction] = field(
        default_factory=dict, init=False, repr=False
    )
    _changelog: List[ChangeLogEntry] = field(default_factory=list, init=False, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    # --- Tenancies ---

    def list_tenancies(self, owner_id: str) -> List[Tenancy]:
        with self._lock:
            return sorted(
                (t for t in self._tenancies.values() if t.owner_id == owner_id),
                key=lambda t: t.id,
            )

    def get_tenancy(self, owner_id: str, tenancy_id: str) -> Tenancy:
        with self._lock:
            tenancy = self._tenancies.get(tenancy_id)
            if tenancy is None or tenancy.owner_id != owner_id:
                raise NotFoundError(f"tenancy {tenancy_id!r} not found for owner {owner_id!r}")
            return tenancy

    def add_tenancy(self, tenancy: Tenancy) -> None:
        with self._lock:
            if tenancy.id in self._tenancies:
                raise ValueError(f"tenancy {tenancy.id!r} already exists")
            self._tenancies[tenancy.id] = tenancy
        logger.debug(f"Added tenancy {tenancy.id} for owner {tenancy.owner_id}")

    def update_tenancy_end_date(self, owner_id: str, tenancy_id: str, end_date: date) -> Tenancy:
        with self._lock:
            tenancy = self.get_tenancy(owner_id, tenancy_id)
            updated = Tenancy.model_validate(
                {**tenancy.model_dump(), "end_date": coerce_date(end_date)}
            )
            self._tenancies[tenancy_id] = updated
            return updated

    # --- Transactions ---

    def list_transactions(
        self, owner_id: str, tenancy_id: Optional[str] = None
    ) -> List[RevenueTransaction]:
        with self._lock:
            return sorted(
                (
                    tx
                    for tx in self._transactions.values()
                    if tx.owner_id == owner_id
                    and (tenancy_id is None or tx.tenancy_id == tenancy_id)
                ),
                key=lambda tx: (tx.due_date, tx.id),
            )

    def _owned_transaction(self, owner_id: str, transaction_id: str) -> RevenueTransaction:
        tx = self._transactions.get(transaction_id)
        if tx is None or tx.owner_id != owner_id:
            raise NotFoundError(
                f"transaction {transaction_id!r} not found for owner {owner_id!r}"
            )
        return tx

    def _new_transactions(
        self,
        transactions: Iterable[RevenueTransaction],
        new_tenancy: Optional[Tenancy] = None,
    ) -> List[RevenueTransaction]:
        """Validate a batch of inserts, filling missing owners from the tenancy."""
        tenancies = dict(self._tenancies)
        if new_tenancy is not None:
            tenancies[new_tenancy.id] = new_tenancy
        batch: List[RevenueTransaction] = []
        seen = set()
        for tx in transactions:
            if tx.owner_id is None:
                tenancy = tenancies.get(tx.tenancy_id)
                if tenancy is None:
                    raise ValueError(
                        f"transaction {tx.id!r} has no owner and its tenancy is unknown"
                    )
                tx = tx.model_copy(update={"owner_id": tenancy.owner_id})
            if tx.id in self._transactions or tx.id in seen:
                raise ValueError(f"transaction {tx.id!r} already exists")
            seen.add(tx.id)
            batch.append(tx)
        return batch

    def add_transactions(self, transactions: Iterable[RevenueTransaction]) -> None:
        with self._lock:
            batch = self._new_transactions(transactions)
            for tx in batch:
                self._transactions[tx.id] = tx
        logger.debug(f"Added {len(batch)} transactions")

    def delete_transactions(self, owner_id: str, ids: Sequence[str]) -> int:
        ids = list(dict.fromkeys(ids))
        with self._lock:
            for transaction_id in ids:
                self._owned_transaction(owner_id, transaction_id)
            for transaction_id in ids:
                del self._transactions[transaction_id]
        logger.debug(f"Deleted {len(ids)} transactions for owner {owner_id}")
        return len(ids)

    def mark_paid(self, owner_id: str, transaction_id: str, payment_date: date) -> RevenueTransaction:
        with self._lock:
            paid = mark_paid(self._owned_transaction(owner_id, transaction_id), payment_date)
            self._transactions[transaction_id] = paid
            return paid

    def record_payment(
        self, owner_id: str, transaction_id: str, amount: float, payment_date: date
    ) -> RevenueTransaction:
        with self._lock:
            updated = record_payment(
                self._owned_transaction(owner_id, transaction_id), amount, payment_date
            )
            self._transactions[transaction_id] = updated
            return updated

    def update_transactions(
        self,
        owner_id: str,
        transactions: Iterable[RevenueTransaction],
        expected: Optional[Iterable[RevenueTransaction]] = None,
    ) -> None:
        batch = list(transactions)
        previous = {tx.id: tx for tx in expected or ()}
        with self._lock:
            for transaction in batch:
                current = self._owned_transaction(owner_id, transaction.id)
                if transaction.owner_id != owner_id:
                    raise ValueError(f"transaction {transaction.id!r} cannot change owner")
                if transaction.id in previous and current != previous[transaction.id]:
                    raise PreconditionFailure(
                        f"transaction {transaction.id!r} changed since it was read"
                    )
                if transaction.amount_paid < current.amount_paid:
                    raise PreconditionFailure(
                        f"update to transaction {transaction.id!r} would lower the amount "
                        f"paid from {current.amount_paid} to {transaction.amount_paid}"
                    )
                if transaction.status != current.status and not can_transition(
                    current.status, transaction.status
                ):
                    raise InvalidTransitionError(
                        f"transaction {transaction.id}",
                        current.status.value,
                        transaction.status.value,
                    )
            for transaction in batch:
                self._transactions[transaction.id] = transaction

    # --- Cross-collection operations ---

    def snapshot(self, owner_id: str) -> Tuple[List[Tenancy], List[RevenueTransaction]]:
        """Tenancies and transactions of one owner, read under a single lock."""
        with self._lock:
            return self.list_tenancies(owner_id), self.list_transactions(owner_id)

    def add_tenancy_with_schedule(
        self, tenancy: Tenancy, transactions: Iterable[RevenueTransaction]
    ) -> None:
        with self._lock:
            if tenancy.id in self._tenancies:
                raise ValueError(f"tenancy {tenancy.id!r} already exists")
            batch = self._new_transactions(transactions, new_tenancy=tenancy)
            self._tenancies[tenancy.id] = tenancy
            for tx in batch:
                self._transactions[tx.id] = tx
        logger.debug(
            f"Added tenancy {tenancy.id} for owner {tenancy.owner_id} "
            f"with {len(batch)} transactions"
        )

    def apply_termination(self, owner_id: str, plan: TerminationPlan) -> Tenancy:
        if not plan.is_valid:
            raise TerminationRejected(plan.tenancy_id, plan.messages)

        with self._lock:
            tenancy = self._tenancies.get(plan.tenancy_id)
            if tenancy is None or tenancy.owner_id != owner_id:
                raise PreconditionFailure(
                    f"tenancy {plan.tenancy_id!r} is no longer available to owner {owner_id!r}"
                )
            if not tenancy.is_active:
                raise PreconditionFailure(f"tenancy {plan.tenancy_id!r} has already ended")
            if tenancy.end_date is not None and plan.new_end_date > tenancy.end_date:
                raise PreconditionFailure(
                    f"tenancy {tenancy.id!r} now ends on {tenancy.end_date}, "
                    f"before the planned end date {plan.new_end_date}"
                )

            current = cancellable_transactions(
                tenancy.id,
                (tx for tx in self._transactions.values() if tx.owner_id == owner_id),
                plan.new_end_date,
            )
            current_ids = {tx.id for tx in current}
            planned_ids = set(plan.to_delete)
            if current_ids != planned_ids:
                stale = sorted(planned_ids - current_ids)
                unplanned = sorted(current_ids - planned_ids)
                raise PreconditionFailure(
                    f"termination plan for tenancy {tenancy.id!r} is stale "
                    f"(no longer cancellable: {stale}; not in plan: {unplanned})"
                )

            ended = end_tenancy(tenancy, plan.new_end_date)
            for transaction_id in plan.to_delete:
                del self._transactions[transaction_id]
            self._tenancies[tenancy.id] = ended

        logger.info(
            f"Tenancy {tenancy.id} terminated on {plan.new_end_date}; "
            f"{len(plan.to_delete)} scheduled charges cancelled"
        )
        return ended

    # --- Changelog ---

    def record_change(self, entry: ChangeLogEntry) -> None:
        with self._lock:
            self._changelog.append(entry)

    def changelog(self, owner_id: str) -> List[ChangeLogEntry]:
        with self._lock:
            return [e for e in self._changelog if e.owner_id == owner_id]
