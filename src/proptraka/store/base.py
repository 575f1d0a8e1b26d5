# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Store interfaces consumed by the service layer.

The engine itself never talks to a store; the service fetches a consistent
snapshot, runs the pure calculations and hands the resulting changes back
here. Every method is scoped to one owner: implementations must never return
or touch another owner's records.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

from ..models import ChangeLogEntry, RevenueTransaction, Tenancy, TerminationPlan


class TenancyStore(ABC):
    """Read/write access to tenancies."""

    @abstractmethod
    def list_tenancies(self, owner_id: str) -> List[Tenancy]:
        """All tenancies of one owner."""

    @abstractmethod
    def get_tenancy(self, owner_id: str, tenancy_id: str) -> Tenancy:
        """
        One tenancy of one owner.

        Raises:
            NotFoundError: If the tenancy does not exist for this owner
        """

    @abstractmethod
    def add_tenancy(self, tenancy: Tenancy) -> None:
        """Insert a new tenancy."""

    @abstractmethod
    def update_tenancy_end_date(self, owner_id: str, tenancy_id: str, end_date: date) -> Tenancy:
        """Change a tenancy's end date (renewals and corrections)."""


class TransactionStore(ABC):
    """Read/write access to revenue transactions."""

    @abstractmethod
    def list_transactions(
        self, owner_id: str, tenancy_id: Optional[str] = None
    ) -> List[RevenueTransaction]:
        """All transactions of one owner, optionally limited to one tenancy."""

    @abstractmethod
    def add_transactions(self, transactions: Iterable[RevenueTransaction]) -> None:
        """Insert new transactions as one atomic batch."""

    @abstractmethod
    def delete_transactions(self, owner_id: str, ids: Sequence[str]) -> int:
        """
        Delete transactions as one atomic batch.

        Raises:
            NotFoundError: If any id is unknown for this owner (nothing deleted)
        """

    @abstractmethod
    def mark_paid(self, owner_id: str, transaction_id: str, payment_date: date) -> RevenueTransaction:
        """Settle one transaction in full."""

    @abstractmethod
    def record_payment(
        self, owner_id: str, transaction_id: str, amount: float, payment_date: date
    ) -> RevenueTransaction:
        """
        Add a payment to the stored balance of one transaction. The read and
        the write happen in one step, so concurrent payments accumulate.

        Raises:
            NotFoundError: If the transaction is unknown for this owner
            ValueError: If the amount is not positive or exceeds the balance
            InvalidTransitionError: If the charge is already paid or waived
        """

    @abstractmethod
    def update_transactions(
        self,
        owner_id: str,
        transactions: Iterable[RevenueTransaction],
        expected: Optional[Iterable[RevenueTransaction]] = None,
    ) -> None:
        """
        Replace stored transactions with updated copies as one atomic batch.

        Args:
            owner_id: Owner of every transaction in the batch
            transactions: Updated copies
            expected: The records the copies were computed from. Each stored
                record with a matching id must still equal its expected
                version.

        Raises:
            NotFoundError: If any transaction is unknown for this owner
            InvalidTransitionError: If any status change moves backwards
            PreconditionFailure: If any stored record changed since it was
                read, or a copy would lower the amount paid (nothing applied)
        """

    def update_transaction(
        self,
        owner_id: str,
        transaction: RevenueTransaction,
        expected: Optional[RevenueTransaction] = None,
    ) -> None:
        """Replace a stored transaction with an updated copy."""
        self.update_transactions(
            owner_id, [transaction], None if expected is None else [expected]
        )


class PortfolioStore(TenancyStore, TransactionStore):
    """
    A store holding both tenancies and transactions, able to apply
    cross-collection changes atomically.
    """

    def snapshot(self, owner_id: str) -> Tuple[List[Tenancy], List[RevenueTransaction]]:
        """Tenancies and transactions of one owner as one consistent read."""
        return self.list_tenancies(owner_id), self.list_transactions(owner_id)

    @abstractmethod
    def add_tenancy_with_schedule(
        self, tenancy: Tenancy, transactions: Iterable[RevenueTransaction]
    ) -> None:
        """
        Insert a new tenancy and its billing schedule as one atomic batch.

        Raises:
            ValueError: If the tenancy or any transaction already exists
                (nothing inserted)
        """

    @abstractmethod
    def apply_termination(self, owner_id: str, plan: TerminationPlan) -> Tenancy:
        """
        Apply an early termination plan as one all-or-nothing batch: delete
        the planned charges and end the tenancy.

        Implementations must re-validate the plan against current state
        immediately before committing.

        Raises:
            PreconditionFailure: If the snapshot the plan was built from is
                stale, including a lease shortened past the planned end date
                (nothing is applied)
        """

    @abstractmethod
    def record_change(self, entry: ChangeLogEntry) -> None:
        """Append an audit entry."""

    @abstractmethod
    def changelog(self, owner_id: str) -> List[ChangeLogEntry]:
        """Audit entries of one owner, oldest first."""
