# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Owner-scoped portfolio service.

Wires a ``PortfolioStore`` to the pure engine: every read takes one snapshot
of the owner's records, runs the calculation on it and returns the result;
every write is computed up front and handed to the store as a single atomic
batch. The service never retries a stale write, it logs and re-raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence

import pandas as pd

from ..arrears import (
    aggregate_portfolio_arrears,
    arrears_ageing,
    compute_arrears,
    sort_by_days_overdue,
)
from ..core.errors import PreconditionFailure, TerminationRejected
from ..core.primitives import LEASE_EXPIRY_WINDOW_MONTHS, GlobalSettings, coerce_date
from ..core.primitives import today as current_date
from ..models import (
    ArrearEntry,
    ChangeActionEnum,
    ChangeLogEntry,
    PortfolioArrears,
    RevenueTransaction,
    Tenancy,
    TerminationPlan,
)
from ..store import PortfolioStore
from ..tenancy import (
    ServiceCharge,
    generate_rent_schedule,
    lease_expiry_profile,
    mark_overdue,
    plan_early_termination,
    waive,
)

logger = logging.getLogger(__name__)


@dataclass
class PortfolioService:
    # --- Configuration ---
    store: PortfolioStore
    settings: GlobalSettings = field(default_factory=GlobalSettings)

    def _log_change(
        self,
        owner_id: str,
        entity_type: str,
        entity_id: str,
        action: ChangeActionEnum,
        description: str,
    ) -> None:
        self.store.record_change(
            ChangeLogEntry(
                owner_id=owner_id,
                entity_type=entity_type,
                entity_id=entity_id,
                action=action,
                description=description,
            )
        )

    # --- Arrears ---

    def arrears(self, owner_id: str, as_of: Optional[date] = None) -> List[ArrearEntry]:
        """Arrears entries for one owner, longest outstanding first."""
        tenancies, transactions = self.store.snapshot(owner_id)
        entries = compute_arrears(
            transactions, as_of, tenancies=tenancies, settings=self.settings
        )
        return sort_by_days_overdue(entries)

    def portfolio_arrears(
        self, owner_id: str, as_of: Optional[date] = None
    ) -> PortfolioArrears:
        """Dashboard summary: total owed, tenancies in arrears, longest delay."""
        return aggregate_portfolio_arrears(self.arrears(owner_id, as_of), self.settings)

    def arrears_ageing(self, owner_id: str, as_of: Optional[date] = None) -> pd.Series:
        return arrears_ageing(self.store.list_transactions(owner_id), as_of, self.settings)

    def lease_expiry_profile(
        self,
        owner_id: str,
        as_of: Optional[date] = None,
        months: int = LEASE_EXPIRY_WINDOW_MONTHS,
    ) -> pd.Series:
        return lease_expiry_profile(self.store.list_tenancies(owner_id), as_of, months)

    # --- Tenancy lifecycle ---

    def create_tenancy(
        self,
        tenancy: Tenancy,
        *,
        rent_due_day: Optional[int] = None,
        service_charges: Sequence[ServiceCharge] = (),
    ) -> List[RevenueTransaction]:
        """
        Register a new tenancy together with its billing schedule.

        The schedule is generated before anything is written and both are
        inserted as one batch, so a failure leaves the store untouched.

        Returns:
            The charges that were created
        """
        schedule = generate_rent_schedule(
            tenancy,
            rent_due_day=rent_due_day,
            service_charges=service_charges,
            settings=self.settings,
        )
        self.store.add_tenancy_with_schedule(tenancy, schedule)
        self._log_change(
            tenancy.owner_id,
            "tenancy",
            tenancy.id,
            ChangeActionEnum.CREATED,
            f"Tenancy created for property {tenancy.property_id} with "
            f"{len(schedule)} scheduled charges",
        )
        logger.info(f"Created tenancy {tenancy.id} with {len(schedule)} charges")
        return schedule

    def plan_termination(
        self,
        owner_id: str,
        tenancy_id: str,
        new_end_date: date,
        today: Optional[date] = None,
    ) -> TerminationPlan:
        """Plan an early termination against the current state, without applying it."""
        tenancy = self.store.get_tenancy(owner_id, tenancy_id)
        transactions = self.store.list_transactions(owner_id, tenancy_id)
        return plan_early_termination(
            tenancy, transactions, new_end_date, today=today, settings=self.settings
        )

    def end_tenancy_early(
        self,
        owner_id: str,
        tenancy_id: str,
        new_end_date: date,
        today: Optional[date] = None,
    ) -> Tenancy:
        """
        End a tenancy before its scheduled end and cancel the charges it no
        longer owes.

        Raises:
            NotFoundError: If the tenancy does not belong to this owner
            TerminationRejected: If the request fails validation (nothing applied)
            PreconditionFailure: If the records changed between planning and
                commit (nothing applied)
        """
        plan = self.plan_termination(owner_id, tenancy_id, new_end_date, today)
        if not plan.is_valid:
            raise TerminationRejected(plan.tenancy_id, plan.messages)

        try:
            ended = self.store.apply_termination(owner_id, plan)
        except PreconditionFailure as e:
            logger.warning(f"Termination of tenancy {tenancy_id} not applied: {e}")
            raise

        self._log_change(
            owner_id,
            "tenancy",
            tenancy_id,
            ChangeActionEnum.ENDED,
            f"Tenancy ended early on {plan.new_end_date.isoformat()}; "
            f"{len(plan.to_delete)} future charges cancelled",
        )
        return ended

    # --- Payments ---

    def _commit_updates(
        self,
        owner_id: str,
        updated: List[RevenueTransaction],
        read: List[RevenueTransaction],
        action: str,
    ) -> None:
        try:
            self.store.update_transactions(owner_id, updated, expected=read)
        except PreconditionFailure as e:
            logger.warning(f"{action} for owner {owner_id} not applied: {e}")
            raise

    def record_payment(
        self,
        owner_id: str,
        transaction_id: str,
        amount: float,
        payment_date: Optional[date] = None,
    ) -> RevenueTransaction:
        """
        Record money received against one charge (full or partial).

        Raises:
            NotFoundError: If the charge does not belong to this owner
            ValueError: If the amount is not positive or exceeds the balance
            InvalidTransitionError: If the charge is already paid or waived
        """
        payment_date = current_date() if payment_date is None else coerce_date(payment_date)
        updated = self.store.record_payment(owner_id, transaction_id, amount, payment_date)
        self._log_change(
            owner_id,
            "transaction",
            transaction_id,
            ChangeActionEnum.PAYMENT,
            f"Payment of {amount:,.2f} received; status {updated.status.value}",
        )
        return updated

    def mark_paid(
        self, owner_id: str, transaction_id: str, payment_date: Optional[date] = None
    ) -> RevenueTransaction:
        payment_date = current_date() if payment_date is None else coerce_date(payment_date)
        paid = self.store.mark_paid(owner_id, transaction_id, payment_date)
        self._log_change(
            owner_id,
            "transaction",
            transaction_id,
            ChangeActionEnum.PAYMENT,
            f"Marked paid on {payment_date.isoformat()}",
        )
        return paid

    def waive_arrears(
        self, owner_id: str, tenancy_id: str, as_of: Optional[date] = None
    ) -> List[RevenueTransaction]:
        """
        Write off every overdue charge of one tenancy as one atomic batch.

        Returns:
            The waived charges (empty when nothing is overdue)

        Raises:
            NotFoundError: If the tenancy does not belong to this owner
            PreconditionFailure: If an overdue charge changed between the read
                and the commit, e.g. a payment landed (nothing waived)
        """
        as_of = current_date() if as_of is None else coerce_date(as_of)
        self.store.get_tenancy(owner_id, tenancy_id)
        overdue = [
            tx
            for tx in self.store.list_transactions(owner_id, tenancy_id)
            if tx.is_overdue(as_of)
        ]
        if not overdue:
            return []

        waived = [waive(tx) for tx in overdue]
        self._commit_updates(owner_id, waived, overdue, f"Waiver on tenancy {tenancy_id}")
        self._log_change(
            owner_id,
            "tenancy",
            tenancy_id,
            ChangeActionEnum.WAIVED,
            f"{len(waived)} overdue charges waived",
        )
        return waived

    def refresh_overdue_labels(self, owner_id: str, as_of: Optional[date] = None) -> int:
        """
        Relabel pending charges that have fallen due as Overdue.

        Arrears figures never depend on the label; this only keeps stored
        statuses in step for display.

        Returns:
            Number of charges relabelled
        """
        as_of = current_date() if as_of is None else coerce_date(as_of)
        read, changed = [], []
        for tx in self.store.list_transactions(owner_id):
            updated = mark_overdue(tx, as_of)
            if updated is not tx:
                read.append(tx)
                changed.append(updated)
        if changed:
            self._commit_updates(owner_id, changed, read, "Overdue relabel")
            logger.info(f"Relabelled {len(changed)} charges overdue for owner {owner_id}")
        return len(changed)

    def changelog(self, owner_id: str) -> List[ChangeLogEntry]:
        return self.store.changelog(owner_id)
