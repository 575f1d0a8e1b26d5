# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Billing schedule generation.

Creates the charges a tenancy produces when it is signed: the security
deposit, one rent charge per billing period and any service charges. Monthly
tenancies are billed per calendar month with partial first and last months
prorated by days occupied; quarterly and annual tenancies are billed in whole
periods from the start month.
"""

from __future__ import annotations

import logging
import re
from datetime import date, timedelta
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from dateutil.relativedelta import relativedelta
from pydantic import field_validator

from ..core.primitives import (
    GlobalSettings,
    Model,
    PaymentFrequencyEnum,
    PositiveAmount,
    ScheduleSettings,
    TransactionStatusEnum,
    TransactionTypeEnum,
    days_in_month,
    month_end,
    safe_month_date,
)
from ..models import RevenueTransaction, Tenancy

logger = logging.getLogger(__name__)


class ServiceCharge(Model):
    """A recurring charge billed alongside rent (water, security, garbage...)."""

    name: str
    amount: PositiveAmount

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("service charge name must not be blank")
        return v.strip()

    @property
    def code(self) -> str:
        return re.sub(r"[^A-Z0-9]+", "", self.name.upper()) or "SC"


def _schedule_settings(
    settings: Optional[Union[ScheduleSettings, GlobalSettings]],
) -> ScheduleSettings:
    if settings is None:
        return ScheduleSettings()
    if isinstance(settings, GlobalSettings):
        return settings.schedule
    return settings


def schedule_end_date(tenancy: Tenancy, horizon_months: int) -> date:
    """Last billable day: the lease end, or ``horizon_months`` ahead for open-ended leases."""
    if tenancy.end_date is not None:
        return tenancy.end_date
    return tenancy.start_date + relativedelta(months=horizon_months) - timedelta(days=1)


def billing_periods(
    tenancy: Tenancy, end: date, rent_due_day: int
) -> Iterator[Tuple[date, date, date, bool]]:
    """
    Yield ``(period_start, period_end, due_date, is_full_period)`` per billing period.

    The first period is always due on the tenancy start date; later periods
    are due on ``rent_due_day`` of their first month (clamped to short months).
    """
    step = tenancy.payment_frequency.months

    if tenancy.payment_frequency == PaymentFrequencyEnum.MONTHLY:
        month_start = tenancy.start_date.replace(day=1)
        while month_start <= end:
            period_start = max(tenancy.start_date, month_start)
            period_end = min(end, month_end(month_start))
            if period_start <= period_end:
                full = (period_end - period_start).days + 1 == days_in_month(month_start)
                if month_start == tenancy.start_date.replace(day=1):
                    due = tenancy.start_date
                else:
                    due = safe_month_date(month_start.year, month_start.month, rent_due_day)
                yield period_start, period_end, due, full
            month_start += relativedelta(months=1)
        return

    index = 0
    period_start = tenancy.start_date
    while period_start <= end:
        next_start = tenancy.start_date + relativedelta(months=step * (index + 1))
        period_end = min(end, next_start - timedelta(days=1))
        if index == 0:
            due = tenancy.start_date
        else:
            due = safe_month_date(period_start.year, period_start.month, rent_due_day)
        yield period_start, period_end, due, True
        index += 1
        period_start = next_start


def prorate(amount: float, period_start: date, period_end: date, precision: int) -> float:
    """Share of a monthly amount for the days occupied within one calendar month."""
    days_active = (period_end - period_start).days + 1
    return round(amount / days_in_month(period_start) * days_active, precision)


def _period_note(period_start: date, period_end: date, full: bool) -> str:
    if full:
        return period_start.strftime("%B %Y")
    days_active = (period_end - period_start).days + 1
    return (
        f"Pro-rata: {period_start:%b} {period_start.day} - "
        f"{period_end:%b} {period_end.day} ({days_active} days)"
    )


def generate_rent_schedule(
    tenancy: Tenancy,
    *,
    rent_due_day: Optional[int] = None,
    service_charges: Sequence[ServiceCharge] = (),
    horizon_months: Optional[int] = None,
    settings: Optional[Union[ScheduleSettings, GlobalSettings]] = None,
) -> List[RevenueTransaction]:
    """
    Generate the pending charges for a newly created tenancy.

    Args:
        tenancy: The tenancy being created
        rent_due_day: Day of month rent falls due; defaults to settings
        service_charges: Recurring charges billed with rent. When empty and
            the tenancy has a ``service_charge_amount``, a single
            "Service Charge" line is billed.
        horizon_months: Months to bill for open-ended tenancies; defaults to
            settings
        settings: Schedule settings

    Returns:
        Deposit first (if any), then rent and service charges in due-date
        order. Ids are deterministic, derived from the tenancy id and due date.

    Example:
        >>> tenancy = Tenancy(id="t1", owner_id="o1", property_id="p1", tenant_id="n1",
        ...                   start_date=date(2025, 1, 15), end_date=date(2025, 3, 31),
        ...                   rent_amount=31000)
        >>> [tx.amount for tx in generate_rent_schedule(tenancy)]
        [17000.0, 31000.0, 31000.0]
    """
    cfg = _schedule_settings(settings)
    due_day = rent_due_day if rent_due_day is not None else cfg.rent_due_day
    if not 1 <= due_day <= 31:
        raise ValueError(f"rent_due_day must be between 1 and 31, got {due_day}")
    horizon = horizon_months if horizon_months is not None else cfg.open_ended_horizon_months

    charges = list(service_charges)
    if not charges and tenancy.service_charge_amount > 0:
        charges = [ServiceCharge(name="Service Charge", amount=tenancy.service_charge_amount)]
    codes = [c.code for c in charges]
    if len(set(codes)) != len(codes):
        raise ValueError(f"service charge names must be distinct, got {[c.name for c in charges]}")

    common = {
        "tenancy_id": tenancy.id,
        "property_id": tenancy.property_id,
        "tenant_id": tenancy.tenant_id,
        "owner_id": tenancy.owner_id,
        "status": TransactionStatusEnum.PENDING,
    }
    schedule: List[RevenueTransaction] = []

    if tenancy.deposit_amount > 0:
        schedule.append(
            RevenueTransaction(
                id=f"DEP-{tenancy.id}",
                invoice_number=f"DEP-{tenancy.id}",
                amount=tenancy.deposit_amount,
                due_date=tenancy.start_date,
                type=TransactionTypeEnum.DEPOSIT,
                notes="Security Deposit",
                **common,
            )
        )

    end = schedule_end_date(tenancy, horizon)
    monthly = tenancy.payment_frequency == PaymentFrequencyEnum.MONTHLY

    for period_start, period_end, due, full in billing_periods(tenancy, end, due_day):
        note = _period_note(period_start, period_end, full or not monthly)
        stamp = due.strftime("%Y%m%d")

        rent = tenancy.rent_amount
        if monthly and not full:
            rent = prorate(rent, period_start, period_end, cfg.proration_precision)
        schedule.append(
            RevenueTransaction(
                id=f"INV-{tenancy.id}-{stamp}",
                invoice_number=f"INV-{tenancy.id}-{stamp}",
                amount=rent,
                due_date=due,
                type=TransactionTypeEnum.RENT,
                notes=f"Rent: {note}",
                **common,
            )
        )

        for charge in charges:
            amount = charge.amount
            if monthly and not full:
                amount = prorate(amount, period_start, period_end, cfg.proration_precision)
            if amount <= 0:
                continue
            schedule.append(
                RevenueTransaction(
                    id=f"SC-{tenancy.id}-{charge.code}-{stamp}",
                    invoice_number=f"SC-{tenancy.id}-{charge.code}-{stamp}",
                    amount=amount,
                    due_date=due,
                    type=TransactionTypeEnum.SERVICE_CHARGE,
                    notes=f"{charge.name}: {note}",
                    **common,
                )
            )

    logger.debug(
        f"Generated {len(schedule)} charges for tenancy {tenancy.id} "
        f"({tenancy.start_date} to {end}, {tenancy.payment_frequency.value})"
    )
    return schedule
