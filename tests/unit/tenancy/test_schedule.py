# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from proptraka.core.primitives import (
    GlobalSettings,
    PaymentFrequencyEnum,
    ScheduleSettings,
    TransactionStatusEnum,
    TransactionTypeEnum,
)
from proptraka.tenancy import ServiceCharge, generate_rent_schedule, prorate

from tests.factories import make_tenancy


def _rent(schedule):
    return [tx for tx in schedule if tx.type == TransactionTypeEnum.RENT]


class TestMonthlySchedule:
    """Calendar-month billing with prorated partial months."""

    def test_prorated_first_month(self):
        tenancy = make_tenancy(
            id="t1", start_date=date(2025, 1, 15), end_date=date(2025, 3, 31), rent_amount=31000
        )
        schedule = generate_rent_schedule(tenancy)

        assert [tx.amount for tx in schedule] == [17000.0, 31000.0, 31000.0]
        assert [tx.due_date for tx in schedule] == [
            date(2025, 1, 15),
            date(2025, 2, 1),
            date(2025, 3, 1),
        ]
        assert [tx.id for tx in schedule] == [
            "INV-t1-20250115",
            "INV-t1-20250201",
            "INV-t1-20250301",
        ]
        assert schedule[0].notes == "Rent: Pro-rata: Jan 15 - Jan 31 (17 days)"
        assert schedule[1].notes == "Rent: February 2025"

    def test_prorated_last_month(self):
        tenancy = make_tenancy(
            start_date=date(2025, 1, 1), end_date=date(2025, 2, 14), rent_amount=28000
        )
        amounts = [tx.amount for tx in generate_rent_schedule(tenancy)]
        assert amounts == [28000.0, 14000.0]

    def test_full_year_has_twelve_full_charges(self, sample_tenancy):
        schedule = generate_rent_schedule(sample_tenancy)
        assert len(schedule) == 12
        assert all(tx.amount == 45000.0 for tx in schedule)

    def test_due_day_clamped_to_short_months(self):
        tenancy = make_tenancy(start_date=date(2025, 1, 1), end_date=date(2025, 4, 30))
        schedule = generate_rent_schedule(tenancy, rent_due_day=31)
        assert [tx.due_date for tx in schedule] == [
            date(2025, 1, 1),
            date(2025, 2, 28),
            date(2025, 3, 31),
            date(2025, 4, 30),
        ]

    def test_due_day_from_settings(self):
        tenancy = make_tenancy(start_date=date(2025, 1, 1), end_date=date(2025, 2, 28))
        settings = GlobalSettings(schedule=ScheduleSettings(rent_due_day=5))
        schedule = generate_rent_schedule(tenancy, settings=settings)
        assert schedule[1].due_date == date(2025, 2, 5)

    @pytest.mark.parametrize("day", [0, 32])
    def test_invalid_due_day(self, sample_tenancy, day):
        with pytest.raises(ValueError, match="rent_due_day"):
            generate_rent_schedule(sample_tenancy, rent_due_day=day)

    def test_charges_are_pending_and_fully_referenced(self, sample_tenancy):
        for tx in generate_rent_schedule(sample_tenancy):
            assert tx.status == TransactionStatusEnum.PENDING
            assert tx.amount_paid == 0
            assert tx.payment_date is None
            assert tx.tenancy_id == sample_tenancy.id
            assert tx.owner_id == sample_tenancy.owner_id
            assert tx.property_id == sample_tenancy.property_id
            assert tx.tenant_id == sample_tenancy.tenant_id
            assert tx.invoice_number == tx.id


class TestOpenEndedSchedule:
    """Leases without an end date are billed over a rolling horizon."""

    def test_default_horizon(self):
        tenancy = make_tenancy(start_date=date(2025, 1, 1), end_date=None)
        schedule = generate_rent_schedule(tenancy)
        assert len(schedule) == 12
        assert schedule[-1].due_date == date(2025, 12, 1)

    def test_explicit_horizon(self):
        tenancy = make_tenancy(start_date=date(2025, 1, 1), end_date=None)
        assert len(generate_rent_schedule(tenancy, horizon_months=3)) == 3


class TestOtherCharges:
    """Deposit and service charges."""

    def test_deposit_first(self):
        tenancy = make_tenancy(deposit_amount=90000)
        schedule = generate_rent_schedule(tenancy)
        deposit = schedule[0]
        assert deposit.id == "DEP-t-1"
        assert deposit.type == TransactionTypeEnum.DEPOSIT
        assert deposit.amount == 90000
        assert deposit.due_date == tenancy.start_date
        assert len(schedule) == 13

    def test_tenancy_service_charge_amount(self):
        tenancy = make_tenancy(
            start_date=date(2025, 1, 15), end_date=date(2025, 2, 28), service_charge_amount=3000
        )
        service = [
            tx
            for tx in generate_rent_schedule(tenancy)
            if tx.type == TransactionTypeEnum.SERVICE_CHARGE
        ]
        assert [tx.amount for tx in service] == [1645.16, 3000.0]
        assert service[0].id == "SC-t-1-SERVICECHARGE-20250115"
        assert service[0].notes.startswith("Service Charge: Pro-rata")

    def test_named_service_charges(self):
        tenancy = make_tenancy(start_date=date(2025, 1, 1), end_date=date(2025, 1, 31))
        schedule = generate_rent_schedule(
            tenancy,
            service_charges=[
                ServiceCharge(name="Water", amount=500),
                ServiceCharge(name="Security Fee", amount=1000),
            ],
        )
        assert [tx.id for tx in schedule] == [
            "INV-t-1-20250101",
            "SC-t-1-WATER-20250101",
            "SC-t-1-SECURITYFEE-20250101",
        ]
        assert len(_rent(schedule)) == 1

    def test_duplicate_service_charge_names_rejected(self, sample_tenancy):
        with pytest.raises(ValueError, match="distinct"):
            generate_rent_schedule(
                sample_tenancy,
                service_charges=[
                    ServiceCharge(name="Water", amount=500),
                    ServiceCharge(name="water", amount=600),
                ],
            )

    def test_blank_service_charge_name(self):
        with pytest.raises(ValidationError):
            ServiceCharge(name="  ", amount=100)


class TestLongerFrequencies:
    """Quarterly and annual billing in whole periods."""

    def test_quarterly(self):
        tenancy = make_tenancy(
            start_date=date(2025, 1, 15),
            end_date=date(2025, 12, 31),
            payment_frequency=PaymentFrequencyEnum.QUARTERLY,
            rent_amount=120000,
        )
        schedule = generate_rent_schedule(tenancy)
        assert [tx.due_date for tx in schedule] == [
            date(2025, 1, 15),
            date(2025, 4, 1),
            date(2025, 7, 1),
            date(2025, 10, 1),
        ]
        assert all(tx.amount == 120000 for tx in schedule)
        assert schedule[0].notes == "Rent: January 2025"

    def test_annual(self):
        tenancy = make_tenancy(
            start_date=date(2025, 3, 1),
            end_date=date(2027, 2, 28),
            payment_frequency=PaymentFrequencyEnum.ANNUALLY,
        )
        schedule = generate_rent_schedule(tenancy)
        assert [tx.due_date for tx in schedule] == [date(2025, 3, 1), date(2026, 3, 1)]


def test_prorate():
    assert prorate(31000, date(2025, 1, 15), date(2025, 1, 31), 2) == 17000.0
    assert prorate(1000, date(2025, 2, 1), date(2025, 2, 10), 2) == 357.14
