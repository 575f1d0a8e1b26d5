# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import date

import pytest

from proptraka.core.errors import InvalidTransitionError
from proptraka.core.primitives import TenancyStatusEnum, TransactionStatusEnum
from proptraka.tenancy import (
    end_tenancy,
    mark_overdue,
    mark_paid,
    record_payment,
    refresh_overdue_labels,
    transition_status,
    waive,
)

from tests.factories import make_transaction

DUE = date(2025, 2, 1)


class TestPayments:
    """Full and partial settlement."""

    def test_mark_paid(self):
        paid = mark_paid(make_transaction(DUE, TransactionStatusEnum.OVERDUE), date(2025, 2, 20))
        assert paid.status == TransactionStatusEnum.PAID
        assert paid.payment_date == date(2025, 2, 20)
        assert paid.amount_paid == paid.amount
        assert paid.outstanding == 0

    def test_mark_paid_twice_rejected(self):
        paid = mark_paid(make_transaction(DUE), DUE)
        with pytest.raises(InvalidTransitionError):
            mark_paid(paid, DUE)

    def test_partial_then_full_payment(self):
        tx = make_transaction(DUE, amount=1000.0)

        first = record_payment(tx, 300.0, date(2025, 2, 5))
        assert first.status == TransactionStatusEnum.PARTIAL
        assert first.amount_paid == 300.0
        assert first.payment_date is None

        second = record_payment(first, 200.0, date(2025, 2, 10))
        assert second.status == TransactionStatusEnum.PARTIAL
        assert second.outstanding == 500.0

        final = record_payment(second, 500.0, date(2025, 2, 15))
        assert final.status == TransactionStatusEnum.PAID
        assert final.payment_date == date(2025, 2, 15)
        assert final.amount_paid == 1000.0

    def test_exact_payment_settles(self):
        settled = record_payment(make_transaction(DUE, amount=1000.0), 1000.0, DUE)
        assert settled.is_paid

    @pytest.mark.parametrize("amount", [0, -10])
    def test_non_positive_payment_rejected(self, amount):
        with pytest.raises(ValueError, match="must be positive"):
            record_payment(make_transaction(DUE), amount, DUE)

    def test_overpayment_rejected(self):
        with pytest.raises(ValueError, match="exceeds the outstanding balance"):
            record_payment(make_transaction(DUE, amount=1000.0), 1000.01, DUE)

    @pytest.mark.parametrize("status", [TransactionStatusEnum.PAID, TransactionStatusEnum.WAIVED])
    def test_payment_on_settled_charge_rejected(self, status):
        with pytest.raises(InvalidTransitionError):
            record_payment(make_transaction(DUE, status), 10.0, DUE)


class TestStatusTransitions:
    """Forward-only moves."""

    def test_waive(self):
        waived = waive(make_transaction(DUE, TransactionStatusEnum.OVERDUE))
        assert waived.status == TransactionStatusEnum.WAIVED
        assert waived.outstanding == 0

    def test_waive_paid_rejected(self):
        with pytest.raises(InvalidTransitionError):
            waive(make_transaction(DUE, TransactionStatusEnum.PAID))

    def test_backwards_transition_rejected(self):
        with pytest.raises(InvalidTransitionError, match="cannot move from Overdue to Pending"):
            transition_status(
                make_transaction(DUE, TransactionStatusEnum.OVERDUE),
                TransactionStatusEnum.PENDING,
            )

    def test_mark_overdue_only_when_due(self):
        pending = make_transaction(DUE)
        assert mark_overdue(pending, date(2025, 1, 31)) is pending
        assert mark_overdue(pending, DUE).status == TransactionStatusEnum.OVERDUE

    def test_mark_overdue_leaves_other_statuses(self):
        partial = make_transaction(DUE, TransactionStatusEnum.PARTIAL, amount_paid=10.0)
        assert mark_overdue(partial, date(2025, 6, 1)) is partial

    def test_refresh_overdue_labels_preserves_order(self):
        txs = [
            make_transaction(date(2025, 3, 1)),
            make_transaction(date(2025, 1, 1)),
            make_transaction(date(2025, 2, 1), TransactionStatusEnum.PAID),
        ]
        refreshed = refresh_overdue_labels(txs, date(2025, 2, 15))
        assert [tx.id for tx in refreshed] == [tx.id for tx in txs]
        assert [tx.status for tx in refreshed] == [
            TransactionStatusEnum.PENDING,
            TransactionStatusEnum.OVERDUE,
            TransactionStatusEnum.PAID,
        ]


class TestEndTenancy:
    """Closing a tenancy."""

    def test_end_tenancy(self, sample_tenancy):
        ended = end_tenancy(sample_tenancy, date(2025, 6, 10))
        assert ended.status == TenancyStatusEnum.ENDED
        assert ended.end_date == date(2025, 6, 10)
        assert sample_tenancy.is_active

    def test_end_twice_rejected(self, sample_tenancy):
        ended = end_tenancy(sample_tenancy, date(2025, 6, 10))
        with pytest.raises(InvalidTransitionError):
            end_tenancy(ended, date(2025, 6, 1))

    def test_end_before_start_rejected(self, sample_tenancy):
        with pytest.raises(ValueError):
            end_tenancy(sample_tenancy, date(2024, 6, 1))
