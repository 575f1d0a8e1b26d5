# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import date, datetime

import pandas as pd
import pytest

from proptraka.arrears import coerce_tenancies, coerce_transactions, transactions_frame
from proptraka.arrears.frame import TRANSACTION_COLUMNS
from proptraka.core.errors import DataIntegrityError
from proptraka.core.primitives import (
    PaymentFrequencyEnum,
    TransactionStatusEnum,
    TransactionTypeEnum,
)

from tests.factories import make_transaction


class TestCoercion:
    """Raw store documents become validated records, or fail loudly."""

    def test_models_pass_through_unchanged(self):
        tx = make_transaction(date(2025, 1, 1))
        assert coerce_transactions([tx])[0] is tx

    def test_document_aliases_and_bookkeeping_keys(self):
        (tx,) = coerce_transactions(
            [
                {
                    "id": "doc-1",
                    "tenancyId": "t-1",
                    "propertyId": "p-1",
                    "tenantId": "n-1",
                    "amount": 1200,
                    "amountPaid": 200,
                    "dueDate": datetime(2025, 2, 1, 10, 30),
                    "status": "partial",
                    "type": "Service Charge",
                    "invoiceNumber": "INV-1",
                    "createdAt": "2025-01-01",
                }
            ]
        )
        assert tx.tenancy_id == "t-1"
        assert tx.due_date == date(2025, 2, 1)
        assert tx.amount_paid == 200
        assert tx.status == TransactionStatusEnum.PARTIAL
        assert tx.type == TransactionTypeEnum.SERVICE_CHARGE
        assert tx.invoice_number == "INV-1"

    def test_snake_case_key_wins_over_alias(self):
        (tx,) = coerce_transactions(
            [
                {
                    "id": "doc-2",
                    "tenancy_id": "t-1",
                    "property_id": "p-1",
                    "amount": 100,
                    "due_date": "2025-03-01",
                    "date": "2024-01-01",
                }
            ]
        )
        assert tx.due_date == date(2025, 3, 1)

    def test_tenancy_documents(self):
        (tenancy,) = coerce_tenancies(
            [
                {
                    "id": "t-1",
                    "ownerId": "o-1",
                    "propertyId": "p-1",
                    "tenantId": "n-1",
                    "startDate": "2025-01-01",
                    "endDate": "",
                    "rentAmount": 30000,
                    "paymentFrequency": "quarterly",
                    "status": "active",
                }
            ]
        )
        assert tenancy.end_date is None
        assert tenancy.payment_frequency == PaymentFrequencyEnum.QUARTERLY

    @pytest.mark.parametrize(
        "overrides",
        [
            {"due_date": "not a date"},
            {"due_date": "now"},
            {"due_date": "today"},
            {"due_date": "2025"},
            {"due_date": None},
            {"amount": -5},
            {"amount": "lots"},
            {"status": "Bounced"},
        ],
    )
    def test_malformed_documents_raise(self, overrides):
        document = {
            "id": "bad",
            "tenancy_id": "t-1",
            "property_id": "p-1",
            "amount": 100,
            "due_date": "2025-01-01",
        }
        document.update(overrides)
        with pytest.raises(DataIntegrityError, match="record 'bad'"):
            coerce_transactions([document])

    def test_unsupported_record_type(self):
        with pytest.raises(DataIntegrityError, match="unsupported transaction record type"):
            coerce_transactions(["tx-1"])


class TestTransactionsFrame:
    """Columnar view used by the ageing report."""

    def test_columns_and_dtypes(self):
        frame = transactions_frame(
            [
                make_transaction(date(2025, 1, 1), TransactionStatusEnum.PAID, tx_id="a"),
                make_transaction(date(2025, 2, 1), tx_id="b"),
            ]
        )
        assert list(frame.columns) == TRANSACTION_COLUMNS
        assert pd.api.types.is_datetime64_any_dtype(frame["due_date"])
        assert pd.api.types.is_datetime64_any_dtype(frame["payment_date"])
        assert frame["status"].tolist() == ["Paid", "Pending"]
        assert frame["outstanding"].tolist() == [0.0, 45000.0]
        assert pd.isna(frame.loc[1, "payment_date"])

    def test_empty_frame_keeps_columns(self):
        frame = transactions_frame([])
        assert frame.empty
        assert list(frame.columns) == TRANSACTION_COLUMNS
