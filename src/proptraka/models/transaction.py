# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from pydantic import field_validator, model_validator

from ..core.primitives import (
    Amount,
    Model,
    TransactionStatusEnum,
    TransactionTypeEnum,
    ValidationMixin,
    coerce_date,
    coerce_optional_date,
)


class RevenueTransaction(Model, ValidationMixin):
    """
    A single billing record (charge) tied to a tenancy, and its settlement.

    Attributes:
        id: Transaction identifier
        tenancy_id: Tenancy the charge belongs to
        property_id: Property the charge belongs to
        tenant_id: Tenant billed (optional on legacy records)
        owner_id: Landlord account (optional; stores scope by owner)
        amount: Amount charged
        due_date: Date the charge falls due
        payment_date: Date of full settlement; only set when status is Paid
        amount_paid: Money received so far (partial payments)
        status: Settlement status
        type: Rent, service charge, deposit or other income
        invoice_number: Human-facing reference
        notes: Free text (billing period, proration details)
    """

    id: str
    tenancy_id: str
    property_id: str
    tenant_id: Optional[str] = None
    owner_id: Optional[str] = None
    amount: Amount
    due_date: date
    payment_date: Optional[date] = None
    amount_paid: Amount = 0.0
    status: TransactionStatusEnum = TransactionStatusEnum.PENDING
    type: TransactionTypeEnum = TransactionTypeEnum.RENT
    invoice_number: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, v: Any) -> date:
        return coerce_date(v)

    @field_validator("payment_date", mode="before")
    @classmethod
    def parse_payment_date(cls, v: Any) -> Optional[date]:
        return coerce_optional_date(v)

    @model_validator(mode="after")
    def check_settlement(self) -> "RevenueTransaction":
        """A payment date means the charge is paid; partial amounts must be partial."""
        self.validate_guarded_field(
            self,
            "status",
            TransactionStatusEnum.PAID,
            "payment_date",
            "payment_date may only be set when status is Paid",
        )
        if self.amount_paid > self.amount:
            raise ValueError("amount_paid must not exceed amount")
        if self.status == TransactionStatusEnum.PARTIAL and not (
            0 < self.amount_paid < self.amount
        ):
            raise ValueError("Partial status requires 0 < amount_paid < amount")
        return self

    @property
    def is_paid(self) -> bool:
        return self.status == TransactionStatusEnum.PAID

    @property
    def outstanding(self) -> float:
        """Amount still owed on this charge (zero once paid or waived)."""
        if self.status.is_settled:
            return 0.0
        return self.amount - self.amount_paid

    def is_overdue(self, as_of: date) -> bool:
        """
        Derived live from the due date: unsettled, something still owed, and
        due on or before ``as_of``. The stored Overdue label is not consulted.
        """
        return self.outstanding > 0 and self.due_date <= as_of
