# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from pydantic import Field, field_validator, model_validator

from ..core.primitives import (
    Amount,
    Model,
    PaymentFrequencyEnum,
    PositiveAmount,
    TenancyStatusEnum,
    ValidationMixin,
    coerce_date,
    coerce_optional_date,
)


class Tenancy(Model, ValidationMixin):
    """
    A lease binding one tenant to one property for a date range.

    Attributes:
        id: Tenancy identifier
        owner_id: Landlord account the tenancy belongs to
        property_id: Let property
        tenant_id: Occupying tenant
        start_date: First day of the lease
        end_date: Last day of the lease, or None for an open-ended lease
        rent_amount: Rent per billing period (currency units, > 0)
        deposit_amount: Security deposit due at the start of the lease
        service_charge_amount: Service charge per billing period
        payment_frequency: Billing frequency
        status: Active until ended (naturally or early)
    """

    id: str
    owner_id: str
    property_id: str
    tenant_id: str
    start_date: date
    end_date: Optional[date] = None
    rent_amount: PositiveAmount
    deposit_amount: Amount = 0.0
    service_charge_amount: Amount = 0.0
    payment_frequency: PaymentFrequencyEnum = PaymentFrequencyEnum.MONTHLY
    status: TenancyStatusEnum = TenancyStatusEnum.ACTIVE
    tenant_name: Optional[str] = Field(default=None, description="Display name, if known.")

    @field_validator("start_date", mode="before")
    @classmethod
    def parse_start_date(cls, v: Any) -> date:
        return coerce_date(v)

    @field_validator("end_date", mode="before")
    @classmethod
    def parse_end_date(cls, v: Any) -> Optional[date]:
        return coerce_optional_date(v)

    @model_validator(mode="after")
    def check_date_range(self) -> "Tenancy":
        return self.validate_date_ordering(
            self, "start_date", "end_date", "end_date must not be before start_date"
        )

    @property
    def is_active(self) -> bool:
        return self.status == TenancyStatusEnum.ACTIVE

    @property
    def is_open_ended(self) -> bool:
        return self.end_date is None

    def covers(self, on: date) -> bool:
        """True if ``on`` falls within the lease dates."""
        if on < self.start_date:
            return False
        return self.end_date is None or on <= self.end_date
