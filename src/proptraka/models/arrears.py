# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Derived records produced by the arrears calculator and the termination planner.

None of these are persisted; they are recomputed from tenancies and
transactions whenever they are needed.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Tuple

from pydantic import Field, computed_field

from ..core.primitives import (
    ArrearsSeverityEnum,
    Model,
    PositiveInt,
    ValidationErrorCode,
)


class ArrearEntry(Model):
    """
    Outstanding position of one tenancy as of a reference date.

    Attributes:
        tenancy_id: Tenancy in arrears
        tenant_id: Tenant owing the money (None if unknown)
        property_id: Property the arrears relate to
        due_date: Due date of the longest-outstanding unpaid charge
        amount_owed: Sum outstanding across all overdue charges (> 0)
        days_overdue: Days since ``due_date`` (never negative)
        transaction_count: Number of overdue charges
        severity: Overdue / Urgent / Critical label
        is_critical: True past the critical threshold
    """

    tenancy_id: str
    tenant_id: Optional[str] = None
    property_id: Optional[str] = None
    due_date: date
    amount_owed: float = Field(gt=0)
    days_overdue: PositiveInt
    transaction_count: PositiveInt = 1
    severity: ArrearsSeverityEnum = ArrearsSeverityEnum.OVERDUE
    is_critical: bool = False


class PortfolioArrears(Model):
    """Portfolio-level arrears summary for one owner."""

    total_arrears: float = 0.0
    count: PositiveInt = 0
    longest_overdue_days: PositiveInt = 0
    critical_count: PositiveInt = 0

    @computed_field
    @property
    def has_critical(self) -> bool:
        return self.critical_count > 0


class ValidationError(Model):
    """
    One reason a termination request was rejected.

    Not an exception: plans carry a list of these so every problem can be
    reported back to the form in one go.
    """

    code: ValidationErrorCode
    field: str = "new_end_date"
    message: str


class TerminationPlan(Model):
    """
    Result of planning an early termination.

    ``to_delete`` is empty whenever ``errors`` is not. Applying the plan
    (deleting the transactions and ending the tenancy) is the caller's job and
    must happen as one atomic batch.
    """

    tenancy_id: str
    new_end_date: date
    to_delete: Tuple[str, ...] = ()
    errors: Tuple[ValidationError, ...] = ()

    @computed_field
    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> List[str]:
        return [e.message for e in self.errors]
