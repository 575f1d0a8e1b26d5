# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
PropTraka Core Primitives

Essential building blocks shared by every calculation: the immutable model
base, enums, constrained types, policy settings, date helpers and reusable
validators.
"""

from .dates import (
    coerce_date,
    coerce_optional_date,
    days_between,
    days_in_month,
    month_end,
    safe_month_date,
    today,
)
from .enums import (
    ALLOWED_STATUS_TRANSITIONS,
    SETTLED_STATUSES,
    ArrearsSeverityEnum,
    PaymentFrequencyEnum,
    TenancyStatusEnum,
    TransactionStatusEnum,
    TransactionTypeEnum,
    ValidationErrorCode,
    enum_to_string,
)
from .model import Model
from .settings import (
    AGEING_BUCKET_EDGES,
    CRITICAL_ARREARS_DAYS,
    DEFAULT_RENT_DUE_DAY,
    LEASE_EXPIRY_WINDOW_MONTHS,
    OPEN_ENDED_HORIZON_MONTHS,
    PRORATION_PRECISION,
    SEVERE_ARREARS_DAYS,
    ArrearsSettings,
    GlobalSettings,
    ScheduleSettings,
    TerminationSettings,
)
from .types import Amount, DayOfMonth, PositiveAmount, PositiveInt, PositiveIntGt0
from .validation import ValidationMixin

__all__ = [
    # Core models
    "Model",
    # Settings
    "GlobalSettings",
    "ArrearsSettings",
    "TerminationSettings",
    "ScheduleSettings",
    # Policy constants
    "CRITICAL_ARREARS_DAYS",
    "SEVERE_ARREARS_DAYS",
    "AGEING_BUCKET_EDGES",
    "DEFAULT_RENT_DUE_DAY",
    "PRORATION_PRECISION",
    "OPEN_ENDED_HORIZON_MONTHS",
    "LEASE_EXPIRY_WINDOW_MONTHS",
    # Enums
    "ArrearsSeverityEnum",
    "PaymentFrequencyEnum",
    "TenancyStatusEnum",
    "TransactionStatusEnum",
    "TransactionTypeEnum",
    "ValidationErrorCode",
    "ALLOWED_STATUS_TRANSITIONS",
    "SETTLED_STATUSES",
    "enum_to_string",
    # Types
    "Amount",
    "DayOfMonth",
    "PositiveAmount",
    "PositiveInt",
    "PositiveIntGt0",
    # Validation
    "ValidationMixin",
    # Dates
    "coerce_date",
    "coerce_optional_date",
    "days_between",
    "days_in_month",
    "month_end",
    "safe_month_date",
    "today",
]
