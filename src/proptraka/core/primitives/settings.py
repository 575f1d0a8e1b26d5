# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Tuple

from pydantic import Field, field_validator, model_validator

from .model import Model
from .types import DayOfMonth, PositiveInt, PositiveIntGt0

# Business policy defaults. Settings models below read these so the numbers
# are defined once and can be audited in isolation from the calculations.
CRITICAL_ARREARS_DAYS = 30
SEVERE_ARREARS_DAYS = 60
AGEING_BUCKET_EDGES: Tuple[int, ...] = (30, 60, 90)
DEFAULT_RENT_DUE_DAY = 1
PRORATION_PRECISION = 2
OPEN_ENDED_HORIZON_MONTHS = 12
LEASE_EXPIRY_WINDOW_MONTHS = 12


class ArrearsSettings(Model):
    """
    Thresholds used when classifying arrears.

    Usage Examples:
        # Default policy: critical after 30 days, severe after 60
        settings = ArrearsSettings()

        # Stricter policy for a commercial portfolio
        settings = ArrearsSettings(critical_threshold_days=14, severe_threshold_days=30)
    """

    critical_threshold_days: PositiveInt = Field(
        default=CRITICAL_ARREARS_DAYS,
        description="Entries with more days overdue than this are flagged critical.",
    )
    severe_threshold_days: PositiveInt = Field(
        default=SEVERE_ARREARS_DAYS,
        description="Days overdue beyond which severity is labelled Critical rather than Urgent.",
    )
    ageing_bucket_edges: Tuple[PositiveIntGt0, ...] = Field(
        default=AGEING_BUCKET_EDGES,
        description="Upper bounds (inclusive, in days) of the ageing buckets; a final open bucket follows.",
    )

    @field_validator("ageing_bucket_edges")
    @classmethod
    def check_bucket_edges(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        if not v:
            raise ValueError("ageing_bucket_edges must contain at least one edge")
        if list(v) != sorted(set(v)):
            raise ValueError("ageing_bucket_edges must be strictly increasing")
        return v

    @model_validator(mode="after")
    def check_threshold_order(self) -> "ArrearsSettings":
        if self.severe_threshold_days < self.critical_threshold_days:
            raise ValueError(
                "severe_threshold_days must not be below critical_threshold_days"
            )
        return self


class TerminationSettings(Model):
    """Rules applied when validating an early termination request."""

    allow_future_end_date: bool = Field(
        default=False,
        description=(
            "If False, the new end date must be on or before today: termination "
            "records a move-out that has already happened."
        ),
    )


class ScheduleSettings(Model):
    """Settings for generating a tenancy's billing schedule."""

    rent_due_day: DayOfMonth = Field(
        default=DEFAULT_RENT_DUE_DAY,
        description="Day of month rent falls due (clamped to short months).",
    )
    proration_precision: PositiveInt = Field(
        default=PRORATION_PRECISION,
        description="Decimal places kept on prorated charges.",
    )
    open_ended_horizon_months: PositiveIntGt0 = Field(
        default=OPEN_ENDED_HORIZON_MONTHS,
        description="Months of charges generated for tenancies without an end date.",
    )


class GlobalSettings(Model):
    """Global engine settings

    Groups the policy settings by functional area. Every calculation accepts
    an optional settings object and falls back to these defaults.
    """

    arrears: ArrearsSettings = Field(default_factory=ArrearsSettings)
    termination: TerminationSettings = Field(default_factory=TerminationSettings)
    schedule: ScheduleSettings = Field(default_factory=ScheduleSettings)
