# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tenancy lifecycle: early termination planning, billing schedules, status
transitions and lease-expiry reporting.
"""

from .expiry import expiring_tenancies, lease_expiry_profile
from .lifecycle import (
    can_transition,
    end_tenancy,
    mark_overdue,
    mark_paid,
    record_payment,
    refresh_overdue_labels,
    transition_status,
    waive,
)
from .schedule import ServiceCharge, generate_rent_schedule, prorate
from .termination import (
    cancellable_transactions,
    plan_early_termination,
    validate_termination_date,
)

__all__ = [
    "ServiceCharge",
    "can_transition",
    "cancellable_transactions",
    "end_tenancy",
    "expiring_tenancies",
    "generate_rent_schedule",
    "lease_expiry_profile",
    "mark_overdue",
    "mark_paid",
    "plan_early_termination",
    "prorate",
    "record_payment",
    "refresh_overdue_labels",
    "transition_status",
    "validate_termination_date",
    "waive",
]
