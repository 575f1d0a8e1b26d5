# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Arrears calculations.

Key entry points:
- compute_arrears() - per-tenancy overdue positions as of a date
- aggregate_portfolio_arrears() - portfolio totals and the critical count
- arrears_ageing() - outstanding amounts bucketed by days past due
"""

from .ageing import ageing_bucket_labels, arrears_ageing
from .calculator import (
    aggregate_portfolio_arrears,
    classify_severity,
    compute_arrears,
    critical_entries,
    is_critical,
    resolve_arrears_settings,
    sort_by_amount_owed,
    sort_by_days_overdue,
)
from .frame import coerce_tenancies, coerce_transactions, transactions_frame

__all__ = [
    "ageing_bucket_labels",
    "aggregate_portfolio_arrears",
    "arrears_ageing",
    "classify_severity",
    "coerce_tenancies",
    "coerce_transactions",
    "compute_arrears",
    "critical_entries",
    "is_critical",
    "resolve_arrears_settings",
    "sort_by_amount_owed",
    "sort_by_days_overdue",
    "transactions_frame",
]
