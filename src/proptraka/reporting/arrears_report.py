# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Arrears Reports

Tabular and plain-text views of computed arrears entries, for dashboards,
exports and the collection-letter prompt. Reports only format what the
calculator produced; no arrears figure is re-derived here.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Mapping, Optional

import pandas as pd

from ..arrears import aggregate_portfolio_arrears, sort_by_days_overdue
from ..arrears.calculator import SettingsLike
from ..models import ArrearEntry

ARREARS_COLUMNS: List[str] = [
    "tenancy_id",
    "tenant_id",
    "property_id",
    "due_date",
    "amount_owed",
    "days_overdue",
    "transaction_count",
    "severity",
    "is_critical",
]


def format_amount(amount: float, currency: Optional[str] = None) -> str:
    """
    Format a currency amount with thousands separators.

    Example:
        >>> format_amount(90000, "KES")
        'KES 90,000.00'
    """
    text = f"{amount:,.2f}"
    return f"{currency} {text}" if currency else text


def arrears_table(entries: Iterable[ArrearEntry]) -> pd.DataFrame:
    """
    Arrears entries as a DataFrame, longest outstanding first.

    Severity is rendered as its label; an empty input gives an empty frame
    with the standard columns.
    """
    rows = [
        {**entry.model_dump(), "severity": entry.severity.value}
        for entry in sort_by_days_overdue(entries)
    ]
    frame = pd.DataFrame(rows, columns=ARREARS_COLUMNS)
    frame["due_date"] = pd.to_datetime(frame["due_date"])
    return frame.reset_index(drop=True)


def arrears_summary_text(
    entries: Iterable[ArrearEntry],
    currency: Optional[str] = None,
    tenant_names: Optional[Mapping[str, str]] = None,
    property_names: Optional[Mapping[str, str]] = None,
) -> str:
    """
    One line per tenancy in arrears, longest outstanding first.

    Args:
        entries: Computed arrears entries
        currency: Currency code prefixed to amounts
        tenant_names: Optional tenant id to display name mapping
        property_names: Optional property id to display name mapping

    Returns:
        Newline-separated lines, or a short notice when nobody is in arrears
    """
    ordered = sort_by_days_overdue(entries)
    if not ordered:
        return "No tenancies are in arrears."

    tenant_names = tenant_names or {}
    property_names = property_names or {}
    lines = []
    for entry in ordered:
        tenant = tenant_names.get(entry.tenant_id or "", entry.tenant_id or "Unknown")
        prop = property_names.get(entry.property_id or "", entry.property_id or "Unknown")
        lines.append(
            f"- Tenancy ID: {entry.tenancy_id}, Tenant: {tenant}, Property: {prop}, "
            f"Amount Owed: {format_amount(entry.amount_owed, currency)}, "
            f"Due Date: {entry.due_date.isoformat()}, "
            f"Days Overdue: {entry.days_overdue}"
        )
    return "\n".join(lines)


def arrears_report(
    entries: Iterable[ArrearEntry],
    as_of: date,
    currency: Optional[str] = None,
    title: str = "Arrears Report",
    settings: SettingsLike = None,
) -> str:
    """
    Markdown report: portfolio totals followed by the per-tenancy lines.

    Pass the settings the entries were computed with so the critical count
    uses the same threshold.
    """
    entries = list(entries)
    summary = aggregate_portfolio_arrears(entries, settings)

    output = [
        f"# {title}",
        f"*As of {as_of.strftime('%B %d, %Y')}*\n",
        "## Summary",
        f"- **Total Arrears**: {format_amount(summary.total_arrears, currency)}",
        f"- **Tenancies in Arrears**: {summary.count}",
        f"- **Longest Overdue**: {summary.longest_overdue_days} days",
        f"- **Critical**: {summary.critical_count}",
        "",
        "## Tenancies",
        arrears_summary_text(entries, currency),
    ]
    return "\n".join(output)
