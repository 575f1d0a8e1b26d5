# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Arrears calculator.

Derives, for a reference date, which tenancies owe overdue money, how much and
for how long. Every function here is pure: same inputs, same outputs, no I/O.

Overdue is derived live from each charge's due date. The stored ``Overdue``
status label is never trusted on its own, since a label written yesterday can
be stale today.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Union

from ..core.primitives import (
    ArrearsSettings,
    ArrearsSeverityEnum,
    GlobalSettings,
    coerce_date,
    days_between,
    today,
)
from ..models import ArrearEntry, PortfolioArrears, RevenueTransaction, Tenancy
from .frame import TenancyLike, TransactionLike, coerce_tenancies, coerce_transactions

logger = logging.getLogger(__name__)

SettingsLike = Optional[Union[ArrearsSettings, GlobalSettings]]


def resolve_arrears_settings(settings: SettingsLike = None) -> ArrearsSettings:
    """Accept arrears settings, global settings or nothing (defaults)."""
    if settings is None:
        return ArrearsSettings()
    if isinstance(settings, GlobalSettings):
        return settings.arrears
    return settings


def is_critical(days_overdue: int, settings: SettingsLike = None) -> bool:
    """True when an arrears position is past the critical threshold (default: > 30 days)."""
    return days_overdue > resolve_arrears_settings(settings).critical_threshold_days


def classify_severity(days_overdue: int, settings: SettingsLike = None) -> ArrearsSeverityEnum:
    """
    Label an arrears position by how long it has been outstanding.

    With the default thresholds: up to 30 days is Overdue, 31-60 is Urgent,
    anything older is Critical.
    """
    cfg = resolve_arrears_settings(settings)
    if days_overdue > cfg.severe_threshold_days:
        return ArrearsSeverityEnum.CRITICAL
    if days_overdue > cfg.critical_threshold_days:
        return ArrearsSeverityEnum.URGENT
    return ArrearsSeverityEnum.OVERDUE


def compute_arrears(
    transactions: Iterable[TransactionLike],
    as_of: Optional[date] = None,
    *,
    tenancies: Optional[Iterable[TenancyLike]] = None,
    settings: SettingsLike = None,
) -> List[ArrearEntry]:
    """
    Compute one arrears entry per tenancy with overdue charges.

    A charge is overdue when it is not paid or waived, still has money
    outstanding, and fell due on or before ``as_of``. Charges scheduled for
    later dates are ignored.

    Args:
        transactions: Transactions for one owner (or one tenancy), as models
            or raw store documents
        as_of: Reference date; defaults to today
        tenancies: Optional tenancies used to fill in tenant and property ids
            missing from the transactions
        settings: Arrears thresholds (critical flag and severity)

    Returns:
        Entries ordered by tenancy id. Tenancies with nothing overdue are
        omitted. Sort with ``sort_by_days_overdue`` or ``sort_by_amount_owed``
        for display.

    Raises:
        DataIntegrityError: If any record is malformed. Records are never
            skipped, so an integrity problem cannot masquerade as zero arrears.
    """
    as_of = today() if as_of is None else coerce_date(as_of)
    cfg = resolve_arrears_settings(settings)
    records = coerce_transactions(transactions)
    tenancy_index: Dict[str, Tenancy] = (
        {t.id: t for t in coerce_tenancies(tenancies)} if tenancies is not None else {}
    )

    overdue: Dict[str, List[RevenueTransaction]] = defaultdict(list)
    for tx in records:
        if tx.is_overdue(as_of):
            overdue[tx.tenancy_id].append(tx)

    entries: List[ArrearEntry] = []
    for tenancy_id in sorted(overdue):
        charges = sorted(overdue[tenancy_id], key=lambda tx: (tx.due_date, tx.id))
        earliest_due = charges[0].due_date
        days_overdue = max(0, days_between(earliest_due, as_of))
        tenancy = tenancy_index.get(tenancy_id)

        tenant_id = next((tx.tenant_id for tx in charges if tx.tenant_id), None)
        property_id = next((tx.property_id for tx in charges if tx.property_id), None)
        if tenancy is not None:
            tenant_id = tenant_id or tenancy.tenant_id
            property_id = property_id or tenancy.property_id

        entries.append(
            ArrearEntry(
                tenancy_id=tenancy_id,
                tenant_id=tenant_id,
                property_id=property_id,
                due_date=earliest_due,
                amount_owed=math.fsum(tx.outstanding for tx in charges),
                days_overdue=days_overdue,
                transaction_count=len(charges),
                severity=classify_severity(days_overdue, cfg),
                is_critical=is_critical(days_overdue, cfg),
            )
        )

    logger.debug(
        f"compute_arrears as of {as_of}: {len(records)} transactions, "
        f"{len(entries)} tenancies in arrears"
    )
    return entries


def aggregate_portfolio_arrears(
    entries: Sequence[ArrearEntry], settings: SettingsLike = None
) -> PortfolioArrears:
    """
    Summarise arrears entries for a portfolio.

    Returns:
        Total owed, number of tenancies in arrears, the longest days overdue
        (0 when there are no entries) and how many entries are critical.
    """
    cfg = resolve_arrears_settings(settings)
    return PortfolioArrears(
        total_arrears=math.fsum(e.amount_owed for e in entries),
        count=len(entries),
        longest_overdue_days=max((e.days_overdue for e in entries), default=0),
        critical_count=sum(1 for e in entries if is_critical(e.days_overdue, cfg)),
    )


def critical_entries(
    entries: Sequence[ArrearEntry], settings: SettingsLike = None
) -> List[ArrearEntry]:
    """Entries past the critical threshold, longest outstanding first."""
    cfg = resolve_arrears_settings(settings)
    return sort_by_days_overdue(e for e in entries if is_critical(e.days_overdue, cfg))


def sort_by_days_overdue(entries: Iterable[ArrearEntry]) -> List[ArrearEntry]:
    """Longest outstanding first; ties broken by amount owed, then tenancy id."""
    return sorted(entries, key=lambda e: (-e.days_overdue, -e.amount_owed, e.tenancy_id))


def sort_by_amount_owed(entries: Iterable[ArrearEntry]) -> List[ArrearEntry]:
    """Largest debt first; ties broken by days overdue, then tenancy id."""
    return sorted(entries, key=lambda e: (-e.amount_owed, -e.days_overdue, e.tenancy_id))
