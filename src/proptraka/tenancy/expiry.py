# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

import pandas as pd

from ..arrears.frame import TenancyLike, coerce_tenancies
from ..core.primitives import LEASE_EXPIRY_WINDOW_MONTHS, coerce_date, today
from ..models import Tenancy


def expiring_tenancies(
    tenancies: Iterable[TenancyLike],
    as_of: Optional[date] = None,
    months: int = LEASE_EXPIRY_WINDOW_MONTHS,
) -> List[Tenancy]:
    """
    Active tenancies whose end date falls from ``as_of`` through the end of
    the ``months``-th calendar month (counting the current month as the first).

    Ordered by end date, then id. Open-ended tenancies never expire.
    """
    if months < 1:
        raise ValueError(f"months must be at least 1, got {months}")
    as_of = today() if as_of is None else coerce_date(as_of)
    last_period = pd.Period(as_of, freq="M") + (months - 1)
    window_end = last_period.end_time.date()

    return sorted(
        (
            t
            for t in coerce_tenancies(tenancies)
            if t.is_active and t.end_date is not None and as_of <= t.end_date <= window_end
        ),
        key=lambda t: (t.end_date, t.id),
    )


def lease_expiry_profile(
    tenancies: Iterable[TenancyLike],
    as_of: Optional[date] = None,
    months: int = LEASE_EXPIRY_WINDOW_MONTHS,
) -> pd.Series:
    """
    Count of active leases ending in each of the next ``months`` calendar months.

    Returns:
        Integer Series on a monthly PeriodIndex starting at the ``as_of``
        month; months with no expiries hold 0.
    """
    as_of = today() if as_of is None else coerce_date(as_of)
    index = pd.period_range(start=pd.Period(as_of, freq="M"), periods=months, freq="M")
    expiring = expiring_tenancies(tenancies, as_of, months)

    counts = pd.Series(0, index=index, name="expiring_leases", dtype="int64")
    for tenancy in expiring:
        counts.loc[pd.Period(tenancy.end_date, freq="M")] += 1
    return counts
