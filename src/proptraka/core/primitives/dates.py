# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Date helpers shared by the arrears and tenancy modules.

Stored documents carry dates in several shapes (ISO strings, datetimes from
the document store, pandas Timestamps). Everything is normalised to
``datetime.date`` at the model boundary so the calculations only ever do
whole-day arithmetic.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime
from typing import Any, Optional

import pandas as pd
from dateutil.parser import isoparse

# Full calendar date (YYYY-MM-DD or YYYYMMDD), optionally followed by a time
_ISO_CALENDAR_DATE = re.compile(r"\d{4}-?\d{2}-?\d{2}($|[T ])")


def coerce_date(value: Any) -> date:
    """
    Normalise a date-like value to ``datetime.date``.

    Args:
        value: date, datetime, pandas Timestamp or ISO-8601 string

    Returns:
        The calendar date (time of day is discarded)

    Raises:
        ValueError: If the value is missing or cannot be parsed
    """
    if value is None or value is pd.NaT:
        raise ValueError("date is required")
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("date is required")
        if not _ISO_CALENDAR_DATE.match(text):
            raise ValueError(f"not an ISO-8601 calendar date: {value!r}")
        try:
            return isoparse(text).date()
        except (ValueError, OverflowError) as e:
            raise ValueError(f"unparseable date: {value!r}") from e
    raise ValueError(f"unsupported date value: {value!r}")


def coerce_optional_date(value: Any) -> Optional[date]:
    """Like ``coerce_date`` but lets ``None`` (and empty strings) through."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return coerce_date(value)


def days_between(start: date, end: date) -> int:
    """Whole days from ``start`` to ``end`` (negative if ``end`` is earlier)."""
    return (end - start).days


def safe_month_date(year: int, month: int, day: int) -> date:
    """Date in the given month, clamping ``day`` to the month's last day."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def days_in_month(value: date) -> int:
    return calendar.monthrange(value.year, value.month)[1]


def month_end(value: date) -> date:
    return date(value.year, value.month, days_in_month(value))


def today() -> date:
    """Current calendar date. Isolated so callers have one place to patch."""
    return date.today()
