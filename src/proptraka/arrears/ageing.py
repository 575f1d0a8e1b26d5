# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Arrears ageing breakdown.

Buckets outstanding amounts by how long each charge has been past due
(0-30, 31-60, 61-90, 90+ days with the default edges). Unlike the per-tenancy
arrears entries, ageing works charge by charge: one tenancy's debt can span
several buckets.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional

import numpy as np
import pandas as pd

from ..core.primitives import coerce_date, today
from .calculator import SettingsLike, resolve_arrears_settings
from .frame import TransactionLike, transactions_frame

logger = logging.getLogger(__name__)


def ageing_bucket_labels(settings: SettingsLike = None) -> List[str]:
    """
    Labels for the configured bucket edges.

    Example:
        >>> ageing_bucket_labels()
        ['0-30 Days', '31-60 Days', '61-90 Days', '90+ Days']
    """
    edges = resolve_arrears_settings(settings).ageing_bucket_edges
    labels = [f"0-{edges[0]} Days"]
    labels += [f"{lower + 1}-{upper} Days" for lower, upper in zip(edges, edges[1:])]
    labels.append(f"{edges[-1]}+ Days")
    return labels


def arrears_ageing(
    transactions: Iterable[TransactionLike],
    as_of: Optional[date] = None,
    settings: SettingsLike = None,
) -> pd.Series:
    """
    Sum outstanding amounts per ageing bucket.

    Only charges strictly past due (due before ``as_of``) with money still
    outstanding are counted.

    Returns:
        Series indexed by bucket label, in bucket order. Every bucket is
        present; empty buckets hold 0.0.

    Raises:
        DataIntegrityError: If any record is malformed
    """
    as_of = today() if as_of is None else coerce_date(as_of)
    cfg = resolve_arrears_settings(settings)
    labels = ageing_bucket_labels(cfg)

    frame = transactions_frame(transactions)
    past_due = frame[
        (frame["outstanding"] > 0) & (frame["due_date"] < pd.Timestamp(as_of))
    ].copy()

    if past_due.empty:
        return pd.Series(0.0, index=pd.Index(labels, name="bucket"), name="outstanding")

    past_due["days_overdue"] = (pd.Timestamp(as_of) - past_due["due_date"]).dt.days
    bins = [0, *cfg.ageing_bucket_edges, np.inf]
    past_due["bucket"] = pd.cut(
        past_due["days_overdue"], bins=bins, labels=labels, right=True
    )

    ageing = (
        past_due.groupby("bucket", observed=False)["outstanding"]
        .sum()
        .reindex(labels, fill_value=0.0)
        .astype("float64")
    )
    ageing.index = pd.Index(labels, name="bucket")
    ageing.name = "outstanding"

    logger.debug(f"arrears_ageing as of {as_of}: {ageing.to_dict()}")
    return ageing
