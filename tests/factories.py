# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Record factories for PropTraka testing.

Factories build tenancies and transactions with sensible defaults so each
test only spells out the fields it cares about.
"""

from __future__ import annotations

import random
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from proptraka.core.primitives import (
    TransactionStatusEnum,
    TransactionTypeEnum,
)
from proptraka.models import RevenueTransaction, Tenancy

OWNER_ID = "owner-1"


# Record factories
def make_tenancy(**overrides: Any) -> Tenancy:
    """
    Create a tenancy for testing.

    Example:
        >>> tenancy = make_tenancy(id="t-9", end_date=None)
        >>> tenancy.is_open_ended
        True
    """
    data: Dict[str, Any] = {
        "id": "t-1",
        "owner_id": OWNER_ID,
        "property_id": "p-1",
        "tenant_id": "n-1",
        "start_date": date(2025, 1, 1),
        "end_date": date(2025, 12, 31),
        "rent_amount": 45000.0,
    }
    data.update(overrides)
    return Tenancy(**data)


def make_transaction(
    due_date: date,
    status: TransactionStatusEnum = TransactionStatusEnum.PENDING,
    amount: float = 45000.0,
    tx_id: Optional[str] = None,
    **overrides: Any,
) -> RevenueTransaction:
    """Create a rent charge for tenancy ``t-1``; paid charges get a payment date."""
    data: Dict[str, Any] = {
        "id": tx_id or f"tx-{due_date.isoformat()}",
        "tenancy_id": "t-1",
        "property_id": "p-1",
        "tenant_id": "n-1",
        "owner_id": OWNER_ID,
        "amount": amount,
        "due_date": due_date,
        "status": status,
        "type": TransactionTypeEnum.RENT,
    }
    if status == TransactionStatusEnum.PAID:
        data["payment_date"] = due_date
        data["amount_paid"] = amount
    data.update(overrides)
    return RevenueTransaction(**data)


def random_transactions(seed: int, count: int = 25) -> List[RevenueTransaction]:
    """Seeded random mix of statuses, amounts and due dates across three tenancies."""
    rng = random.Random(seed)
    statuses = list(TransactionStatusEnum)
    records = []
    for i in range(count):
        status = rng.choice(statuses)
        amount = float(rng.randint(1, 200) * 500)
        due = date(2025, 1, 1) + timedelta(days=rng.randint(0, 364))
        extra: Dict[str, Any] = {}
        if status == TransactionStatusEnum.PARTIAL:
            extra["amount_paid"] = amount / 2
        records.append(
            make_transaction(
                due,
                status=status,
                amount=amount,
                tx_id=f"rnd-{seed}-{i}",
                tenancy_id=f"t-{i % 3 + 1}",
                **extra,
            )
        )
    return records


