# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Shared pytest fixtures for PropTraka testing.
"""

from __future__ import annotations

from datetime import date
from typing import List

import pytest

from proptraka.core.primitives import GlobalSettings, TransactionStatusEnum
from proptraka.models import RevenueTransaction, Tenancy
from proptraka.store import InMemoryStore

from tests.factories import make_tenancy, make_transaction


# Pytest Fixtures
@pytest.fixture
def sample_settings() -> GlobalSettings:
    """Default global settings."""
    return GlobalSettings()


@pytest.fixture
def sample_tenancy() -> Tenancy:
    """Monthly tenancy for 2025 at 45,000 per month."""
    return make_tenancy()


@pytest.fixture
def arrears_transactions() -> List[RevenueTransaction]:
    """Two overdue January/February charges and a paid March charge."""
    return [
        make_transaction(date(2025, 1, 1), TransactionStatusEnum.OVERDUE),
        make_transaction(date(2025, 2, 1), TransactionStatusEnum.OVERDUE),
        make_transaction(date(2025, 3, 1), TransactionStatusEnum.PAID),
    ]


@pytest.fixture
def termination_transactions() -> List[RevenueTransaction]:
    """A paid May charge and a pending July charge."""
    return [
        make_transaction(date(2025, 5, 1), TransactionStatusEnum.PAID),
        make_transaction(date(2025, 7, 1), TransactionStatusEnum.PENDING),
    ]


@pytest.fixture
def populated_store(sample_tenancy, arrears_transactions) -> InMemoryStore:
    """In-memory store holding the sample tenancy and its arrears transactions."""
    store = InMemoryStore()
    store.add_tenancy(sample_tenancy)
    store.add_transactions(arrears_transactions)
    return store
