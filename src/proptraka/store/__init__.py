# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Store interfaces and the in-memory reference implementation.
"""

from .base import PortfolioStore, TenancyStore, TransactionStore
from .memory import InMemoryStore

__all__ = [
    "InMemoryStore",
    "PortfolioStore",
    "TenancyStore",
    "TransactionStore",
]
