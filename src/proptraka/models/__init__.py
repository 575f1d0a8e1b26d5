# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Domain records: stored tenancies and transactions, plus the derived arrears
and termination results.
"""

from .arrears import ArrearEntry, PortfolioArrears, TerminationPlan, ValidationError
from .changelog import ChangeActionEnum, ChangeLogEntry
from .tenancy import Tenancy
from .transaction import RevenueTransaction

__all__ = [
    "ArrearEntry",
    "ChangeActionEnum",
    "ChangeLogEntry",
    "PortfolioArrears",
    "RevenueTransaction",
    "Tenancy",
    "TerminationPlan",
    "ValidationError",
]
