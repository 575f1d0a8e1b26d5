# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Service layer: owner-scoped orchestration of stores and the arrears engine.
"""

from .portfolio import PortfolioService

__all__ = ["PortfolioService"]
