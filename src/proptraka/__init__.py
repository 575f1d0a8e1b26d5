# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
PropTraka - Rent Arrears and Tenancy Lifecycle Engine

Derives who is overdue, by how much and for how long from a landlord's
tenancies and revenue transactions, and plans what happens to scheduled
charges when a tenancy ends early.

Key Entry Points:
- proptraka.arrears.compute_arrears() - per-tenancy arrears as of a date
- proptraka.arrears.aggregate_portfolio_arrears() - portfolio totals
- proptraka.tenancy.plan_early_termination() - which charges to cancel
- proptraka.tenancy.generate_rent_schedule() - billing for a new tenancy
- proptraka.service.PortfolioService - store-backed, owner-scoped workflows

Example Usage:
    ```python
    from datetime import date
    from proptraka.arrears import aggregate_portfolio_arrears, compute_arrears

    entries = compute_arrears(transactions, as_of=date(2025, 3, 15))
    summary = aggregate_portfolio_arrears(entries)
    print(f"Total arrears: {summary.total_arrears:,.2f} across {summary.count} tenancies")
    ```
"""

import importlib
import logging

# Libraries leave handler configuration to the application.
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Public API surface (lazy-loaded on first attribute access)
__all__ = [  # noqa: F822 - lazy loading
    "arrears",
    "core",
    "models",
    "reporting",
    "service",
    "store",
    "tenancy",
]


_LAZY_MODULES = {
    "arrears": "proptraka.arrears",
    "core": "proptraka.core",
    "models": "proptraka.models",
    "reporting": "proptraka.reporting",
    "service": "proptraka.service",
    "store": "proptraka.store",
    "tenancy": "proptraka.tenancy",
}


def __getattr__(name: str):
    module_path = _LAZY_MODULES.get(name)
    if module_path is None:
        raise AttributeError(f"module 'proptraka' has no attribute '{name}'")
    module = importlib.import_module(module_path)
    globals()[name] = module
    return module
