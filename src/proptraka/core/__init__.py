# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
PropTraka Core

Primitives and error kinds shared by the arrears engine, the tenancy
lifecycle helpers, the stores and the service layer.
"""

from .errors import (
    DataIntegrityError,
    InvalidTransitionError,
    NotFoundError,
    PreconditionFailure,
    PropTrakaError,
    TerminationRejected,
)

__all__ = [
    "DataIntegrityError",
    "InvalidTransitionError",
    "NotFoundError",
    "PreconditionFailure",
    "PropTrakaError",
    "TerminationRejected",
]
