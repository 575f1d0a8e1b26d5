# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base Pydantic model with common configuration.

    Immutable records. Stores and services hold the mutable state and swap in
    updated, re-validated copies.
    """

    model_config = ConfigDict(
        frozen=True,  # Records are snapshots; mutations produce new instances
        slots=True,
        extra="forbid",  # Document adapters drop bookkeeping keys before validation
    )
