# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import Field

from ..core.primitives import Model


class ChangeActionEnum(str, Enum):
    CREATED = "Created"
    UPDATED = "Updated"
    ENDED = "Ended"
    PAYMENT = "Payment"
    WAIVED = "Waived"


class ChangeLogEntry(Model):
    """Audit record of a lifecycle mutation, shown in the activity feed."""

    owner_id: str
    entity_type: str
    entity_id: str
    action: ChangeActionEnum
    description: str
    recorded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
