# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Error kinds raised by the engine, the stores and the service layer.

Rejected termination requests are not exceptions: they come back as
``ValidationError`` records on the plan (see ``proptraka.models.arrears``)
so a form can show every problem at once. ``TerminationRejected`` is raised
only when a caller tries to apply such a plan anyway.
"""

from __future__ import annotations

from typing import Optional, Sequence


class PropTrakaError(Exception):
    """Base class for all PropTraka errors."""


class DataIntegrityError(PropTrakaError, ValueError):
    """
    A stored record is malformed (missing or unparseable dates, bad amounts).

    Raised loudly instead of skipping the record: dropping it would hide real
    debt from the arrears figures.
    """

    def __init__(self, message: str, record_id: Optional[str] = None):
        self.record_id = record_id
        if record_id is not None:
            message = f"record {record_id!r}: {message}"
        super().__init__(message)


class InvalidTransitionError(PropTrakaError, ValueError):
    """A status change that the lifecycle does not allow."""

    def __init__(self, entity: str, current: object, target: object):
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__(f"{entity} cannot move from {current} to {target}")


class TerminationRejected(PropTrakaError, ValueError):
    """An early termination plan with validation errors was submitted."""

    def __init__(self, tenancy_id: str, messages: Sequence[str]):
        self.tenancy_id = tenancy_id
        self.messages = list(messages)
        super().__init__(
            f"termination of tenancy {tenancy_id!r} rejected: " + "; ".join(self.messages)
        )


class NotFoundError(PropTrakaError, KeyError):
    """A record does not exist within the requesting owner's scope."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "record not found"


class PreconditionFailure(PropTrakaError, RuntimeError):
    """
    The snapshot a change was planned from is stale.

    Raised by a store at commit time. Nothing has been applied; the caller
    must re-fetch, re-plan and try again.
    """
