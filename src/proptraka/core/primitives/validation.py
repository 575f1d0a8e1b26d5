# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Reusable Pydantic validation utilities for the domain records.

This module provides standardized validators for:
- Date ordering (start/end ranges)
- Guarded fields (Y only allowed while X holds)
"""

from __future__ import annotations

from typing import Any, List, Optional, Union


class ValidationMixin:
    """
    Mixin class providing reusable validation methods for Pydantic models.

    Inherit alongside ``Model`` to share common checks without duplicating
    error wording across records.
    """

    @classmethod
    def validate_date_ordering(
        cls,
        data: Any,
        start_field: str,
        end_field: str,
        error_message: Optional[str] = None,
    ) -> Any:
        """
        Validate that the end date does not precede the start date.

        Works on raw dictionaries (``mode="before"``) and on model instances
        (``mode="after"``). Open-ended ranges (missing end) always pass.

        Raises:
            ValueError: If end is earlier than start
        """
        if isinstance(data, dict):
            start_date = data.get(start_field)
            end_date = data.get(end_field)
        else:
            start_date = getattr(data, start_field, None)
            end_date = getattr(data, end_field, None)

        if start_date is not None and end_date is not None and end_date < start_date:
            msg = error_message or f"{end_field} must not be before {start_field}"
            raise ValueError(msg)

        return data

    @classmethod
    def validate_guarded_field(
        cls,
        data: Any,
        guard_field: str,
        allowed_values: Union[Any, List[Any]],
        guarded_field: str,
        error_message: Optional[str] = None,
    ) -> Any:
        """
        Validate that a field is only set while another field holds one of
        the allowed values.

        Args:
            data: Model data dictionary or model instance
            guard_field: Field name whose value is checked
            allowed_values: Value(s) that permit the guarded field
            guarded_field: Field that may only be set under the condition
            error_message: Custom error message

        Raises:
            ValueError: If the guarded field is set while the condition does not hold
        """
        if isinstance(data, dict):
            guard_value = data.get(guard_field)
            guarded_value = data.get(guarded_field)
        else:
            guard_value = getattr(data, guard_field, None)
            guarded_value = getattr(data, guarded_field, None)

        if not isinstance(allowed_values, list):
            allowed_values = [allowed_values]

        if guarded_value is not None and guard_value not in allowed_values:
            msg = error_message or (
                f"{guarded_field} may only be set when {guard_field} is "
                f"one of {allowed_values}"
            )
            raise ValueError(msg)

        return data
