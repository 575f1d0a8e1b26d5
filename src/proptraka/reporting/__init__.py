# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
PropTraka Reporting

Formatting of computed arrears for tables, exports and text prompts.
"""

from .arrears_report import (
    ARREARS_COLUMNS,
    arrears_report,
    arrears_summary_text,
    arrears_table,
    format_amount,
)

__all__ = [
    "ARREARS_COLUMNS",
    "arrears_report",
    "arrears_summary_text",
    "arrears_table",
    "format_amount",
]
