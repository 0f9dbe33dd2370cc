# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Reusable Pydantic validation utilities for record models.

This module provides standardized validators for:
- Source-system enum codes (Spanish ERP codes mapped to enum members)
- Date ordering between two fields of a record
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Type

import pandas as pd


class ValidationMixin:
    """
    Mixin class providing reusable validation methods for Pydantic models.

    Inherit alongside `Model` and call these from `model_validator` hooks.
    """

    @classmethod
    def validate_date_ordering(
        cls,
        start_value: Any,
        end_value: Any,
        start_field: str,
        end_field: str,
        allow_equal: bool = True,
    ) -> None:
        """
        Validate that an end date does not precede a start date.

        Args:
            start_value: Value of the start field (None skips the check)
            end_value: Value of the end field (None skips the check)
            start_field: Name of start date field, for the error message
            end_field: Name of end date field, for the error message
            allow_equal: Whether both dates may fall on the same day

        Raises:
            ValueError: If the end date comes before the start date
        """
        if start_value is None or end_value is None:
            return
        start = pd.Timestamp(start_value)
        end = pd.Timestamp(end_value)
        if end < start or (not allow_equal and end == start):
            qualifier = "on or after" if allow_equal else "after"
            raise ValueError(f"{end_field} must be {qualifier} {start_field}")


def coerce_source_code(enum_type: Type[Enum], value: Any) -> Any:
    """
    Resolve a raw enum code (canonical or source-system) to an enum member.

    Non-string values are returned untouched so pydantic reports the type
    error itself. Unknown codes raise ValueError, which pydantic wraps into a
    ValidationError naming the field.
    """
    if isinstance(value, enum_type) or not isinstance(value, str):
        return value
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise ValueError(
            f"Unknown {enum_type.__name__} code '{value}'. Allowed: {allowed}"
        ) from None
