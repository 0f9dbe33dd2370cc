# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Configuration settings for the transaction ledger.
"""

from pydantic import BaseModel, ConfigDict, Field


class LedgerSettings(BaseModel):
    """
    Controls how a Ledger accepts records and materializes its DataFrame.
    """

    skip_zero_amounts: bool = Field(
        default=False,
        description="Drop transactions whose amount is exactly zero on insert",
    )

    use_categorical_dtypes: bool = Field(
        default=True,
        description="Use pandas Categorical dtypes for enum columns to save memory",
    )

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",  # Prevent typos in field names
    )
