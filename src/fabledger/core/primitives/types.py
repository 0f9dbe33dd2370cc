# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from decimal import Decimal
from typing import Annotated

from pydantic import Field

# constrained types
PositiveInt = Annotated[int, Field(strict=True, ge=0)]
NonNegativeDecimal = Annotated[Decimal, Field(ge=0)]
# Ratios may be +/-Infinity when their denominator is zero
RatioDecimal = Annotated[Decimal, Field(allow_inf_nan=True)]
