# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from decimal import Decimal

from pydantic import Field, model_validator

from .enums import Currency
from .model import Model
from .types import PositiveInt


class AgingSettings(Model):
    """
    Day thresholds for classifying outstanding balances by age.

    A balance aged up to `current_days` (inclusive) is current, up to
    `mid_days` (inclusive) falls in the second bucket, below `overdue_days`
    in the third, and anything at or past `overdue_days` is in the last,
    unbounded bucket.
    """

    current_days: PositiveInt = Field(
        default=30, description="Last day (inclusive) of the current bucket."
    )
    mid_days: PositiveInt = Field(
        default=60, description="Last day (inclusive) of the second bucket."
    )
    overdue_days: PositiveInt = Field(
        default=90, description="First day of the unbounded overdue bucket."
    )

    @model_validator(mode="after")
    def validate_thresholds(self) -> "AgingSettings":
        if not (self.current_days < self.mid_days < self.overdue_days):
            raise ValueError(
                "Aging thresholds must be strictly increasing: "
                f"{self.current_days} < {self.mid_days} < {self.overdue_days}"
            )
        return self


class ReportingSettings(Model):
    """Settings related to report generation and display."""

    decimal_precision: PositiveInt = Field(
        default=2, description="Number of decimal places for currency values."
    )
    default_currency: Currency = Field(
        default=Currency.LOCAL, description="Currency reports are generated in."
    )
    top_n: PositiveInt = Field(
        default=5, description="Number of clients/suppliers in ranking tables."
    )
    profitability_limit: PositiveInt = Field(
        default=10, description="Maximum projects listed in profitability tables."
    )
    projection_months: PositiveInt = Field(
        default=3, description="Number of months projected forward."
    )
    projection_lookback: PositiveInt = Field(
        default=3, ge=1, description="Trailing periods averaged for projections."
    )
    due_soon_days: PositiveInt = Field(
        default=7, description="Days ahead within which a cheque is 'due soon'."
    )
    period_days: PositiveInt = Field(
        default=30, ge=1, description="Days represented by one ratio period."
    )
    target_cost_share: Decimal = Field(
        default=Decimal("0.7"),
        gt=0,
        le=1,
        description="Share of a project's total expected to go to costs.",
    )


class CurrencySettings(Model):
    """Exchange and formatting settings for the two operating currencies."""

    usd_exchange_rate: Decimal = Field(
        default=Decimal("1250"),
        gt=0,
        description="Local currency units per US dollar when none is recorded.",
    )
    grouping_separator: str = Field(default=".", max_length=1)
    decimal_separator: str = Field(default=",", max_length=1)


class GlobalSettings(Model):
    """
    Aggregate settings passed explicitly to aggregators and report builders.

    Usage Examples:
        # Defaults (30/60/90 aging, two decimals, local currency)
        settings = GlobalSettings()

        # Longer first aging bucket for slow-paying commercial clients
        settings = GlobalSettings(
            aging=AgingSettings(current_days=45, mid_days=75, overdue_days=120)
        )
    """

    aging: AgingSettings = Field(default_factory=AgingSettings)
    reporting: ReportingSettings = Field(default_factory=ReportingSettings)
    currency: CurrencySettings = Field(default_factory=CurrencySettings)
