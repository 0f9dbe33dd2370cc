# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from decimal import Decimal

import pytest

from fabledger.core.primitives import Currency, CurrencySettings
from fabledger.utils import (
    convert_currency,
    currency_symbol,
    format_amount,
    format_number,
    is_valid_amount,
    parse_amount,
)


def test_currency_symbol():
    assert currency_symbol(Currency.LOCAL) == "$"
    assert currency_symbol("DOLARES") == "US$"


class TestFormatting:
    def test_local_grouping(self):
        assert format_amount(Decimal("1234.5")) == "$ 1.234,50"
        assert format_amount(Decimal("1234567.891")) == "$ 1.234.567,89"

    def test_negative_usd(self):
        assert format_amount(-20, Currency.USD) == "-US$ 20,00"

    def test_format_number_custom_separators(self):
        settings = CurrencySettings(grouping_separator=",", decimal_separator=".")
        assert format_number(Decimal("9876.5"), settings=settings) == "9,876.50"

    def test_zero_places(self):
        assert format_number(Decimal("1500.4"), places=0) == "1.500"


class TestConversion:
    def test_same_currency_untouched(self):
        assert convert_currency(Decimal("10.555"), Currency.USD, Currency.USD) == Decimal("10.555")

    def test_default_rate(self):
        assert convert_currency(2, Currency.USD, Currency.LOCAL) == Decimal("2500.00")
        assert convert_currency(1000, Currency.LOCAL, Currency.USD) == Decimal("0.80")

    def test_explicit_rate(self):
        assert convert_currency(3, Currency.USD, Currency.LOCAL, exchange_rate="1000") == Decimal("3000.00")

    def test_non_positive_rate_rejected(self):
        with pytest.raises(ValueError, match="positive"):
            convert_currency(1, Currency.USD, Currency.LOCAL, exchange_rate=0)


class TestParsing:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("$1250.50", Decimal("1250.50")),
            ("US$ 99", Decimal("99")),
            ("-15", Decimal("-15")),
            ("abc", Decimal("0")),
            ("", Decimal("0")),
            ("1.2.3", Decimal("0")),
        ],
    )
    def test_parse_amount(self, text, expected):
        assert parse_amount(text) == expected

    def test_is_valid_amount(self):
        assert is_valid_amount("150.25")
        assert not is_valid_amount("-1")
        assert not is_valid_amount("n/a")
