# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from decimal import Decimal

import pytest

from fabledger.core.calculations import (
    OrderItem,
    item_total,
    order_totals,
    pending_balance,
    percentage,
    profit_margin,
    progress_percentage,
    quantize,
    roi,
    safe_ratio,
    to_decimal,
)


def test_to_decimal_avoids_float_drift():
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal("12.50") == Decimal("12.50")


def test_quantize_rounds_half_up():
    assert quantize(Decimal("2.345")) == Decimal("2.35")
    assert quantize(Decimal("-2.345")) == Decimal("-2.35")
    assert quantize(Decimal("1.5"), places=0) == Decimal("2")


def test_percentage_of_zero_is_zero():
    assert percentage(50, 0) == Decimal("0.00")
    assert percentage(1, 3) == Decimal("33.33")


def test_item_total_applies_discount():
    assert item_total(3, "100", discount=10) == Decimal("270.00")


def test_order_totals():
    """Test line discount, then global discount, then tax."""
    items = [
        OrderItem(Decimal("2"), Decimal("100")),
        OrderItem(Decimal("1"), Decimal("50"), Decimal("20")),
    ]
    totals = order_totals(items, global_discount=10, tax_rate=21)

    assert totals.subtotal == Decimal("240.00")
    assert totals.discount_total == Decimal("24.00")
    assert totals.taxes == Decimal("45.36")
    assert totals.total == Decimal("261.36")


def test_order_totals_empty():
    assert order_totals([]).total == Decimal("0.00")


def test_balance_helpers():
    assert pending_balance("1000", "250.5") == Decimal("749.50")
    assert progress_percentage(250, 1000) == Decimal("25.00")
    assert progress_percentage(10, 0) == Decimal("0.00")


def test_profit_margin():
    margin = profit_margin(200, 150)
    assert margin.margin == Decimal("50.00")
    assert margin.percentage == Decimal("25.00")


def test_roi():
    assert roi(400, 100) == Decimal("25.00")
    assert roi(0, 100) == Decimal("0.00")


class TestSafeRatio:
    def test_regular_division(self):
        assert safe_ratio(10, 4) == Decimal("2.5")

    @pytest.mark.parametrize(
        "numerator, expected",
        [(5, Decimal("Infinity")), (-5, Decimal("-Infinity"))],
    )
    def test_zero_denominator_is_signed_infinity(self, numerator, expected):
        assert safe_ratio(numerator, 0) == expected

    def test_zero_over_zero_is_none(self):
        assert safe_ratio(0, 0) is None
