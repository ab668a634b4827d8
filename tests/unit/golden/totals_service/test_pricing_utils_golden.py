"""
Totals Service - Unit Tests (Golden)

Tests for:
- round_half_up rounding semantics
- calculate_price_tax_amount (exclusive and inclusive prices)
- percent_to_rate conversion
"""

import pytest
from decimal import Decimal

from microservices.totals_service.pricing_utils import (
    calculate_price_tax_amount,
    percent_to_rate,
    round_half_up,
)

pytestmark = [pytest.mark.unit, pytest.mark.golden]


# ============================================================================
# round_half_up
# ============================================================================

class TestRoundHalfUp:
    """Round to nearest integer, halves toward positive infinity"""

    @pytest.mark.parametrize("value,expected", [
        (Decimal("0"), 0),
        (Decimal("1.4"), 1),
        (Decimal("1.5"), 2),
        (Decimal("2.5"), 3),
        (Decimal("99.99"), 100),
        (Decimal("-1.4"), -1),
        (Decimal("-2.5"), -2),
        (Decimal("-2.6"), -3),
        (7, 7),
    ])
    def test_rounding(self, value, expected):
        assert round_half_up(value) == expected

    def test_returns_int(self):
        assert isinstance(round_half_up(Decimal("3.2")), int)


# ============================================================================
# calculate_price_tax_amount
# ============================================================================

class TestCalculatePriceTaxAmount:
    """Tax amount added on top of, or embedded in, a price"""

    def test_exclusive_price(self):
        assert calculate_price_tax_amount(1000, Decimal("0.1")) == Decimal("100")

    def test_inclusive_price_backs_out_embedded_tax(self):
        assert calculate_price_tax_amount(1100, Decimal("0.1"), includes_tax=True) == Decimal("100")

    def test_inclusive_price_fractional_result(self):
        result = calculate_price_tax_amount(1000, Decimal("0.25"), includes_tax=True)
        assert result == Decimal("200")

    def test_zero_rate(self):
        assert calculate_price_tax_amount(1000, Decimal("0"), includes_tax=True) == 0
        assert calculate_price_tax_amount(1000, Decimal("0")) == 0

    def test_inclusive_rounds_to_nearest_minor_unit(self):
        # 1000 * 0.2 / 1.2 = 166.666...
        result = calculate_price_tax_amount(1000, Decimal("0.2"), includes_tax=True)
        assert round_half_up(result) == 167


class TestPercentToRate:

    def test_integer_percent(self):
        assert percent_to_rate(10) == Decimal("0.1")

    def test_decimal_percent(self):
        assert percent_to_rate(Decimal("12.5")) == Decimal("0.125")
