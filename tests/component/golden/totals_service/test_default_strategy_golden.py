"""
Totals Service Component Golden Tests - Default Tax Calculation Strategy
"""
import pytest
from decimal import Decimal

from microservices.totals_service.tax_calculation_strategy import DefaultTaxCalculationStrategy
from tests.fixtures import (
    make_allocation,
    make_context,
    make_line_item,
    make_shipping_method,
    make_shipping_method_tax_line,
)

pytestmark = [pytest.mark.component, pytest.mark.golden, pytest.mark.asyncio]


@pytest.fixture
def strategy():
    return DefaultTaxCalculationStrategy()


class TestDefaultStrategyGolden:

    async def test_rounds_each_tax_line(self, strategy):
        """GOLDEN: 999 at 5% and 7.5% -> 50 + 75"""
        item = make_line_item(unit_price=999, tax_rates=[5, Decimal("7.5")])

        tax = await strategy.calculate([item], item.tax_lines, make_context())

        assert tax == 125

    async def test_discount_amount_reduces_taxable_amount(self, strategy):
        item = make_line_item(unit_price=1000, quantity=2, tax_rates=[10])
        context = make_context(allocation_map={item.id: make_allocation(100, quantity=2)})

        assert await strategy.calculate([item], item.tax_lines, context) == 180
        assert await strategy.calculate([item], item.tax_lines, context.without_discounts()) == 200

    async def test_tax_inclusive_item(self, strategy):
        item = make_line_item(unit_price=1100, includes_tax=True, tax_rates=[10])

        tax = await strategy.calculate([item], item.tax_lines, make_context(tax_inclusive_pricing=True))

        assert tax == 100

    async def test_includes_tax_ignored_without_flag(self, strategy):
        item = make_line_item(unit_price=1100, includes_tax=True, tax_rates=[10])

        assert await strategy.calculate([item], item.tax_lines, make_context()) == 110

    async def test_tax_lines_of_other_items_ignored(self, strategy):
        item = make_line_item(unit_price=1000, tax_rates=[10])
        other = make_line_item(unit_price=5000, tax_rates=[20])

        tax = await strategy.calculate([item], item.tax_lines + other.tax_lines, make_context())

        assert tax == 100

    async def test_shipping_tax_from_context_methods(self, strategy):
        """GOLDEN: shipping tax sums unrounded, total rounds once"""
        first = make_shipping_method(price=505)
        second = make_shipping_method(price=505)
        tax_lines = [
            make_shipping_method_tax_line(first.id, 10),
            make_shipping_method_tax_line(second.id, 10),
        ]

        tax = await strategy.calculate([], tax_lines, make_context(shipping_methods=[first, second]))

        # 50.5 + 50.5
        assert tax == 101

    async def test_no_tax_lines(self, strategy):
        item = make_line_item(unit_price=1000, tax_rates=[])

        assert await strategy.calculate([item], [], make_context()) == 0
