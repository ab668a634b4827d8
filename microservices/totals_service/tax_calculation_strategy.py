"""
Default tax calculation strategy.

Sums tax for line items and for the shipping methods carried by the
calculation context. Line item tax is rounded per tax line; shipping tax is
summed unrounded and the grand total is rounded once.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Sequence

from .models import (
    LineItem,
    LineItemTaxLine,
    ShippingMethod,
    ShippingMethodTaxLine,
    TaxCalculationContext,
)
from .pricing_utils import calculate_price_tax_amount, percent_to_rate, round_half_up
from .protocols import TaxLines

logger = logging.getLogger(__name__)


class DefaultTaxCalculationStrategy:
    """Tax calculation strategy used when no other strategy is configured"""

    async def calculate(
        self,
        items: List[LineItem],
        tax_lines: TaxLines,
        context: TaxCalculationContext,
    ) -> Decimal:
        line_items_tax_lines = [tl for tl in tax_lines if isinstance(tl, LineItemTaxLine)]
        shipping_methods_tax_lines = [tl for tl in tax_lines if isinstance(tl, ShippingMethodTaxLine)]

        line_items_tax = self.calculate_line_items_tax(items, line_items_tax_lines, context)
        shipping_methods_tax = self.calculate_shipping_methods_tax(
            context.shipping_methods, shipping_methods_tax_lines, context
        )

        return Decimal(round_half_up(line_items_tax + shipping_methods_tax))

    def calculate_line_items_tax(
        self,
        items: Sequence[LineItem],
        tax_lines: Sequence[LineItemTaxLine],
        context: TaxCalculationContext,
    ) -> Decimal:
        lines_by_item: Dict[str, List[LineItemTaxLine]] = {}
        for tax_line in tax_lines:
            lines_by_item.setdefault(tax_line.item_id, []).append(tax_line)

        tax_total = Decimal("0")
        for item in items:
            item_tax_lines = lines_by_item.get(item.id, [])
            allocation = context.allocation_map.get(item.id)
            includes_tax = context.tax_inclusive_pricing and item.includes_tax

            if includes_tax:
                combined_rate = sum(
                    (percent_to_rate(tl.rate) for tl in item_tax_lines), Decimal("0")
                )
                tax_included_in_price = round_half_up(
                    calculate_price_tax_amount(item.unit_price, combined_rate, includes_tax)
                )
                taxable_amount = Decimal((item.unit_price - tax_included_in_price) * item.quantity)
            else:
                taxable_amount = Decimal(item.unit_price * item.quantity)

            if allocation is not None and allocation.discount is not None:
                taxable_amount -= allocation.discount.amount

            for tax_line in item_tax_lines:
                tax_total += round_half_up(
                    calculate_price_tax_amount(taxable_amount, percent_to_rate(tax_line.rate))
                )

        return tax_total

    def calculate_shipping_methods_tax(
        self,
        shipping_methods: Sequence[ShippingMethod],
        tax_lines: Sequence[ShippingMethodTaxLine],
        context: TaxCalculationContext,
    ) -> Decimal:
        tax_total = Decimal("0")
        for shipping_method in shipping_methods:
            includes_tax = context.tax_inclusive_pricing and shipping_method.includes_tax
            for tax_line in tax_lines:
                if tax_line.shipping_method_id != shipping_method.id:
                    continue
                tax_total += calculate_price_tax_amount(
                    shipping_method.price, percent_to_rate(tax_line.rate), includes_tax
                )

        return tax_total
