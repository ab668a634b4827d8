"""Mock tax line provider (one line per entity at the region rate)."""

from decimal import Decimal
from typing import List

from ..models import (
    LineItem,
    LineItemTaxLine,
    ShippingMethodTaxLine,
    TaxCalculationContext,
    TaxLinesMap,
)
from .base import TaxLineProvider


class MockTaxLineProvider(TaxLineProvider):
    async def get_tax_lines_map(self, items: List[LineItem], context: TaxCalculationContext) -> TaxLinesMap:
        rate = context.region.tax_rate if context.region else Decimal("0")
        return TaxLinesMap(
            line_items_tax_lines={
                item.id: [LineItemTaxLine(item_id=item.id, rate=rate, name="default", code="default")]
                for item in items
            },
            shipping_methods_tax_lines={
                sm.id: [ShippingMethodTaxLine(shipping_method_id=sm.id, rate=rate, name="default", code="default")]
                for sm in context.shipping_methods
            },
        )
