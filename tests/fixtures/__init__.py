"""
Shared test fixtures and factories.

Usage:
    from tests.fixtures import make_line_item, make_context
"""
from .totals_fixtures import (
    make_line_item_id,
    make_shipping_method_id,
    make_line_item,
    make_line_item_tax_line,
    make_shipping_method,
    make_shipping_method_tax_line,
    make_region,
    make_allocation,
    make_discount,
    make_gift_card,
    make_gift_card_transaction,
    make_context,
)

__all__ = [
    'make_line_item_id',
    'make_shipping_method_id',
    'make_line_item',
    'make_line_item_tax_line',
    'make_shipping_method',
    'make_shipping_method_tax_line',
    'make_region',
    'make_allocation',
    'make_discount',
    'make_gift_card',
    'make_gift_card_transaction',
    'make_context',
]
