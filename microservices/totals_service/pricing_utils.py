"""
Pricing helpers shared by the totals engine and the tax calculation strategy.
"""

from decimal import Decimal, ROUND_FLOOR
from typing import Union

Number = Union[int, Decimal]

_HALF = Decimal("0.5")


def round_half_up(value: Number) -> int:
    """
    Round to the nearest integer, halves toward positive infinity.

    round_half_up(Decimal("2.5")) == 3, round_half_up(Decimal("-2.5")) == -2
    """
    return int((Decimal(value) + _HALF).to_integral_value(rounding=ROUND_FLOOR))


def calculate_price_tax_amount(
    price: Number,
    tax_rate: Number,
    includes_tax: bool = False,
) -> Decimal:
    """
    Tax amount for a price at a rate given as a fraction (0.1 for 10%).

    When the price already includes tax, the embedded amount is backed out:
    price * rate / (1 + rate). Otherwise it is added on top: price * rate.
    """
    price = Decimal(price)
    tax_rate = Decimal(tax_rate)
    if includes_tax:
        return (tax_rate * price) / (1 + tax_rate)
    return price * tax_rate


def percent_to_rate(percent: Number) -> Decimal:
    """Convert a 0-100 percentage into a fraction"""
    return Decimal(percent) / 100
