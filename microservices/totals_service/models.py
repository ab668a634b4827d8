"""
Totals Service Data Models

Pydantic models for line items, shipping methods, tax lines, discounts,
gift cards and the totals records computed from them.

Amounts are integers in minor currency units on input. Output records use
Decimal because some legacy paths produce fractional (unrounded) tax.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Tax Lines

class TaxLine(BaseModel):
    """Single tax rate entry applied to an item or shipping method"""
    id: Optional[str] = None
    rate: Decimal = Field(..., ge=0, le=100, description="Rate as a percentage (0-100)")
    name: str = "default"
    code: Optional[str] = None


class LineItemTaxLine(TaxLine):
    """Tax line attached to a line item"""
    item_id: str


class ShippingMethodTaxLine(TaxLine):
    """Tax line attached to a shipping method"""
    shipping_method_id: str


# Cart / Order Entities

class LineItem(BaseModel):
    """Line item as seen by the totals engine (read-only)"""
    id: str
    unit_price: int
    quantity: int = Field(default=1, ge=0)
    includes_tax: bool = False
    # None means the tax lines were never loaded; [] means no tax applies
    tax_lines: Optional[List[LineItemTaxLine]] = None


class ShippingMethod(BaseModel):
    """Shipping method as seen by the totals engine (read-only)"""
    id: str
    price: int
    includes_tax: bool = False
    tax_lines: Optional[List[ShippingMethodTaxLine]] = None


class DiscountRuleType(str, Enum):
    """Discount rule type enumeration"""
    FIXED = "fixed"
    PERCENTAGE = "percentage"
    FREE_SHIPPING = "free_shipping"


class DiscountRule(BaseModel):
    """Discount rule"""
    type: DiscountRuleType
    value: int = 0


class Discount(BaseModel):
    """Discount applied to a cart or order"""
    id: str
    code: Optional[str] = None
    rule: DiscountRule


class DiscountAllocation(BaseModel):
    """Share of a cart-level discount allocated to one line item"""
    amount: Decimal = Decimal("0")
    unit_amount: Decimal = Decimal("0")


class LineAllocation(BaseModel):
    """Allocations for a single line item"""
    discount: Optional[DiscountAllocation] = None


class Region(BaseModel):
    """Region settings relevant to pricing"""
    id: Optional[str] = None
    tax_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    gift_cards_taxable: bool = True


# Gift Cards

class GiftCard(BaseModel):
    """Gift card with a remaining redeemable balance"""
    id: str
    balance: int = Field(..., ge=0)


class GiftCardTaxability(str, Enum):
    """Whether a gift card transaction was recorded as taxable"""
    TAXABLE = "taxable"
    NOT_TAXABLE = "not_taxable"
    UNSPECIFIED = "unspecified"  # recorded before taxability was tracked


class GiftCardTransaction(BaseModel):
    """Redemption of a gift card against an order"""
    amount: int
    tax_rate: Optional[Decimal] = None
    is_taxable: GiftCardTaxability = GiftCardTaxability.UNSPECIFIED

    @field_validator('is_taxable', mode='before')
    @classmethod
    def coerce_legacy_taxability(cls, v):
        if v is None:
            return GiftCardTaxability.UNSPECIFIED
        if v is True:
            return GiftCardTaxability.TAXABLE
        if v is False:
            return GiftCardTaxability.NOT_TAXABLE
        return v


# Calculation Context

class TaxCalculationContext(BaseModel):
    """
    Inputs shared by every calculation in one call.

    Frozen: the engine derives narrowed copies (no discounts, a single
    shipping method) with model_copy() instead of mutating the caller's
    context.
    """
    model_config = ConfigDict(frozen=True)

    allocation_map: Dict[str, LineAllocation] = Field(default_factory=dict)
    region: Optional[Region] = None
    shipping_methods: List[ShippingMethod] = Field(default_factory=list)
    shipping_address: Optional[Dict[str, str]] = None
    customer_id: Optional[str] = None
    is_return: bool = False
    # Resolved once by the caller from the feature flag router
    tax_inclusive_pricing: bool = False

    def without_discounts(self) -> "TaxCalculationContext":
        """Copy of this context with an empty allocation map"""
        return self.model_copy(update={"allocation_map": {}})

    def for_shipping_method(self, shipping_method: ShippingMethod) -> "TaxCalculationContext":
        """Copy of this context narrowed to a single shipping method"""
        return self.model_copy(update={"shipping_methods": [shipping_method]})


class TaxLinesMap(BaseModel):
    """Tax lines returned by a tax line provider, keyed by entity id"""
    line_items_tax_lines: Dict[str, List[LineItemTaxLine]] = Field(default_factory=dict)
    shipping_methods_tax_lines: Dict[str, List[ShippingMethodTaxLine]] = Field(default_factory=dict)


# Totals Records

class LineItemTotals(BaseModel):
    """Computed totals for a line item"""
    unit_price: int
    quantity: int
    subtotal: Decimal
    discount_total: Decimal
    tax_total: Decimal
    total: Decimal
    original_total: Decimal
    original_tax_total: Decimal
    tax_lines: List[LineItemTaxLine] = Field(default_factory=list)


class ShippingMethodTotals(BaseModel):
    """Computed totals for a shipping method"""
    price: int
    subtotal: Decimal
    tax_total: Decimal
    total: Decimal
    original_total: Decimal
    original_tax_total: Decimal
    tax_lines: List[ShippingMethodTaxLine] = Field(default_factory=list)


class GiftCardTotals(BaseModel):
    """Amount redeemed from gift cards and the tax attributed to it"""
    total: Decimal = Decimal("0")
    tax_total: Decimal = Decimal("0")


# Tax Mode

@dataclass(frozen=True)
class FlatRate:
    """Legacy mode: one percentage rate for everything"""
    rate: Decimal


@dataclass(frozen=True)
class PerLineTaxLines:
    """Current mode: itemized tax lines through the calculation strategy"""


TaxMode = Union[FlatRate, PerLineTaxLines]


def resolve_tax_mode(tax_rate: Optional[Union[int, Decimal]]) -> TaxMode:
    """Pick the calculation mode for a batch; a missing or zero rate means per-line"""
    if tax_rate:
        return FlatRate(rate=Decimal(str(tax_rate)))
    return PerLineTaxLines()
