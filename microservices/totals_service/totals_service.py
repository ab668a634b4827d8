"""
Totals Service Business Logic

Computes line item, shipping method and gift card totals for carts and
orders, plus refundable amounts for line items.

Two calculation modes coexist:
- per-line: itemized tax lines summed by the tax calculation strategy
- legacy flat rate: one percentage, kept for orders created before tax
  lines existed. Its rounding behavior is intentionally left as-is.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Union

from .models import (
    Discount,
    DiscountRuleType,
    FlatRate,
    GiftCard,
    GiftCardTaxability,
    GiftCardTotals,
    GiftCardTransaction,
    LineAllocation,
    LineItem,
    LineItemTaxLine,
    LineItemTotals,
    Region,
    ShippingMethod,
    ShippingMethodTaxLine,
    ShippingMethodTotals,
    TaxCalculationContext,
    resolve_tax_mode,
)
from .pricing_utils import calculate_price_tax_amount, percent_to_rate, round_half_up
from .protocols import (
    MissingRefundTaxLinesError,
    MissingTaxLinesError,
    TaxCalculationStrategyProtocol,
    TaxLineProviderProtocol,
)

logger = logging.getLogger(__name__)

Rate = Union[int, Decimal]


def _discount_total(allocation: Optional[LineAllocation], quantity: int) -> Decimal:
    if allocation is None or allocation.discount is None:
        return Decimal("0")
    return allocation.discount.unit_amount * quantity


def _has_free_shipping(discounts: Optional[Sequence[Discount]]) -> bool:
    return any(d.rule.type == DiscountRuleType.FREE_SHIPPING for d in discounts or [])


class TotalsService:
    """
    Order totals calculation service

    Stateless: every method computes from its arguments and the two injected
    capabilities, so one instance can serve concurrent calls.
    """

    def __init__(
        self,
        tax_line_provider: TaxLineProviderProtocol,
        tax_calculation_strategy: TaxCalculationStrategyProtocol,
    ):
        """
        Initialize Totals Service

        Args:
            tax_line_provider: Looks up tax lines for items and shipping methods
            tax_calculation_strategy: Sums tax for items given their tax lines
        """
        self.tax_line_provider = tax_line_provider
        self.tax_calculation_strategy = tax_calculation_strategy

        logger.info("TotalsService initialized")

    # Line Items

    async def get_line_items_totals(
        self,
        items: List[LineItem],
        *,
        calculation_context: TaxCalculationContext,
        include_tax: bool = False,
        tax_rate: Optional[Rate] = None,
        use_existing_tax_lines: bool = False,
    ) -> Dict[str, LineItemTotals]:
        """
        Calculate totals for a batch of line items.

        Tax lines are fetched once for the whole batch (or read from the
        items when use_existing_tax_lines is set). A flat tax_rate selects the
        legacy calculation for every item.

        Args:
            items: Line items to total
            calculation_context: Allocations, region and shipping methods
            include_tax: Whether tax lines must be resolved for the items
            tax_rate: Legacy flat rate as a percentage
            use_existing_tax_lines: Use the items' own tax lines, skip the provider

        Returns:
            Mapping of line item id to its totals
        """
        tax_mode = resolve_tax_mode(tax_rate)
        tax_lines_map: Dict[str, List[LineItemTaxLine]] = {}

        if not isinstance(tax_mode, FlatRate) and include_tax:
            if use_existing_tax_lines:
                tax_lines_map = {item.id: item.tax_lines or [] for item in items}
            elif items:
                provided = await self.tax_line_provider.get_tax_lines_map(items, calculation_context)
                tax_lines_map = provided.line_items_tax_lines

        logger.debug(
            f"Calculating totals for {len(items)} line items "
            f"(mode={type(tax_mode).__name__}, include_tax={include_tax})"
        )

        items_totals: Dict[str, LineItemTotals] = {}
        for item in items:
            allocation = calculation_context.allocation_map.get(item.id)
            if isinstance(tax_mode, FlatRate):
                items_totals[item.id] = await self.get_line_item_totals_legacy(
                    item,
                    tax_rate=tax_mode.rate,
                    line_item_allocation=allocation,
                    calculation_context=calculation_context,
                )
            else:
                items_totals[item.id] = await self.get_line_item_totals(
                    item,
                    line_item_allocation=allocation,
                    tax_lines=tax_lines_map.get(item.id),
                    calculation_context=calculation_context,
                )

        return items_totals

    async def get_line_item_totals(
        self,
        item: LineItem,
        *,
        calculation_context: TaxCalculationContext,
        include_tax: bool = False,
        line_item_allocation: Optional[LineAllocation] = None,
        tax_lines: Optional[List[LineItemTaxLine]] = None,
    ) -> LineItemTotals:
        """
        Calculate the totals of one line item from its tax lines.

        Args:
            item: Line item
            calculation_context: Allocations, region and shipping methods
            include_tax: Fail when no tax lines are available
            line_item_allocation: Discount allocated to this item
            tax_lines: Override for the item's own tax lines

        Raises:
            MissingTaxLinesError: include_tax is set and there are no tax lines
        """
        includes_tax = calculation_context.tax_inclusive_pricing and item.includes_tax

        # With tax-inclusive pricing the subtotal needs the tax amount first
        subtotal = Decimal("0") if includes_tax else Decimal(item.unit_price * item.quantity)
        discount_total = _discount_total(line_item_allocation, item.quantity)

        total = subtotal - discount_total
        original_total = subtotal
        tax_total = Decimal("0")
        original_tax_total = Decimal("0")
        resolved_tax_lines = list(tax_lines if tax_lines is not None else item.tax_lines or [])

        if include_tax and not resolved_tax_lines:
            logger.error(f"Tax lines missing for line item {item.id}")
            raise MissingTaxLinesError("Tax Lines must be joined to calculate taxes", entity_id=item.id)

        if resolved_tax_lines:
            tax_total = Decimal(await self.tax_calculation_strategy.calculate(
                [item], resolved_tax_lines, calculation_context
            ))
            original_tax_total = Decimal(await self.tax_calculation_strategy.calculate(
                [item], resolved_tax_lines, calculation_context.without_discounts()
            ))

            if includes_tax:
                subtotal += item.unit_price * item.quantity - original_tax_total
                total += subtotal
                original_total += subtotal

            total += tax_total
            original_total += original_tax_total

        return LineItemTotals(
            unit_price=item.unit_price,
            quantity=item.quantity,
            subtotal=subtotal,
            discount_total=discount_total,
            tax_total=tax_total,
            total=total,
            original_total=original_total,
            original_tax_total=original_tax_total,
            tax_lines=resolved_tax_lines,
        )

    async def get_line_item_totals_legacy(
        self,
        item: LineItem,
        *,
        tax_rate: Rate,
        calculation_context: TaxCalculationContext,
        line_item_allocation: Optional[LineAllocation] = None,
    ) -> LineItemTotals:
        """
        Calculate the totals of one line item from a flat tax rate.

        tax_total is computed on the discounted subtotal, original_tax_total
        on the undiscounted one. Neither is rounded. The discount only lowers
        the tax: total is subtotal plus tax_total.
        """
        rate = percent_to_rate(tax_rate)
        discount_total = _discount_total(line_item_allocation, item.quantity)

        includes_tax = calculation_context.tax_inclusive_pricing and item.includes_tax
        tax_included_in_price = 0
        if item.includes_tax:
            tax_included_in_price = round_half_up(
                calculate_price_tax_amount(item.unit_price, rate, includes_tax)
            )

        subtotal = Decimal((item.unit_price - tax_included_in_price) * item.quantity)
        original_tax_total = subtotal * rate
        tax_total = (subtotal - discount_total) * rate

        return LineItemTotals(
            unit_price=item.unit_price,
            quantity=item.quantity,
            subtotal=subtotal,
            discount_total=discount_total,
            tax_total=tax_total,
            total=subtotal + tax_total,
            original_total=subtotal + original_tax_total,
            original_tax_total=original_tax_total,
            tax_lines=item.tax_lines or [],
        )

    # Refunds

    def get_line_item_refund(
        self,
        line_item: LineItem,
        *,
        calculation_context: TaxCalculationContext,
        tax_rate: Optional[Rate] = None,
    ) -> Decimal:
        """
        Amount refundable for a line item.

        Tax is rounded per tax line, not on the summed rate, so the result
        can differ by a cent from a single-rate computation.

        Raises:
            MissingRefundTaxLinesError: the item's tax lines were never loaded
        """
        if tax_rate is not None:
            return self.get_line_item_refund_legacy(
                line_item, calculation_context=calculation_context, tax_rate=tax_rate
            )

        includes_tax = calculation_context.tax_inclusive_pricing and line_item.includes_tax
        discount_amount = _discount_total(
            calculation_context.allocation_map.get(line_item.id), line_item.quantity
        )

        if line_item.tax_lines is None:
            logger.error(f"Cannot compute refund for line item {line_item.id}: tax lines not loaded")
            raise MissingRefundTaxLinesError(
                "Cannot compute line item refund amount, tax lines are missing from the line item",
                entity_id=line_item.id,
            )

        total_tax_rate = sum(
            (percent_to_rate(tax_line.rate) for tax_line in line_item.tax_lines), Decimal("0")
        )

        tax_included_in_price = 0
        if includes_tax:
            tax_included_in_price = round_half_up(
                calculate_price_tax_amount(line_item.unit_price, total_tax_rate, includes_tax)
            )

        line_subtotal = (
            (line_item.unit_price - tax_included_in_price) * line_item.quantity - discount_amount
        )
        tax_total = sum(
            round_half_up(line_subtotal * percent_to_rate(tax_line.rate))
            for tax_line in line_item.tax_lines
        )

        return line_subtotal + tax_total

    def get_line_item_refund_legacy(
        self,
        line_item: LineItem,
        *,
        calculation_context: TaxCalculationContext,
        tax_rate: Rate,
    ) -> Decimal:
        """Amount refundable for a line item using a flat tax rate"""
        rate = percent_to_rate(tax_rate)
        includes_tax = calculation_context.tax_inclusive_pricing and line_item.includes_tax

        tax_included_in_price = 0
        if includes_tax:
            tax_included_in_price = round_half_up(
                calculate_price_tax_amount(line_item.unit_price, rate, includes_tax)
            )

        discount_amount = _discount_total(
            calculation_context.allocation_map.get(line_item.id), line_item.quantity
        )
        line_subtotal = (
            (line_item.unit_price - tax_included_in_price) * line_item.quantity - discount_amount
        )

        return Decimal(round_half_up(line_subtotal * (1 + rate)))

    # Gift Cards

    async def get_gift_card_totals(
        self,
        gift_cardable_amount: int,
        *,
        region: Optional[Region] = None,
        gift_card_transactions: Optional[List[GiftCardTransaction]] = None,
        gift_cards: Optional[List[GiftCard]] = None,
    ) -> GiftCardTotals:
        """
        Calculate the gift card contribution to a cart or order.

        Recorded transactions take precedence over card balances.

        Args:
            gift_cardable_amount: Upper bound of what gift cards may cover
            region: Region providing gift card taxability and rate
            gift_card_transactions: Redemptions already recorded on an order
            gift_cards: Cards applied to a cart
        """
        if gift_card_transactions is not None:
            return self.get_gift_card_transactions_totals(gift_card_transactions, region=region)

        if not gift_cards:
            return GiftCardTotals()

        gift_amount = sum(card.balance for card in gift_cards)
        total = Decimal(min(gift_cardable_amount, gift_amount))
        tax_total = Decimal("0")

        if region is not None and region.gift_cards_taxable:
            tax_total = Decimal(round_half_up(total * percent_to_rate(region.tax_rate)))

        return GiftCardTotals(total=total, tax_total=tax_total)

    def get_gift_card_transactions_totals(
        self,
        gift_card_transactions: List[GiftCardTransaction],
        *,
        region: Optional[Region] = None,
    ) -> GiftCardTotals:
        """
        Sum recorded gift card transactions.

        tax_total is not rounded; callers round the final sum if needed.
        """
        total = Decimal("0")
        tax_total = Decimal("0")

        for transaction in gift_card_transactions:
            own_rate = percent_to_rate(transaction.tax_rate or 0)

            if transaction.is_taxable == GiftCardTaxability.TAXABLE:
                tax_multiplier = own_rate
            elif transaction.is_taxable == GiftCardTaxability.NOT_TAXABLE:
                tax_multiplier = Decimal("0")
            elif region is not None and region.gift_cards_taxable:
                # Recorded before taxability was tracked: gift cards defaulted
                # to taxable at the region rate
                tax_multiplier = percent_to_rate(region.tax_rate)
            else:
                tax_multiplier = own_rate

            total += transaction.amount
            tax_total += transaction.amount * tax_multiplier

        return GiftCardTotals(total=total, tax_total=tax_total)

    # Shipping Methods

    async def get_shipping_methods_totals(
        self,
        shipping_methods: List[ShippingMethod],
        *,
        calculation_context: TaxCalculationContext,
        include_tax: bool = False,
        discounts: Optional[List[Discount]] = None,
        tax_rate: Optional[Rate] = None,
        use_existing_tax_lines: bool = False,
    ) -> Dict[str, ShippingMethodTotals]:
        """
        Calculate totals for a batch of shipping methods.

        Args:
            shipping_methods: Shipping methods to total
            calculation_context: Allocations, region and shipping methods
            include_tax: Whether tax lines must be present for each method
            discounts: Discounts applied to the cart or order
            tax_rate: Legacy flat rate as a percentage
            use_existing_tax_lines: Use the methods' own tax lines, skip the provider

        Returns:
            Mapping of shipping method id to its totals
        """
        tax_mode = resolve_tax_mode(tax_rate)
        tax_lines_map: Dict[str, List[ShippingMethodTaxLine]] = {}

        if not isinstance(tax_mode, FlatRate) and include_tax:
            if use_existing_tax_lines:
                tax_lines_map = {sm.id: sm.tax_lines or [] for sm in shipping_methods}
            elif shipping_methods:
                # Only shipping tax lines are needed, so no items are sent
                provided = await self.tax_line_provider.get_tax_lines_map([], calculation_context)
                tax_lines_map = provided.shipping_methods_tax_lines

        logger.debug(
            f"Calculating totals for {len(shipping_methods)} shipping methods "
            f"(mode={type(tax_mode).__name__}, include_tax={include_tax})"
        )

        shipping_methods_totals: Dict[str, ShippingMethodTotals] = {}
        for shipping_method in shipping_methods:
            if isinstance(tax_mode, FlatRate):
                shipping_methods_totals[shipping_method.id] = await self.get_shipping_method_totals_legacy(
                    shipping_method,
                    tax_rate=tax_mode.rate,
                    calculation_context=calculation_context,
                    discounts=discounts,
                )
            else:
                shipping_methods_totals[shipping_method.id] = await self.get_shipping_method_totals(
                    shipping_method,
                    calculation_context=calculation_context,
                    include_tax=include_tax,
                    tax_lines=tax_lines_map.get(shipping_method.id),
                    discounts=discounts,
                )

        return shipping_methods_totals

    async def get_shipping_method_totals(
        self,
        shipping_method: ShippingMethod,
        *,
        calculation_context: TaxCalculationContext,
        include_tax: bool = False,
        tax_lines: Optional[List[ShippingMethodTaxLine]] = None,
        discounts: Optional[List[Discount]] = None,
    ) -> ShippingMethodTotals:
        """
        Calculate the totals of one shipping method from its tax lines.

        A free shipping discount zeroes total, subtotal and tax_total.

        Raises:
            MissingTaxLinesError: include_tax is set and there are no tax lines
        """
        price = Decimal(shipping_method.price)
        subtotal = price
        total = price
        original_total = price
        resolved_tax_lines = list(
            tax_lines if tax_lines is not None else shipping_method.tax_lines or []
        )

        if include_tax and not resolved_tax_lines:
            logger.error(f"Tax lines missing for shipping method {shipping_method.id}")
            raise MissingTaxLinesError(
                "Tax Lines must be joined to calculate taxes", entity_id=shipping_method.id
            )

        includes_tax = calculation_context.tax_inclusive_pricing and shipping_method.includes_tax

        original_tax_total = Decimal(await self.tax_calculation_strategy.calculate(
            [], resolved_tax_lines, calculation_context.for_shipping_method(shipping_method)
        ))
        tax_total = original_tax_total

        if includes_tax:
            subtotal -= tax_total
        else:
            original_total += original_tax_total
            total += tax_total

        if _has_free_shipping(discounts):
            total = Decimal("0")
            subtotal = Decimal("0")
            tax_total = Decimal("0")

        return ShippingMethodTotals(
            price=shipping_method.price,
            subtotal=subtotal,
            tax_total=tax_total,
            total=total,
            original_total=original_total,
            original_tax_total=original_tax_total,
            tax_lines=resolved_tax_lines,
        )

    async def get_shipping_method_totals_legacy(
        self,
        shipping_method: ShippingMethod,
        *,
        tax_rate: Rate,
        calculation_context: TaxCalculationContext,
        discounts: Optional[List[Discount]] = None,
    ) -> ShippingMethodTotals:
        """
        Calculate the totals of one shipping method from a flat tax rate.

        Discounts, free shipping included, never change legacy shipping totals.
        """
        price = Decimal(shipping_method.price)
        tax = Decimal(round_half_up(price * percent_to_rate(tax_rate)))

        return ShippingMethodTotals(
            price=shipping_method.price,
            subtotal=price,
            tax_total=tax,
            total=price + tax,
            original_total=price + tax,
            original_tax_total=tax,
            tax_lines=shipping_method.tax_lines or [],
        )
