"""
Totals Service Factory

Factory functions for creating service instances and calculation contexts
with real dependencies.

Usage:
    from .factory import create_totals_service, create_calculation_context
    service = create_totals_service()
    context = create_calculation_context(region=region)
"""
from typing import Dict, List, Optional

from core.config import PricingConfig, get_settings
from core.feature_flags import TAX_INCLUSIVE_PRICING, load_flags
from core.logger import setup_service_logger

from .models import LineAllocation, Region, ShippingMethod, TaxCalculationContext
from .protocols import (
    FeatureFlagRouterProtocol,
    TaxCalculationStrategyProtocol,
    TaxLineProviderProtocol,
)
from .totals_service import TotalsService


def create_totals_service(
    config: Optional[PricingConfig] = None,
    tax_line_provider: Optional[TaxLineProviderProtocol] = None,
    tax_calculation_strategy: Optional[TaxCalculationStrategyProtocol] = None,
) -> TotalsService:
    """
    Create TotalsService with its capabilities.

    Args:
        config: Pricing configuration (defaults to environment settings)
        tax_line_provider: Tax line provider (defaults to the mock region-rate provider)
        tax_calculation_strategy: Tax calculation strategy (defaults to the built-in strategy)

    Returns:
        Configured TotalsService instance
    """
    config = config or get_settings()
    # Engine modules log under this package's logger hierarchy
    setup_service_logger(__package__, config=config.logging)

    if tax_line_provider is None:
        from .providers.mock import MockTaxLineProvider
        tax_line_provider = MockTaxLineProvider()

    if tax_calculation_strategy is None:
        from .tax_calculation_strategy import DefaultTaxCalculationStrategy
        tax_calculation_strategy = DefaultTaxCalculationStrategy()

    return TotalsService(
        tax_line_provider=tax_line_provider,
        tax_calculation_strategy=tax_calculation_strategy,
    )


def create_calculation_context(
    region: Optional[Region] = None,
    allocation_map: Optional[Dict[str, LineAllocation]] = None,
    shipping_methods: Optional[List[ShippingMethod]] = None,
    flag_router: Optional[FeatureFlagRouterProtocol] = None,
    is_return: bool = False,
    customer_id: Optional[str] = None,
    shipping_address: Optional[Dict[str, str]] = None,
) -> TaxCalculationContext:
    """
    Build a calculation context, resolving feature flags once.

    Args:
        region: Region of the cart or order
        allocation_map: Discount allocations keyed by line item id
        shipping_methods: Shipping methods of the cart or order
        flag_router: Feature flag router (defaults to flags from configuration)
        is_return: Whether the calculation is for a return
        customer_id: Customer placing the order
        shipping_address: Destination address

    Returns:
        TaxCalculationContext with tax_inclusive_pricing resolved
    """
    router: FeatureFlagRouterProtocol = flag_router or load_flags()

    return TaxCalculationContext(
        allocation_map=allocation_map or {},
        region=region,
        shipping_methods=shipping_methods or [],
        shipping_address=shipping_address,
        customer_id=customer_id,
        is_return=is_return,
        tax_inclusive_pricing=router.is_feature_enabled(TAX_INCLUSIVE_PRICING.key),
    )


__all__ = [
    'create_totals_service',
    'create_calculation_context',
]
