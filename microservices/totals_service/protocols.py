"""
Totals Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from decimal import Decimal
from typing import List, Optional, Protocol, Sequence, Union, runtime_checkable

# Import only models (no I/O dependencies)
from .models import (
    LineItem,
    LineItemTaxLine,
    ShippingMethodTaxLine,
    TaxCalculationContext,
    TaxLinesMap,
)


# ============================================================================
# Custom Exceptions
# ============================================================================

class TotalsServiceError(Exception):
    """Base exception for totals service errors"""

    error_code = "TOTALS_ERROR"

    def __init__(self, message: str, entity_id: Optional[str] = None):
        super().__init__(message)
        self.entity_id = entity_id


class MissingTaxLinesError(TotalsServiceError):
    """Tax was requested but no tax lines were joined for the entity"""

    error_code = "MISSING_TAX_LINES"


class MissingRefundTaxLinesError(TotalsServiceError):
    """Line item tax lines were never loaded, so a refund cannot be computed"""

    error_code = "MISSING_REFUND_TAX_LINES"


# ============================================================================
# Capability Protocols
# ============================================================================

TaxLines = Sequence[Union[LineItemTaxLine, ShippingMethodTaxLine]]


@runtime_checkable
class TaxLineProviderProtocol(Protocol):
    """
    Interface for the tax line provider.

    Returns the applicable tax lines for a batch of line items and for the
    shipping methods carried by the context, in one call.
    """

    async def get_tax_lines_map(
        self,
        items: List[LineItem],
        context: TaxCalculationContext
    ) -> TaxLinesMap:
        """Get tax lines keyed by line item id and shipping method id"""
        ...


@runtime_checkable
class TaxCalculationStrategyProtocol(Protocol):
    """Interface for the tax calculation strategy"""

    async def calculate(
        self,
        items: List[LineItem],
        tax_lines: TaxLines,
        context: TaxCalculationContext
    ) -> Decimal:
        """Return the total tax for the items and the context shipping methods"""
        ...


@runtime_checkable
class FeatureFlagRouterProtocol(Protocol):
    """Interface for feature flag lookup"""

    def is_feature_enabled(self, key: str) -> bool:
        """Check whether a flag is enabled"""
        ...
