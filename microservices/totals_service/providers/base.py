"""Tax line provider interface."""

from abc import ABC, abstractmethod
from typing import List

from ..models import LineItem, TaxCalculationContext, TaxLinesMap


class TaxLineProvider(ABC):
    """Abstract tax line provider."""

    @abstractmethod
    async def get_tax_lines_map(self, items: List[LineItem], context: TaxCalculationContext) -> TaxLinesMap:
        """Get tax lines for items and for the context shipping methods."""
        raise NotImplementedError
