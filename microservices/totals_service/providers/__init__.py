"""Tax line providers for the totals service."""

from .base import TaxLineProvider
from .mock import MockTaxLineProvider

__all__ = [
    'TaxLineProvider',
    'MockTaxLineProvider',
]
