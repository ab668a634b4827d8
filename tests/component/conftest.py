"""
Component Test Layer Configuration

Structure:
    tests/component/
    └── golden/      Characterization of current engine behavior

Usage:
    pytest tests/component -v
    pytest tests/component/golden/totals_service -v
"""
import pytest

from microservices.totals_service.tax_calculation_strategy import DefaultTaxCalculationStrategy
from microservices.totals_service.totals_service import TotalsService
from tests.component.golden.totals_service.mocks import (
    MockTaxCalculationStrategy,
    MockTaxLineProvider,
)


# =============================================================================
# Capability Mocks
# =============================================================================

@pytest.fixture
def mock_provider() -> MockTaxLineProvider:
    """Fresh mock tax line provider"""
    return MockTaxLineProvider()


@pytest.fixture
def mock_strategy() -> MockTaxCalculationStrategy:
    """Fresh mock tax calculation strategy"""
    return MockTaxCalculationStrategy()


# =============================================================================
# Services
# =============================================================================

@pytest.fixture
def service(mock_provider, mock_strategy) -> TotalsService:
    """TotalsService wired to recording mocks"""
    return TotalsService(
        tax_line_provider=mock_provider,
        tax_calculation_strategy=mock_strategy,
    )


@pytest.fixture
def default_strategy_service(mock_provider) -> TotalsService:
    """TotalsService wired to the built-in tax calculation strategy"""
    return TotalsService(
        tax_line_provider=mock_provider,
        tax_calculation_strategy=DefaultTaxCalculationStrategy(),
    )
