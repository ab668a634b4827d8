"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - component/  : Component tests (mocked capabilities)
    - unit/       : Unit tests (pure functions, no I/O)
"""
import os
import sys
from decimal import Decimal

import pytest

# Set testing environment BEFORE any imports of core.config
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("LOG_LEVEL", "WARNING")

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from tests.fixtures import (
    make_line_item_id,
    make_shipping_method_id,
    make_region,
)


# =============================================================================
# Test Data Generators
# =============================================================================

class TestDataGenerator:
    """Generate unique test data"""

    @staticmethod
    def line_item_id() -> str:
        return make_line_item_id()

    @staticmethod
    def shipping_method_id() -> str:
        return make_shipping_method_id()


@pytest.fixture
def generate() -> TestDataGenerator:
    """Provide test data generator"""
    return TestDataGenerator()


# =============================================================================
# Sample Data Fixtures
# =============================================================================

@pytest.fixture
def region_10():
    """Region taxing at 10% with taxable gift cards"""
    return make_region(tax_rate=Decimal("10"), gift_cards_taxable=True)


@pytest.fixture
def region_no_gift_card_tax():
    """Region taxing at 10% where gift cards are not taxed"""
    return make_region(tax_rate=Decimal("10"), gift_cards_taxable=False)


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line("markers", "component: Component tests")
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "golden: Characterization tests pinning current behavior")
