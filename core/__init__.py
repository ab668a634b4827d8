#!/usr/bin/env python3
"""
Core Module

Shared components for the order totals service.

COMPONENTS:
    - config/: environment-driven configuration (pricing, logging)
    - logger.py: service logger setup
    - feature_flags.py: feature flag definitions and router

USAGE:
    from core.config import get_settings
    from core.feature_flags import load_flags, TAX_INCLUSIVE_PRICING

    router = load_flags()
    router.is_feature_enabled(TAX_INCLUSIVE_PRICING.key)
"""
