#!/usr/bin/env python3
"""
Feature flag routing

Flags are declared as FeatureFlag definitions and resolved once into a
FlagRouter from configuration (PRICING_FF_<KEY> variables) plus explicit
overrides. Pricing code never reads the router directly; callers resolve the
flags they need before building a calculation context.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from core.config import PricingConfig, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureFlag:
    """Feature flag definition"""
    key: str
    description: str
    default_val: bool = False


TAX_INCLUSIVE_PRICING = FeatureFlag(
    key="tax_inclusive_pricing",
    description="Prices marked includes_tax already contain their tax",
)

DEFAULT_FLAGS = (TAX_INCLUSIVE_PRICING,)


class FlagRouter:
    """Answers is_feature_enabled() for a fixed set of resolved flags"""

    def __init__(self, flags: Optional[Dict[str, bool]] = None):
        self._flags: Dict[str, bool] = dict(flags or {})

    def is_feature_enabled(self, key: str) -> bool:
        return self._flags.get(key, False)

    def set_flag(self, key: str, value: bool) -> None:
        self._flags[key] = value

    def list_flags(self) -> Dict[str, bool]:
        return dict(self._flags)


def load_flags(
    config: Optional[PricingConfig] = None,
    overrides: Optional[Dict[str, bool]] = None,
    definitions: Iterable[FeatureFlag] = DEFAULT_FLAGS,
) -> FlagRouter:
    """
    Build a FlagRouter from flag definitions.

    Precedence: overrides > configuration > definition default.
    """
    config = config or get_settings()
    overrides = overrides or {}

    resolved: Dict[str, bool] = {}
    for flag in definitions:
        if flag.key in overrides:
            resolved[flag.key] = overrides[flag.key]
        elif flag.key in config.feature_flags:
            resolved[flag.key] = config.feature_flags[flag.key]
        else:
            resolved[flag.key] = flag.default_val

    enabled = [key for key, value in resolved.items() if value]
    logger.debug(f"Feature flags resolved, enabled: {enabled}")
    return FlagRouter(resolved)
