#!/usr/bin/env python3
"""Pricing configuration

Settings for the order totals engine. Feature flags follow the
PRICING_FF_<FLAG_KEY> naming so the flag router can resolve them the same
way whether they come from the environment file or the process env.
"""
import os
from dataclasses import dataclass, field
from typing import Dict

from .logging_config import LoggingConfig

FEATURE_FLAG_ENV_PREFIX = "PRICING_FF_"


def _bool(val: str) -> bool:
    return val.lower() == "true"


@dataclass
class PricingConfig:
    """Order totals service settings"""

    service_name: str = "totals_service"
    environment: str = "development"

    # Feature flags, keyed by flag key (e.g. "tax_inclusive_pricing")
    feature_flags: Dict[str, bool] = field(default_factory=dict)

    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> 'PricingConfig':
        """Load pricing configuration from environment variables"""
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        flags = {
            key[len(FEATURE_FLAG_ENV_PREFIX):].lower(): _bool(value)
            for key, value in os.environ.items()
            if key.startswith(FEATURE_FLAG_ENV_PREFIX)
        }
        return cls(
            service_name=os.getenv("SERVICE_NAME", "totals_service"),
            environment=env,
            feature_flags=flags,
            logging=LoggingConfig.from_env(),
        )
