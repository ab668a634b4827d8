#!/usr/bin/env python3
"""Configuration package for the order totals service

Configuration hierarchy:
- pricing_config: totals engine settings and feature flags
- logging_config: Logging configuration

Environment files live in deployment/environments/ at the project root.
Variables already set in the process environment take precedence.
"""
import os
from dotenv import load_dotenv
from .logging_config import LoggingConfig
from .pricing_config import FEATURE_FLAG_ENV_PREFIX, PricingConfig

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
ENV_FILES_DIR = os.path.join(PROJECT_ROOT, "deployment", "environments")

env_files = {
    "development": "dev.env",
    "dev": "dev.env",
    "testing": "test.env",
    "test": "test.env",
}


def resolve_env_file(env: str) -> str:
    """Path of the environment file for env, falling back to dev.env"""
    return os.path.join(ENV_FILES_DIR, env_files.get(env, "dev.env"))


# Load environment file based on ENV
env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
load_dotenv(resolve_env_file(env), override=False)

# Create global settings instance
settings = PricingConfig.from_env()

def get_settings() -> PricingConfig:
    """Get global settings instance"""
    return settings

def reload_settings() -> PricingConfig:
    """Reload settings from environment"""
    global settings
    settings = PricingConfig.from_env()
    return settings

__all__ = [
    'PricingConfig',
    'LoggingConfig',
    'FEATURE_FLAG_ENV_PREFIX',
    'env_files',
    'resolve_env_file',
    'get_settings',
    'reload_settings',
    'settings',
]
