#!/usr/bin/env python3
"""
Service logger setup

Usage:
    from core.logger import setup_service_logger
    logger = setup_service_logger("totals_service")
"""
import logging
import sys
from typing import Optional

from core.config import LoggingConfig


def setup_service_logger(
    service_name: str,
    level: Optional[str] = None,
    config: Optional[LoggingConfig] = None,
) -> logging.Logger:
    """
    Configure and return the logger for a service.

    Handlers are attached once per logger name, so calling this again
    (e.g. from a second factory call) only updates the level.

    Args:
        service_name: Logger name, usually the service package name
        level: Override for the configured log level
        config: Logging configuration (defaults to environment)

    Returns:
        Configured logger
    """
    config = config or LoggingConfig.from_env()
    logger = logging.getLogger(service_name)
    logger.setLevel((level or config.log_level).upper())

    if not logger.handlers:
        formatter = logging.Formatter(config.log_format)

        if config.enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        if config.log_file:
            file_handler = logging.FileHandler(config.log_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
