"""
Service Logger Setup

Configures standard library logging for a microservice process.

Usage:
    from core.logger import setup_service_logger

    logger = setup_service_logger("group_gift_service", level="INFO")
"""

import logging
import sys
from typing import Optional

from core.config import LoggingConfig, get_settings


def setup_service_logger(
    service_name: str,
    level: Optional[str] = None,
    config: Optional[LoggingConfig] = None,
) -> logging.Logger:
    """
    Configure root logging handlers and return the service logger.

    Args:
        service_name: Logger name for the service
        level: Log level override (defaults to LoggingConfig.log_level)
        config: Logging config (defaults to global settings)

    Returns:
        Configured service logger
    """
    if config is None:
        config = get_settings().logging

    log_level = (level or config.log_level).upper()
    formatter = logging.Formatter(config.log_format)

    root = logging.getLogger()
    root.setLevel(log_level)

    # Replace handlers so repeated setup (reload, tests) does not duplicate output
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if config.enable_console:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        root.addHandler(console)

    if config.log_file:
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    logger = logging.getLogger(service_name)
    logger.setLevel(log_level)
    logger.debug(f"Logger configured for {service_name} ({config.environment}, level={log_level})")
    return logger


__all__ = ["setup_service_logger"]
