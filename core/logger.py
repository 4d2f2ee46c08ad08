"""
Service Logger Setup

Configures the root logger of a microservice from LoggingConfig.
Modules keep using ``logging.getLogger(__name__)``; this only installs
handlers and the level once per service.
"""

import logging
from typing import Optional

from core.config import LoggingConfig

_configured_services = set()


def setup_service_logger(
    service_name: str,
    level: Optional[str] = None,
    config: Optional[LoggingConfig] = None,
) -> logging.Logger:
    """
    Configure logging for a service and return its logger.

    Args:
        service_name: Logger name, usually the service package name
        level: Log level override (defaults to LoggingConfig.log_level)
        config: Logging configuration (defaults to environment)

    Returns:
        The configured service logger
    """
    config = config or LoggingConfig.from_env()
    log_level = (level or config.log_level).upper()

    logger = logging.getLogger(service_name)
    logger.setLevel(log_level)

    if service_name in _configured_services:
        return logger

    formatter = logging.Formatter(config.log_format)
    root = logging.getLogger()
    root.setLevel(log_level)

    if config.enable_console:
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        root.addHandler(console)

    if config.log_file:
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    _configured_services.add(service_name)
    logger.info(f"Logging configured for {service_name} at {log_level} ({config.environment})")
    return logger
