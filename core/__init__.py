#!/usr/bin/env python3
"""
Core Module for the Account Service

Shared infrastructure components used by the account service.

COMPONENTS:
    - config/: Environment-driven configuration (dataclasses + dotenv)
    - logger.py: Service logger setup
    - nats_client.py: NATS JetStream event bus
    - postgres_client.py: asyncpg pool wrapper

USAGE:
    from core.config import get_settings
    from core.nats_client import get_event_bus

    settings = get_settings()
    event_bus = await get_event_bus("account_service")
"""

__version__ = "2.0.0"
