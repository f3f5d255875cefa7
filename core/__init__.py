#!/usr/bin/env python3
"""
Core Module for Microservices Architecture

Shared infrastructure components for the group gift microservice.

COMPONENTS:
    - config/: Environment-driven configuration (dataclasses + python-dotenv)
    - logger.py: Service logging setup
    - postgres_client.py: asyncpg pool wrapper with connect retries
    - nats_client.py: NATS event bus for event-driven architecture

USAGE:
    from core.config import get_settings
    from core.logger import setup_service_logger

    settings = get_settings()
    logger = setup_service_logger("group_gift_service")
"""

__version__ = "2.0.0"
