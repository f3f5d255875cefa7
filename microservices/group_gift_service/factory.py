"""
Group Gift Service Factory

Factory for creating GroupGiftService with real dependencies.
This is the ONLY module that imports concrete implementations.
"""

import logging
from typing import Optional

from core.config import AppConfig, get_settings

from .group_gift_repository import InMemoryGroupGiftRepository, PostgresGroupGiftRepository
from .group_gift_service import GroupGiftService
from .protocols import GroupGiftRepositoryProtocol
from .stats_aggregator import StatsAggregator

logger = logging.getLogger(__name__)


def create_group_gift_repository(config: Optional[AppConfig] = None) -> GroupGiftRepositoryProtocol:
    """
    Create the repository selected by GROUP_GIFT_REPOSITORY

    Raises:
        ValueError: Unknown backend name
    """
    if config is None:
        config = get_settings()

    backend = config.service.repository_backend
    if backend == "memory":
        logger.info("Using in-memory group gift repository")
        return InMemoryGroupGiftRepository()
    if backend == "postgres":
        logger.info("Using PostgreSQL group gift repository")
        return PostgresGroupGiftRepository(config=config.infrastructure)
    raise ValueError(f"Unknown group gift repository backend: {backend}")


def create_group_gift_service(
    config: Optional[AppConfig] = None,
    event_bus=None,
    repository: Optional[GroupGiftRepositoryProtocol] = None,
) -> GroupGiftService:
    """
    Create GroupGiftService with all real dependencies

    Args:
        config: Optional app config (global settings if not provided)
        event_bus: Optional event bus for notification intents
        repository: Optional repository (built from config if not provided)

    Returns:
        GroupGiftService instance (call repository.initialize() before use)
    """
    if config is None:
        config = get_settings()

    if repository is None:
        repository = create_group_gift_repository(config)

    return GroupGiftService(
        repository=repository,
        event_bus=event_bus,
        stats_aggregator=StatsAggregator(
            repository, cache_enabled=config.service.stats_cache_enabled
        ),
        suggested_amounts=config.service.suggested_amounts,
        urgent_days=config.service.urgent_days,
    )


__all__ = ["create_group_gift_service", "create_group_gift_repository"]
