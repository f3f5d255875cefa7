"""
Group Gift Service Component Test Fixtures

Provides:
- repository: InMemoryGroupGiftRepository (the real in-memory backend)
- group_gift_service: GroupGiftService wired with the repository and MockEventBus
- clock: Fixed, adjustable time source for the service
"""

from datetime import datetime, timezone

import pytest

from microservices.group_gift_service.group_gift_repository import InMemoryGroupGiftRepository
from microservices.group_gift_service.group_gift_service import GroupGiftService
from microservices.group_gift_service.protocols import RepositoryError
from microservices.group_gift_service.stats_aggregator import StatsAggregator
from tests.contracts.group_gift.data_contract import GroupGiftTestDataFactory


class FixedClock:
    """Callable time source that tests can move"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FailingRepository(InMemoryGroupGiftRepository):
    """In-memory repository whose writes fail like an unreachable backend"""

    def __init__(self):
        super().__init__()
        self.fail_writes = False

    async def apply(self, group_gift_id, mutation):
        if self.fail_writes:
            raise RepositoryError("backend unavailable", operation="apply")
        return await super().apply(group_gift_id, mutation)


@pytest.fixture
def data_factory():
    """Provide test data factory"""
    return GroupGiftTestDataFactory


@pytest.fixture
def clock():
    """Fixed clock at a known instant"""
    return FixedClock(datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def repository():
    """Fresh in-memory repository"""
    return InMemoryGroupGiftRepository()


@pytest.fixture
def group_gift_service(repository, mock_event_bus, clock):
    """Create GroupGiftService with in-memory storage and mocked event bus"""
    return GroupGiftService(
        repository=repository,
        event_bus=mock_event_bus,
        stats_aggregator=StatsAggregator(repository, cache_enabled=True),
        clock=clock,
    )


@pytest.fixture
def failing_repository():
    return FailingRepository()


@pytest.fixture
def failing_service(failing_repository, mock_event_bus, clock):
    return GroupGiftService(repository=failing_repository, event_bus=mock_event_bus, clock=clock)
