"""
Component Tests for StatsAggregator memoization on the repository version
"""

from decimal import Decimal

import pytest

from microservices.group_gift_service.group_gift_repository import InMemoryGroupGiftRepository
from microservices.group_gift_service.stats_aggregator import StatsAggregator


class CountingRepository(InMemoryGroupGiftRepository):
    """Counts full scans"""

    def __init__(self):
        super().__init__()
        self.scans = 0

    async def get_all(self):
        self.scans += 1
        return await super().get_all()


@pytest.mark.component
@pytest.mark.asyncio
class TestStatsCache:

    async def test_cached_until_next_write(self, data_factory):
        repository = CountingRepository()
        aggregator = StatsAggregator(repository, cache_enabled=True)
        created = await repository.create(data_factory.make_group_gift())

        first = await aggregator.get_stats()
        second = await aggregator.get_stats()
        assert repository.scans == 1
        assert first == second

        def fund(campaign):
            campaign.current_amount = Decimal("5")

        await repository.apply(created.group_gift_id, fund)
        third = await aggregator.get_stats()

        assert repository.scans == 2
        assert third.total_amount == Decimal("5")

    async def test_cache_disabled_always_scans(self, data_factory):
        repository = CountingRepository()
        aggregator = StatsAggregator(repository, cache_enabled=False)
        await repository.create(data_factory.make_group_gift())

        await aggregator.get_stats()
        await aggregator.get_stats()

        assert repository.scans == 2

    async def test_cached_result_is_not_shared(self, data_factory):
        repository = CountingRepository()
        aggregator = StatsAggregator(repository)

        stats = await aggregator.get_stats()
        stats.total_group_gifts = 99

        assert (await aggregator.get_stats()).total_group_gifts == 0
