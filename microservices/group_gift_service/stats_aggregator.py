"""
Stats Aggregator

Cross-campaign contribution statistics, computed from a repository snapshot
and memoized on the repository's write version.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from .models import ContributionStats, GroupGift, GroupGiftStatus
from .protocols import GroupGiftRepositoryProtocol

logger = logging.getLogger(__name__)


class StatsAggregator:
    """Folds campaigns into ContributionStats"""

    def __init__(self, repository: GroupGiftRepositoryProtocol, cache_enabled: bool = True):
        self.repository = repository
        self.cache_enabled = cache_enabled
        self._cached: Optional[ContributionStats] = None
        self._cached_version: Optional[int] = None

    @staticmethod
    def compute(campaigns: Iterable[GroupGift]) -> ContributionStats:
        total = active = completed = contributor_count = 0
        total_amount = Decimal("0")
        contributed = Decimal("0")

        for campaign in campaigns:
            total += 1
            if campaign.status == GroupGiftStatus.COMPLETED:
                completed += 1
            else:
                active += 1
            total_amount += campaign.current_amount
            contributor_count += len(campaign.contributors)
            contributed += sum((c.amount for c in campaign.contributors), Decimal("0"))

        average = Decimal("0")
        if contributor_count:
            average = contributed / contributor_count

        return ContributionStats(
            total_group_gifts=total,
            active_group_gifts=active,
            completed_group_gifts=completed,
            total_amount=total_amount,
            total_contributors=contributor_count,
            average_contribution=average,
        )

    async def get_stats(self) -> ContributionStats:
        """Stats over every stored campaign"""
        if not self.cache_enabled:
            return self.compute(await self.repository.get_all())

        version = await self.repository.get_version()
        if self._cached is not None and self._cached_version == version:
            return self._cached.model_copy()

        stats = self.compute(await self.repository.get_all())
        self._cached, self._cached_version = stats, version
        logger.debug(f"Contribution stats recomputed at version {version}")
        return stats.model_copy()


__all__ = ["StatsAggregator"]
