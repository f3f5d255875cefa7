"""
Unit Tests for StatsAggregator.compute
"""

from decimal import Decimal

import pytest

from microservices.group_gift_service.stats_aggregator import StatsAggregator


pytestmark = pytest.mark.unit


def test_empty_collection():
    stats = StatsAggregator.compute([])

    assert stats.total_group_gifts == 0
    assert stats.active_group_gifts == 0
    assert stats.completed_group_gifts == 0
    assert stats.total_amount == Decimal("0")
    assert stats.total_contributors == 0
    assert stats.average_contribution == Decimal("0")


def test_campaigns_without_contributors_average_zero(factory):
    stats = StatsAggregator.compute([factory.make_group_gift(), factory.make_group_gift(group_gift_id=2)])

    assert stats.total_group_gifts == 2
    assert stats.active_group_gifts == 2
    assert stats.average_contribution == Decimal("0")


def test_totals_across_campaigns(factory):
    active = factory.make_funded_group_gift([Decimal("10"), Decimal("20")], target_amount=Decimal("100"))
    completed = factory.make_funded_group_gift([Decimal("30")], target_amount=Decimal("30"), group_gift_id=2)

    stats = StatsAggregator.compute([active, completed])

    assert stats.total_group_gifts == 2
    assert stats.active_group_gifts == 1
    assert stats.completed_group_gifts == 1
    assert stats.total_amount == active.current_amount + completed.current_amount
    assert stats.total_contributors == 3
    assert stats.average_contribution == Decimal("20.00")


def test_average_is_exact_quotient(factory):
    campaign = factory.make_funded_group_gift(
        [Decimal("10"), Decimal("10"), Decimal("10.01")], target_amount=Decimal("100")
    )

    stats = StatsAggregator.compute([campaign])

    assert stats.average_contribution == Decimal("30.01") / 3
    assert stats.average_contribution != Decimal("10.00")
