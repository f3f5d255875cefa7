"""
Unit Test Fixtures for Group Gift Service

Uses GroupGiftTestDataFactory from the data contract.
"""

import pytest

from microservices.group_gift_service.contribution_ledger import ContributionLedger
from tests.contracts.group_gift.data_contract import GroupGiftTestDataFactory


@pytest.fixture
def factory():
    """Provide test data factory"""
    return GroupGiftTestDataFactory


@pytest.fixture
def ledger():
    """Provide a fresh contribution ledger"""
    return ContributionLedger()


@pytest.fixture
def now():
    """Fixed acceptance timestamp"""
    return GroupGiftTestDataFactory.make_now()
