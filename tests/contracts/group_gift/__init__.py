"""
Group Gift Service Contracts

This module provides the contracts for group_gift_service testing.
"""

from .data_contract import (
    GroupGiftTestDataFactory,
    GroupGiftCreateRequestBuilder,
)

__all__ = [
    "GroupGiftTestDataFactory",
    "GroupGiftCreateRequestBuilder",
]
