"""
Group Gift Service Protocols

Defines interfaces for dependency injection and testing.
Following the protocol-based architecture pattern.
"""

from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple, TypeVar, runtime_checkable

from .models import GroupGift


T = TypeVar("T")


# ====================
# Repository Protocol
# ====================


@runtime_checkable
class GroupGiftRepositoryProtocol(Protocol):
    """Repository interface for group gift campaigns"""

    async def initialize(self) -> None:
        """Open connections / create schema"""
        ...

    async def close(self) -> None:
        """Release connections"""
        ...

    async def create(self, campaign: GroupGift) -> GroupGift:
        """
        Persist a new campaign.

        Args:
            campaign: Campaign to store (its group_gift_id is ignored)

        Returns:
            Stored campaign with an id strictly above every id issued before
        """
        ...

    async def get_by_id(self, group_gift_id: int) -> GroupGift:
        """
        Get campaign by ID.

        Raises:
            CampaignNotFoundError: If the id does not resolve
        """
        ...

    async def get_all(self) -> List[GroupGift]:
        """All campaigns, newest first"""
        ...

    async def get_by_recipient(self, recipient_id: int) -> List[GroupGift]:
        """Campaigns for a recipient, newest first"""
        ...

    async def get_by_creator(self, created_by: str) -> List[GroupGift]:
        """Campaigns started by a creator, newest first"""
        ...

    async def update(self, campaign: GroupGift) -> GroupGift:
        """
        Replace a stored campaign with the given full document.

        Raises:
            CampaignNotFoundError: If the id does not resolve
        """
        ...

    async def delete(self, group_gift_id: int) -> bool:
        """
        Delete a campaign.

        Raises:
            CampaignNotFoundError: If the id does not resolve
        """
        ...

    async def apply(
        self, group_gift_id: int, mutation: Callable[[GroupGift], T]
    ) -> Tuple[GroupGift, T]:
        """
        Atomic read-modify-write of one campaign.

        Loads the campaign, calls mutation on a private copy and persists the copy
        only if mutation returns normally. Calls for the same id are serialized.

        Returns:
            (persisted campaign, mutation result)

        Raises:
            CampaignNotFoundError: If the id does not resolve
            Whatever mutation raises, with nothing persisted
        """
        ...

    async def get_version(self) -> int:
        """Counter incremented on every write"""
        ...


# ====================
# Event Bus Protocol
# ====================


@runtime_checkable
class EventBusProtocol(Protocol):
    """Event bus interface for publishing notification intents"""

    async def publish_event(self, event: Any) -> Any:
        """
        Publish an event.

        Args:
            event: core.nats_client.Event envelope
        """
        ...


# ====================
# Custom Exceptions (no I/O operations)
# ====================


class GroupGiftServiceError(Exception):
    """Base exception for group gift service errors"""
    pass


class ValidationError(GroupGiftServiceError):
    """Raised when input is malformed. Nothing has been stored."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class CampaignNotFoundError(GroupGiftServiceError):
    """Raised when a group gift id does not resolve"""

    def __init__(self, message: str, group_gift_id: Optional[int] = None):
        super().__init__(message)
        self.group_gift_id = group_gift_id


class DuplicateContributorError(GroupGiftServiceError):
    """Raised when an email has already contributed to the campaign"""

    def __init__(
        self,
        message: str,
        group_gift_id: Optional[int] = None,
        email: Optional[str] = None,
    ):
        super().__init__(message)
        self.group_gift_id = group_gift_id
        self.email = email


class OverfundingError(GroupGiftServiceError):
    """Raised when a contribution exceeds the remaining amount"""

    def __init__(
        self,
        message: str,
        group_gift_id: Optional[int] = None,
        amount: Optional[Decimal] = None,
        remaining_amount: Optional[Decimal] = None,
    ):
        super().__init__(message)
        self.group_gift_id = group_gift_id
        self.amount = amount
        self.remaining_amount = remaining_amount


class RepositoryError(GroupGiftServiceError):
    """Raised when the storage backend fails"""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


__all__ = [
    "GroupGiftRepositoryProtocol",
    "EventBusProtocol",
    "GroupGiftServiceError",
    "ValidationError",
    "CampaignNotFoundError",
    "DuplicateContributorError",
    "OverfundingError",
    "RepositoryError",
]
