"""
Group Gift Service Event Models

Notification intents emitted by the group gift service. The service only
describes what happened; delivery belongs to the notification consumers.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Event Type Definitions (Service-Specific)
# =============================================================================

class GroupGiftEventType(str, Enum):
    """
    Events published by group_gift_service.

    Stream: group-gift-stream
    Subjects: group_gift.>
    """
    GROUP_GIFT_CREATED = "group_gift.created"
    INVITATIONS_SENT = "group_gift.invitations_sent"
    CONTRIBUTION_ADDED = "group_gift.contribution_added"
    GROUP_GIFT_COMPLETED = "group_gift.completed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# Intent Envelope
# ============================================================================


class NotificationIntent(BaseModel):
    """A request to notify about an event, without performing delivery"""

    kind: GroupGiftEventType = Field(..., description="What happened")
    campaign_id: int = Field(..., description="Group gift the intent is about")
    payload: Dict[str, Any] = Field(default_factory=dict, description="Kind-specific data")
    timestamp: datetime = Field(default_factory=_utcnow)


# ============================================================================
# Payload Models
# ============================================================================


class GroupGiftCreatedEventData(BaseModel):
    """
    Event: group_gift.created
    Triggered when a campaign is started
    """

    group_gift_id: int
    title: str
    recipient_id: int
    target_amount: Decimal
    deadline: date
    created_by: str

    class Config:
        json_schema_extra = {
            "example": {
                "group_gift_id": 12,
                "title": "Mom's birthday",
                "recipient_id": 4,
                "target_amount": "300.00",
                "deadline": "2026-12-01",
                "created_by": "alice@example.com",
            }
        }


class InvitationsSentEventData(BaseModel):
    """
    Event: group_gift.invitations_sent
    Triggered when at least one new invitation was recorded
    """

    group_gift_id: int
    title: str
    invitees: List[Dict[str, str]] = Field(default_factory=list, description="email/name pairs")


class ContributionAddedEventData(BaseModel):
    """
    Event: group_gift.contribution_added
    Triggered when a contribution is accepted
    """

    group_gift_id: int
    contribution_id: int
    contributor_name: str
    contributor_email: str
    amount: Decimal
    current_amount: Decimal
    target_amount: Decimal
    message: Optional[str] = None


class GroupGiftCompletedEventData(BaseModel):
    """
    Event: group_gift.completed
    Triggered when a contribution brings the campaign to its target
    """

    group_gift_id: int
    title: str
    recipient_id: int
    gift_id: Optional[int] = None
    target_amount: Decimal
    current_amount: Decimal
    contributor_count: int
    created_by: str


# ============================================================================
# Helper Functions
# ============================================================================


def create_notification_intent(
    kind: GroupGiftEventType, campaign_id: int, payload: BaseModel
) -> NotificationIntent:
    return NotificationIntent(
        kind=kind,
        campaign_id=campaign_id,
        payload=payload.model_dump(mode="json"),
    )


def create_group_gift_created_event_data(
    group_gift_id: int,
    title: str,
    recipient_id: int,
    target_amount: Decimal,
    deadline: date,
    created_by: str,
) -> GroupGiftCreatedEventData:
    return GroupGiftCreatedEventData(
        group_gift_id=group_gift_id,
        title=title,
        recipient_id=recipient_id,
        target_amount=target_amount,
        deadline=deadline,
        created_by=created_by,
    )


def create_invitations_sent_event_data(
    group_gift_id: int, title: str, invitees: List[Dict[str, str]]
) -> InvitationsSentEventData:
    return InvitationsSentEventData(group_gift_id=group_gift_id, title=title, invitees=invitees)


def create_contribution_added_event_data(
    group_gift_id: int,
    contribution_id: int,
    contributor_name: str,
    contributor_email: str,
    amount: Decimal,
    current_amount: Decimal,
    target_amount: Decimal,
    message: Optional[str] = None,
) -> ContributionAddedEventData:
    return ContributionAddedEventData(
        group_gift_id=group_gift_id,
        contribution_id=contribution_id,
        contributor_name=contributor_name,
        contributor_email=contributor_email,
        amount=amount,
        current_amount=current_amount,
        target_amount=target_amount,
        message=message,
    )


def create_group_gift_completed_event_data(
    group_gift_id: int,
    title: str,
    recipient_id: int,
    target_amount: Decimal,
    current_amount: Decimal,
    contributor_count: int,
    created_by: str,
    gift_id: Optional[int] = None,
) -> GroupGiftCompletedEventData:
    return GroupGiftCompletedEventData(
        group_gift_id=group_gift_id,
        title=title,
        recipient_id=recipient_id,
        gift_id=gift_id,
        target_amount=target_amount,
        current_amount=current_amount,
        contributor_count=contributor_count,
        created_by=created_by,
    )
