"""
Group Gift Service Event Publishers

Wrap notification intents in core.nats_client.Event envelopes and hand them to
the event bus. Delivery failures are logged and never reach the caller.
"""

import logging
from typing import List, Optional

from core.nats_client import Event, EventType, ServiceSource

from ..models import Contribution, GroupGift, Invitation
from .models import (
    GroupGiftEventType,
    NotificationIntent,
    create_contribution_added_event_data,
    create_group_gift_completed_event_data,
    create_group_gift_created_event_data,
    create_invitations_sent_event_data,
    create_notification_intent,
)

logger = logging.getLogger(__name__)


_EVENT_TYPES = {
    GroupGiftEventType.GROUP_GIFT_CREATED: EventType.GROUP_GIFT_CREATED,
    GroupGiftEventType.INVITATIONS_SENT: EventType.GROUP_GIFT_INVITATIONS_SENT,
    GroupGiftEventType.CONTRIBUTION_ADDED: EventType.GROUP_GIFT_CONTRIBUTION_ADDED,
    GroupGiftEventType.GROUP_GIFT_COMPLETED: EventType.GROUP_GIFT_COMPLETED,
}


async def publish_intent(event_bus, intent: NotificationIntent) -> Optional[Event]:
    """
    Publish one notification intent

    Args:
        event_bus: NATS event bus instance (None disables publishing)
        intent: Intent to publish

    Returns:
        The published Event, or None when nothing was handed to the bus
    """
    if event_bus is None:
        return None

    try:
        event = Event(
            event_type=_EVENT_TYPES[intent.kind],
            source=ServiceSource.GROUP_GIFT_SERVICE,
            data=intent.model_dump(mode="json"),
        )
        await event_bus.publish_event(event)
        logger.info(f"Published {intent.kind.value} for group gift {intent.campaign_id}")
        return event

    except Exception as e:
        logger.error(f"Failed to publish {intent.kind.value} for group gift {intent.campaign_id}: {e}")
        return None


# ============================================================================
# Campaign Lifecycle Publishers
# ============================================================================


async def publish_group_gift_created(event_bus, campaign: GroupGift) -> Optional[Event]:
    """Publish group_gift.created event"""
    data = create_group_gift_created_event_data(
        group_gift_id=campaign.group_gift_id,
        title=campaign.title,
        recipient_id=campaign.recipient_id,
        target_amount=campaign.target_amount,
        deadline=campaign.deadline,
        created_by=campaign.created_by,
    )
    intent = create_notification_intent(
        GroupGiftEventType.GROUP_GIFT_CREATED, campaign.group_gift_id, data
    )
    return await publish_intent(event_bus, intent)


async def publish_invitations_sent(
    event_bus, campaign: GroupGift, invitations: List[Invitation]
) -> Optional[Event]:
    """
    Publish group_gift.invitations_sent event

    Args:
        event_bus: NATS event bus instance
        campaign: Campaign the invitations belong to
        invitations: Invitations added by the call (nothing is published if empty)
    """
    if not invitations:
        return None

    data = create_invitations_sent_event_data(
        group_gift_id=campaign.group_gift_id,
        title=campaign.title,
        invitees=[{"email": i.email, "name": i.name} for i in invitations],
    )
    intent = create_notification_intent(
        GroupGiftEventType.INVITATIONS_SENT, campaign.group_gift_id, data
    )
    return await publish_intent(event_bus, intent)


async def publish_contribution_added(
    event_bus, campaign: GroupGift, contribution: Contribution
) -> Optional[Event]:
    """Publish group_gift.contribution_added event"""
    data = create_contribution_added_event_data(
        group_gift_id=campaign.group_gift_id,
        contribution_id=contribution.contribution_id,
        contributor_name=contribution.name,
        contributor_email=contribution.email,
        amount=contribution.amount,
        current_amount=campaign.current_amount,
        target_amount=campaign.target_amount,
        message=contribution.message or None,
    )
    intent = create_notification_intent(
        GroupGiftEventType.CONTRIBUTION_ADDED, campaign.group_gift_id, data
    )
    return await publish_intent(event_bus, intent)


async def publish_group_gift_completed(event_bus, campaign: GroupGift) -> Optional[Event]:
    """Publish group_gift.completed event"""
    data = create_group_gift_completed_event_data(
        group_gift_id=campaign.group_gift_id,
        title=campaign.title,
        recipient_id=campaign.recipient_id,
        gift_id=campaign.gift_id,
        target_amount=campaign.target_amount,
        current_amount=campaign.current_amount,
        contributor_count=len(campaign.contributors),
        created_by=campaign.created_by,
    )
    intent = create_notification_intent(
        GroupGiftEventType.GROUP_GIFT_COMPLETED, campaign.group_gift_id, data
    )
    return await publish_intent(event_bus, intent)
