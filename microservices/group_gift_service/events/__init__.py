"""
Group Gift Service Event Package

Notification intents for campaign lifecycle:
created, invitations sent, contribution added, completed.
"""

from .models import (
    GroupGiftEventType,
    NotificationIntent,
    GroupGiftCreatedEventData,
    InvitationsSentEventData,
    ContributionAddedEventData,
    GroupGiftCompletedEventData,
    create_notification_intent,
    create_group_gift_created_event_data,
    create_invitations_sent_event_data,
    create_contribution_added_event_data,
    create_group_gift_completed_event_data,
)

from .publishers import (
    publish_intent,
    publish_group_gift_created,
    publish_invitations_sent,
    publish_contribution_added,
    publish_group_gift_completed,
)

__all__ = [
    # Event models
    "GroupGiftEventType",
    "NotificationIntent",
    "GroupGiftCreatedEventData",
    "InvitationsSentEventData",
    "ContributionAddedEventData",
    "GroupGiftCompletedEventData",
    # Helper functions
    "create_notification_intent",
    "create_group_gift_created_event_data",
    "create_invitations_sent_event_data",
    "create_contribution_added_event_data",
    "create_group_gift_completed_event_data",
    # Publishers
    "publish_intent",
    "publish_group_gift_created",
    "publish_invitations_sent",
    "publish_contribution_added",
    "publish_group_gift_completed",
]
