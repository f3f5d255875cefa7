"""
Component Tests for Group Gift Event Publishers

Notification intents wrapped in core.nats_client.Event envelopes.
"""

from decimal import Decimal

import pytest

from core.nats_client import Event
from microservices.group_gift_service.events.models import (
    GroupGiftEventType,
    NotificationIntent,
    create_notification_intent,
    create_group_gift_created_event_data,
)
from microservices.group_gift_service.events.publishers import (
    publish_contribution_added,
    publish_group_gift_completed,
    publish_group_gift_created,
    publish_intent,
    publish_invitations_sent,
)


@pytest.mark.component
@pytest.mark.asyncio
class TestPublishers:

    async def test_created_event_envelope(self, mock_event_bus, data_factory):
        campaign = data_factory.make_group_gift(group_gift_id=3, target_amount=Decimal("120.00"))

        event = await publish_group_gift_created(mock_event_bus, campaign)

        assert isinstance(event, Event)
        assert event.type == "group_gift.created"
        assert event.source == "group_gift_service"
        assert event.subject == "group_gift.created"
        published = mock_event_bus.assert_event_published("group_gift.created")
        intent = NotificationIntent(**published["data"])
        assert intent.kind == GroupGiftEventType.GROUP_GIFT_CREATED
        assert intent.campaign_id == 3
        assert intent.payload["target_amount"] == "120.00"
        assert intent.payload["created_by"] == campaign.created_by

    async def test_invitations_sent_lists_invitees(self, mock_event_bus, data_factory):
        campaign = data_factory.make_group_gift()
        invitations = [data_factory.make_invitation(), data_factory.make_invitation()]

        await publish_invitations_sent(mock_event_bus, campaign, invitations)

        published = mock_event_bus.assert_event_published("group_gift.invitations_sent")
        assert [i["email"] for i in published["data"]["payload"]["invitees"]] == [
            i.email for i in invitations
        ]

    async def test_invitations_sent_skipped_when_empty(self, mock_event_bus, data_factory):
        assert await publish_invitations_sent(mock_event_bus, data_factory.make_group_gift(), []) is None
        mock_event_bus.assert_no_events_published()

    async def test_contribution_and_completed(self, mock_event_bus, data_factory):
        campaign = data_factory.make_funded_group_gift([Decimal("40"), Decimal("60")])
        contribution = campaign.contributors[-1]

        await publish_contribution_added(mock_event_bus, campaign, contribution)
        await publish_group_gift_completed(mock_event_bus, campaign)

        added = mock_event_bus.assert_event_published("group_gift.contribution_added")
        assert added["data"]["payload"]["amount"] == "60"
        assert added["data"]["payload"]["contributor_email"] == contribution.email
        assert added["data"]["payload"]["message"] is None
        completed = mock_event_bus.assert_event_published("group_gift.completed")
        assert completed["data"]["payload"]["contributor_count"] == 2

    async def test_no_bus_is_noop(self, data_factory):
        assert await publish_group_gift_created(None, data_factory.make_group_gift()) is None

    async def test_failure_is_swallowed(self, mock_event_bus, data_factory):
        mock_event_bus.set_error(RuntimeError("publish failed"))
        campaign = data_factory.make_group_gift()
        intent = create_notification_intent(
            GroupGiftEventType.GROUP_GIFT_CREATED,
            campaign.group_gift_id,
            create_group_gift_created_event_data(
                group_gift_id=campaign.group_gift_id,
                title=campaign.title,
                recipient_id=campaign.recipient_id,
                target_amount=campaign.target_amount,
                deadline=campaign.deadline,
                created_by=campaign.created_by,
            ),
        )

        assert await publish_intent(mock_event_bus, intent) is None
        mock_event_bus.assert_no_events_published()

    async def test_event_round_trips_through_dict(self, mock_event_bus, data_factory):
        event = await publish_group_gift_created(mock_event_bus, data_factory.make_group_gift())

        restored = Event.from_dict(event.to_dict())

        assert restored.id == event.id
        assert restored.type == event.type
        assert restored.data == event.data
