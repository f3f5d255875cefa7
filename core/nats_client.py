"""
NATS Client for Python Microservices
Provides event-driven communication between services

This module wraps the nats-py client and defines the shared Event envelope
used by every publisher in the service.
"""

import json
import logging
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

import nats
from nats.aio.client import Client as NATS

from core.config import InfraConfig, get_settings

logger = logging.getLogger(__name__)


class DecimalEncoder(json.JSONEncoder):
    """Custom JSON encoder that handles Decimal and date types"""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        return super().default(obj)


class EventType(Enum):
    """Event types published by the group gift service"""

    GROUP_GIFT_CREATED = "group_gift.created"
    GROUP_GIFT_INVITATIONS_SENT = "group_gift.invitations_sent"
    GROUP_GIFT_CONTRIBUTION_ADDED = "group_gift.contribution_added"
    GROUP_GIFT_COMPLETED = "group_gift.completed"


class ServiceSource(Enum):
    """Service sources"""

    GROUP_GIFT_SERVICE = "group_gift_service"


class Event:
    """Event model"""

    def __init__(
        self,
        event_type: EventType,
        source: ServiceSource,
        data: Dict[str, Any],
        subject: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ):
        self.id = str(uuid.uuid4())
        self.type = event_type.value
        self.source = source.value
        self.data = data
        self.subject = subject or event_type.value
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.metadata = metadata or {}
        self.version = "1.0.0"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "source": self.source,
            "subject": self.subject,
            "timestamp": self.timestamp,
            "data": self.data,
            "metadata": self.metadata,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        event = cls.__new__(cls)
        event.id = data.get("id")
        event.type = data.get("type")
        event.source = data.get("source")
        event.subject = data.get("subject")
        event.timestamp = data.get("timestamp")
        event.data = data.get("data", {})
        event.metadata = data.get("metadata", {})
        event.version = data.get("version", "1.0.0")
        return event


class NATSEventBus:
    """
    NATS event bus on top of nats-py.

    Publishing only hands the message to the client's outbound buffer;
    callers never wait for a subscriber to receive it.
    """

    def __init__(self, service_name: str, config: Optional[InfraConfig] = None):
        """
        Initialize NATS Event Bus.

        Args:
            service_name: Name of the service (used as the client name)
            config: Infrastructure config (defaults to global settings)
        """
        if config is None:
            config = get_settings().infrastructure

        self.service_name = service_name
        self.servers = config.nats_servers
        self._client: Optional[NATS] = None

        logger.info(f"NATS EventBus initialized: {self.servers}")

    async def connect(self):
        """Connect to the NATS server"""
        try:
            self._client = await nats.connect(
                servers=[self.servers],
                name=self.service_name,
            )
            logger.info(f"Connected to NATS as {self.service_name}")
        except Exception as e:
            logger.error(f"Failed to connect to NATS: {e}")
            raise

    async def publish_event(self, event: Event) -> bool:
        """
        Publish an event on its subject.

        Returns:
            True if the event was handed to the client, False if not connected
        """
        if not self.is_connected:
            logger.warning(f"NATS not connected, dropping event {event.type}")
            return False

        payload = json.dumps(event.to_dict(), cls=DecimalEncoder).encode("utf-8")
        await self._client.publish(event.subject, payload)
        logger.debug(f"Published {event.type} ({event.id})")
        return True

    async def close(self):
        """Drain and close the connection"""
        if self._client is not None:
            try:
                await self._client.drain()
            finally:
                self._client = None
            logger.info(f"NATS connection closed for {self.service_name}")

    @property
    def is_connected(self) -> bool:
        return self._client is not None and self._client.is_connected


async def get_event_bus(
    service_name: str,
    config: Optional[InfraConfig] = None,
) -> NATSEventBus:
    """
    Create and connect an event bus for a service.

    Args:
        service_name: Service name
        config: Infrastructure config (defaults to global settings)

    Returns:
        Connected NATSEventBus
    """
    event_bus = NATSEventBus(service_name=service_name, config=config)
    await event_bus.connect()
    return event_bus

