"""
NATS JetStream Client for Python Microservices
Provides event-driven communication between services

This module wraps the nats-py client with the platform's Event envelope,
stream naming convention and handler registration.
"""

import json
import logging
import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

import nats
from nats.aio.client import Client as NATS
from nats.aio.msg import Msg
from nats.errors import Error as NatsError
from nats.js import JetStreamContext

from core.config import InfraConfig


class DecimalEncoder(json.JSONEncoder):
    """Custom JSON encoder that handles Decimal types"""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        return super().default(obj)


logger = logging.getLogger(__name__)


class EventType(Enum):
    """Event types used by the account service"""

    # Account property events
    ACCOUNT_USER_UPDATED = "AccountManager::userUpdated"
    ACCOUNT_VERIFICATION_REQUESTED = "account.verification_requested"

    # User identity events (published by the identity provider)
    USER_DELETED = "user.deleted"


class ServiceSource(Enum):
    """Service sources"""

    AUTH_SERVICE = "auth_service"
    ACCOUNT_SERVICE = "account_service"


# NATS subjects may not contain the "::" style names some event types use
EVENT_SUBJECTS: Dict[str, str] = {
    EventType.ACCOUNT_USER_UPDATED.value: "account.user_updated",
}


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
        self.subject = subject
        self.timestamp = datetime.utcnow().isoformat()
        self.metadata = metadata or {}
        self.version = "1.0.0"

    @property
    def nats_subject(self) -> str:
        """Subject the event is published on"""
        return EVENT_SUBJECTS.get(self.type, self.type)

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


EventHandler = Callable[[Event], Awaitable[None]]


class NATSEventBus:
    """
    NATS JetStream event bus.

    Streams are derived from the first subject token
    (account.* -> account-stream, user.* -> user-stream).
    """

    def __init__(
        self,
        service_name: str,
        config: Optional[InfraConfig] = None,
    ):
        """
        Initialize NATS Event Bus.

        Args:
            service_name: Name of the service (used as connection name)
            config: Optional infrastructure config (defaults to environment)
        """
        self.service_name = service_name
        self.config = config or InfraConfig.from_env()
        self.servers = self.config.nats_servers

        self._nc: Optional[NATS] = None
        self._js: Optional[JetStreamContext] = None
        self._subscriptions: Dict[str, Any] = {}  # pattern -> subscription
        self._streams: List[str] = []
        self._is_connected = False

        logger.info(f"NATS EventBus initialized: {self.servers}")

    async def connect(self):
        """Connect to NATS and open a JetStream context"""
        try:
            self._nc = await nats.connect(servers=self.servers, name=self.service_name)
            self._js = self._nc.jetstream()
            self._is_connected = True
            logger.info(f"Connected to NATS as {self.service_name}")
        except (OSError, NatsError) as e:
            logger.error(f"Failed to connect to NATS: {e}")
            raise

    def _get_stream_name_for_event(self, subject: str) -> str:
        """Determine the JetStream stream name from the subject prefix"""
        prefix = subject.split('.')[0]
        return f"{prefix}-stream"

    async def _ensure_stream(self, subject: str) -> str:
        """Create the stream for a subject if needed (idempotent)"""
        stream_name = self._get_stream_name_for_event(subject)
        if stream_name in self._streams:
            return stream_name

        prefix = subject.split('.')[0]
        try:
            await self._js.add_stream(name=stream_name, subjects=[f"{prefix}.>"], max_msgs=100000)
        except NatsError as e:
            logger.debug(f"Stream creation note: {e}")
        self._streams.append(stream_name)
        return stream_name

    async def publish_event(self, event: Event) -> bool:
        """
        Publish an event to NATS JetStream.

        Raises:
            RuntimeError: If the bus is not connected
            nats.errors.Error: If the publish is not acknowledged
        """
        if not self._is_connected or not self._js:
            raise RuntimeError("Not connected to NATS")

        subject = event.nats_subject
        data = json.dumps(event.to_dict(), cls=DecimalEncoder).encode()
        stream_name = await self._ensure_stream(subject)

        try:
            ack = await self._js.publish(subject, data)
        except NatsError as e:
            logger.error(f"Error publishing event {event.id} to {subject}: {e}")
            raise

        logger.info(f"Published event {event.type} [{event.id}] to stream {stream_name}, seq={ack.seq}")
        return True

    async def subscribe_to_events(
        self, pattern: str, handler: EventHandler, durable: Optional[str] = None
    ) -> Optional[str]:
        """
        Subscribe to events with a subject pattern using a JetStream consumer.

        Args:
            pattern: Subject pattern to subscribe to (e.g., "user.deleted")
            handler: Async callback receiving an Event
            durable: Optional durable name for the consumer
        """
        if not self._is_connected or not self._js:
            logger.error("Not connected to NATS")
            return None

        await self._ensure_stream(pattern)
        durable_name = durable or f"{self.service_name}-{pattern.replace('.', '-').replace('*', 'all')}"

        async def _on_message(msg: Msg):
            try:
                payload = json.loads(msg.data.decode())
                if 'type' in payload and 'source' in payload and 'data' in payload:
                    event = Event.from_dict(payload)
                else:
                    # Raw payload published without the envelope
                    event = Event.__new__(Event)
                    event.id = str(uuid.uuid4())
                    event.type = msg.subject
                    event.source = 'unknown'
                    event.subject = msg.subject
                    event.timestamp = datetime.utcnow().isoformat()
                    event.data = payload
                    event.metadata = {}
                    event.version = '1.0.0'
            except (ValueError, KeyError, TypeError) as e:
                # Undecodable messages are acked and dropped
                logger.error(f"Error decoding message on {msg.subject}: {e}")
                await msg.ack()
                return

            try:
                await handler(event)
            except Exception as e:
                logger.error(f"Handler failed for {event.type} [{event.id}], requesting redelivery: {e}")
                await msg.nak()
                return

            await msg.ack()

        subscription = await self._js.subscribe(pattern, durable=durable_name, cb=_on_message)
        self._subscriptions[pattern] = subscription
        logger.info(f"Subscribed to {pattern} (JetStream consumer {durable_name})")
        return durable_name

    async def unsubscribe(self, pattern: str) -> bool:
        """Unsubscribe from a pattern"""
        subscription = self._subscriptions.pop(pattern, None)
        if subscription is None:
            return False
        await subscription.unsubscribe()
        logger.info(f"Unsubscribed from {pattern}")
        return True

    async def close(self):
        """Drain subscriptions and close the connection"""
        for pattern in list(self._subscriptions.keys()):
            await self.unsubscribe(pattern)

        if self._nc:
            await self._nc.drain()
            self._nc = None
            self._js = None

        self._is_connected = False
        logger.info("Disconnected from NATS")

    @property
    def is_connected(self) -> bool:
        """Check if connected to NATS"""
        return self._is_connected


# Singleton instance
_event_bus: Optional[NATSEventBus] = None


async def get_event_bus(
    service_name: str,
    config: Optional[InfraConfig] = None,
) -> NATSEventBus:
    """
    Get or create event bus instance.

    Args:
        service_name: Name of the service using the event bus
        config: Optional infrastructure config

    Returns:
        Connected NATSEventBus instance
    """
    global _event_bus

    if _event_bus is None:
        event_bus = NATSEventBus(service_name=service_name, config=config)
        await event_bus.connect()
        _event_bus = event_bus

    return _event_bus
