"""
Account Service Event Publishers

Publish events for account property changes.
"""

import logging
from typing import Dict

from core.nats_client import Event, EventType, ServiceSource

from .models import (
    create_user_updated_event_data,
    create_verification_requested_event_data,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Account Property Event Publishers
# ============================================================================


async def publish_user_updated(
    event_bus, user_id: str, properties: Dict[str, Dict[str, str]]
):
    """
    Publish AccountManager::userUpdated event

    Errors propagate: the caller's write already happened and the
    request must learn that the notification did not go out.

    Args:
        event_bus: NATS event bus instance
        user_id: User ID
        properties: Final normalized property set
    """
    event_data = create_user_updated_event_data(user_id=user_id, properties=properties)

    event = Event(
        event_type=EventType.ACCOUNT_USER_UPDATED,
        source=ServiceSource.ACCOUNT_SERVICE,
        data=event_data.model_dump(mode="json"),
        subject=user_id,
    )

    await event_bus.publish_event(event)
    logger.info(f"Published {EventType.ACCOUNT_USER_UPDATED.value} for user {user_id}")


async def publish_verification_requested(
    event_bus, user_id: str, property_name: str, value: str, token: str
):
    """
    Publish account.verification_requested event

    Args:
        event_bus: NATS event bus instance
        user_id: User ID
        property_name: Property awaiting verification
        value: Value to verify
        token: Verification token
    """
    try:
        event_data = create_verification_requested_event_data(
            user_id=user_id, property_name=property_name, value=value, token=token
        )

        event = Event(
            event_type=EventType.ACCOUNT_VERIFICATION_REQUESTED,
            source=ServiceSource.ACCOUNT_SERVICE,
            data=event_data.model_dump(mode="json"),
            subject=user_id,
        )

        await event_bus.publish_event(event)
        logger.info(f"Published account.verification_requested for user {user_id}, property: {property_name}")

    except Exception as e:
        logger.error(f"Failed to publish account.verification_requested: {e}")
        # Don't raise - the pending status is stored, delivery can be re-requested
