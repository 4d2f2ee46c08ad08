"""
Account Service Event Handlers

Handle events from other services that affect account records.
"""

import logging
from typing import Awaitable, Callable, Dict

from core.nats_client import Event

from .models import AccountSubscribedEventType

logger = logging.getLogger(__name__)


# ============================================================================
# Event Handlers
# ============================================================================


async def handle_user_deleted(event: Event, account_service) -> None:
    """
    Handle user.deleted event from the identity provider

    Removes the stored account record of the user.

    Event data:
        - user_id: User ID
    """
    user_id = event.data.get("user_id")
    if not user_id:
        logger.warning(f"Ignoring user.deleted event {event.id} without user_id")
        return

    logger.info(f"Received user.deleted for user {user_id}")
    await account_service.delete_user(user_id)


# ============================================================================
# Event Handler Registry
# ============================================================================


def get_event_handlers(account_service) -> Dict[str, Callable[[Event], Awaitable[None]]]:
    """
    Return a mapping of event types to handler functions

    This is used in main.py to register event subscriptions
    """

    async def on_user_deleted(event: Event) -> None:
        await handle_user_deleted(event, account_service)

    return {
        AccountSubscribedEventType.USER_DELETED.value: on_user_deleted,
    }
