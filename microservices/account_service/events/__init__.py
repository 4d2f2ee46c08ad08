"""
Account Service Events Module

Event-driven notifications for account property changes.
"""

from .handlers import get_event_handlers, handle_user_deleted
from .models import (
    AccountEventType,
    AccountSubscribedEventType,
    UserUpdatedEventData,
    VerificationRequestedEventData,
    create_user_updated_event_data,
    create_verification_requested_event_data,
)
from .publishers import (
    publish_user_updated,
    publish_verification_requested,
)

__all__ = [
    # Handlers
    "get_event_handlers",
    "handle_user_deleted",
    # Models
    "AccountEventType",
    "AccountSubscribedEventType",
    "UserUpdatedEventData",
    "VerificationRequestedEventData",
    "create_user_updated_event_data",
    "create_verification_requested_event_data",
    # Publishers
    "publish_user_updated",
    "publish_verification_requested",
]
