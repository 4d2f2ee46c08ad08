"""
Account Property Verification

Starts the confirmation of a changed email address: issues a token, marks
the property as in progress and asks the notification side to deliver it.
"""

import logging
import secrets
from typing import Optional

from .events.publishers import publish_verification_requested
from .models import AccountUser, Properties, PropertyName, VerificationStatus
from .protocols import EventBusProtocol

logger = logging.getLogger(__name__)


class EmailVerificationInitiator:
    """Default VerifierProtocol implementation for the email property"""

    def __init__(self, event_bus: Optional[EventBusProtocol] = None, token_bytes: int = 32):
        self.event_bus = event_bus
        self.token_bytes = token_bytes

    def generate_token(self) -> str:
        return secrets.token_urlsafe(self.token_bytes)

    async def start_verification(
        self, user: AccountUser, old_properties: Properties, new_properties: Properties
    ) -> Properties:
        email_entry = new_properties.get(PropertyName.EMAIL.value)
        if not email_entry or not email_entry.get("value"):
            return new_properties

        token = self.generate_token()
        result = dict(new_properties)
        result[PropertyName.EMAIL.value] = {
            **email_entry,
            "verified": VerificationStatus.VERIFICATION_IN_PROGRESS.value,
            "verification_data": token,
        }

        logger.info(f"Email verification started for user {user.user_id}")
        if self.event_bus is not None:
            await publish_verification_requested(
                self.event_bus,
                user_id=user.user_id,
                property_name=PropertyName.EMAIL.value,
                value=email_entry["value"],
                token=token,
            )
        return result
