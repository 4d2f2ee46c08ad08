"""
Account Service Event Models

Event data models for account property events.
"""

from datetime import datetime
from enum import Enum
from typing import Dict

from pydantic import BaseModel, Field

# =============================================================================
# Event Type Definitions (Service-Specific)
# =============================================================================

class AccountEventType(str, Enum):
    """
    Events published by account_service.

    Stream: account-stream
    Subjects: account.>
    """
    USER_UPDATED = "AccountManager::userUpdated"
    VERIFICATION_REQUESTED = "account.verification_requested"


class AccountSubscribedEventType(str, Enum):
    """Events that account_service subscribes to from other services."""
    USER_DELETED = "user.deleted"


# ============================================================================
# Account Property Event Models
# ============================================================================


class UserUpdatedEventData(BaseModel):
    """
    Event: AccountManager::userUpdated
    Triggered after an account record was inserted or updated
    """

    user_id: str = Field(..., description="User ID")
    properties: Dict[str, Dict[str, str]] = Field(
        ..., description="Final normalized property set"
    )
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_12345",
                "properties": {
                    "displayname": {"value": "Jane Doe", "scope": "v2-federated", "verified": "0"},
                },
                "updated_at": "2025-11-14T10:05:00Z",
            }
        }


class VerificationRequestedEventData(BaseModel):
    """
    Event: account.verification_requested
    Triggered when a changed property needs to be confirmed by its owner
    """

    user_id: str = Field(..., description="User ID")
    property_name: str = Field(..., description="Property awaiting verification")
    value: str = Field(..., description="Value to verify, e.g. the new email")
    token: str = Field(..., description="Verification token to deliver")
    requested_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_12345",
                "property_name": "email",
                "value": "new@example.com",
                "token": "m2Vx...",
                "requested_at": "2025-11-14T10:05:00Z",
            }
        }


# ============================================================================
# Helper Functions
# ============================================================================


def create_user_updated_event_data(
    user_id: str, properties: Dict[str, Dict[str, str]]
) -> UserUpdatedEventData:
    """Create user updated event data"""
    return UserUpdatedEventData(user_id=user_id, properties=properties)


def create_verification_requested_event_data(
    user_id: str, property_name: str, value: str, token: str
) -> VerificationRequestedEventData:
    """Create verification requested event data"""
    return VerificationRequestedEventData(
        user_id=user_id, property_name=property_name, value=value, token=token
    )
