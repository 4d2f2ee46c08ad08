"""
Account Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

# Import only models (no I/O dependencies)
from .models import AccountUser, Properties


class AccountServiceError(Exception):
    """Base exception for account service errors"""
    pass


class InvalidScopeError(AccountServiceError, ValueError):
    """Scope value unknown or not allowed for the property"""
    pass


class InvalidArgumentError(AccountServiceError, ValueError):
    """Malformed property value (phone number, website, length)"""
    pass


@runtime_checkable
class AccountRepositoryProtocol(Protocol):
    """
    Interface for Account Repository.

    Implementations must provide these methods.
    Used for dependency injection to enable testing.
    """

    async def get_properties(self, user_id: str) -> Optional[Properties]:
        """Load the stored property set, None when no record exists"""
        ...

    async def insert_properties(self, user_id: str, properties: Properties) -> None:
        """Insert a new record for the user"""
        ...

    async def update_properties(self, user_id: str, properties: Properties) -> None:
        """Replace the stored record of the user"""
        ...

    async def delete_properties(self, user_id: str) -> bool:
        """Delete the record of the user"""
        ...

    async def search_users(self, property_name: str, values: List[str]) -> Dict[str, str]:
        """Map each matching property value to the owning user id"""
        ...


@runtime_checkable
class EventBusProtocol(Protocol):
    """Interface for Event Bus - no I/O imports"""

    async def publish_event(self, event: Any) -> None:
        """Publish an event"""
        ...


@runtime_checkable
class VerifierProtocol(Protocol):
    """Interface for starting the verification of a changed property"""

    async def start_verification(
        self, user: AccountUser, old_properties: Properties, new_properties: Properties
    ) -> Properties:
        """Return new_properties with verification status and pending token applied"""
        ...


@runtime_checkable
class ConfigProviderProtocol(Protocol):
    """Interface for system configuration lookups"""

    def get_system_value_string(self, key: str, default: str = "") -> str:
        """Get a string setting"""
        ...
