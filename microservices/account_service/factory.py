"""
Account Service Factory

Factory functions for creating service instances with real dependencies.
This is the ONLY place that imports I/O-dependent modules.

Usage:
    from .factory import create_account_service
    service = create_account_service(config, event_bus)
"""
from typing import Optional

from core.config import AccountConfig, get_settings

from .account_service import AccountService
from .verification import EmailVerificationInitiator


def create_account_service(
    config: Optional[AccountConfig] = None,
    event_bus=None,
    repository=None,
) -> AccountService:
    """
    Create AccountService with real dependencies.

    This function imports the real repository (which has I/O dependencies).
    Use this in production, NOT in tests.

    Args:
        config: Account service configuration
        event_bus: Event bus for publishing events
        repository: Repository override (defaults to PostgreSQL)

    Returns:
        Configured AccountService instance
    """
    config = config or get_settings()

    if repository is None:
        # Import real repository here (not at module level)
        from .account_repository import AccountRepository
        repository = AccountRepository(config=config.infrastructure)

    verifier = EmailVerificationInitiator(
        event_bus=event_bus,
        token_bytes=config.verification_token_bytes,
    )

    return AccountService(
        repository=repository,
        event_bus=event_bus,
        verifier=verifier,
        config=config,
    )
