"""
Account Service Microservice

Per-user account properties with visibility scopes and verification state.
"""

from .account_service import AccountService
from .models import (
    Account,
    AccountProperty,
    AccountUser,
    PropertyName,
    Scope,
    VerificationStatus,
)
from .protocols import AccountServiceError, InvalidArgumentError, InvalidScopeError

__version__ = "1.0.0"
