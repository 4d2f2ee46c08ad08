"""
Account Property Scope Normalization

Maps requested visibility values to canonical scopes and enforces the
per-property restrictions.
"""

import logging
from enum import Enum
from typing import Dict, Optional

from .models import LegacyVisibility, RESTRICTED_SCOPE_PROPERTIES, Scope
from .protocols import InvalidScopeError

logger = logging.getLogger(__name__)


class ScopePolicy(str, Enum):
    """How an invalid or disallowed scope is handled"""
    STRICT = "strict"        # raise InvalidScopeError
    FALLBACK = "fallback"    # downgrade to Scope.LOCAL

    @classmethod
    def from_flag(cls, throw_on_data: bool) -> "ScopePolicy":
        return cls.STRICT if throw_on_data else cls.FALLBACK


SCOPE_MAP: Dict[str, Scope] = {
    **{scope.value: scope for scope in Scope},
    LegacyVisibility.PRIVATE.value: Scope.LOCAL,
    LegacyVisibility.CONTACTS_ONLY.value: Scope.FEDERATED,
    LegacyVisibility.PUBLIC.value: Scope.PUBLISHED,
}


def normalize_scope(property_name: str, requested_scope: Optional[str], policy: ScopePolicy) -> Scope:
    """
    Resolve the canonical scope of a property.

    Args:
        property_name: Property the scope belongs to
        requested_scope: Canonical scope, legacy visibility or anything else
        policy: STRICT raises on invalid input, FALLBACK downgrades to LOCAL

    Returns:
        Canonical Scope

    Raises:
        InvalidScopeError: Unknown or disallowed scope under STRICT
    """
    scope = SCOPE_MAP.get(requested_scope) if isinstance(requested_scope, str) else None
    if scope is None:
        if policy is ScopePolicy.STRICT:
            raise InvalidScopeError(f"Invalid scope for {property_name}: {requested_scope!r}")
        logger.debug(f"Unknown scope {requested_scope!r} for {property_name}, using {Scope.LOCAL.value}")
        return Scope.LOCAL

    if scope is Scope.PRIVATE and property_name in RESTRICTED_SCOPE_PROPERTIES:
        if policy is ScopePolicy.STRICT:
            raise InvalidScopeError(f"Private scope is not allowed for {property_name}")
        return Scope.LOCAL

    return scope
