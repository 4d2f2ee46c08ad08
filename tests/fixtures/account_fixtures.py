"""
Account Service Fixtures

Factories for account property test data.
"""
from typing import Any, Dict, Optional

from microservices.account_service.models import AccountUser

from .common import make_user_id


def make_property(
    value: str = "",
    scope: Optional[str] = "v2-local",
    verified: Optional[str] = None,
    verification_data: Optional[str] = None,
) -> Dict[str, str]:
    """Create a single property entry; None leaves the key out"""
    entry = {"value": value}
    if scope is not None:
        entry["scope"] = scope
    if verified is not None:
        entry["verified"] = verified
    if verification_data is not None:
        entry["verification_data"] = verification_data
    return entry


def make_properties(**entries: Dict[str, str]) -> Dict[str, Dict[str, str]]:
    """Create a property set keyed by property name"""
    return dict(entries)


def make_account_user(
    user_id: Optional[str] = None,
    display_name: Optional[str] = None,
    email: Optional[str] = None,
) -> AccountUser:
    """Create an identity as handed over by the identity provider"""
    return AccountUser(user_id=user_id or make_user_id(), display_name=display_name, email=email)


def make_update_request(
    properties: Dict[str, Dict[str, Any]],
    display_name: Optional[str] = None,
    email: Optional[str] = None,
) -> Dict[str, Any]:
    """Create a PUT /properties request body"""
    request: Dict[str, Any] = {"properties": properties}
    if display_name is not None:
        request["display_name"] = display_name
    if email is not None:
        request["email"] = email
    return request
