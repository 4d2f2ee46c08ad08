"""
Shared Test Fixtures

Centralized factories used across all test layers.

Structure:
    - common.py: Base ID generators
    - account_fixtures.py: Account property factories
"""

from .common import make_user_id

from .account_fixtures import (
    make_property,
    make_properties,
    make_account_user,
    make_update_request,
)

__all__ = [
    "make_user_id",
    "make_property",
    "make_properties",
    "make_account_user",
    "make_update_request",
]
