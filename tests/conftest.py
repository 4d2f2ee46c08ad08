"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - integration/: Repository tests (real PostgreSQL)
    - component/  : Component tests (mocked dependencies)
    - unit/       : Unit tests (pure functions, no I/O)
"""
import os
import sys
from typing import Any, Dict, List

import pytest

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from tests.fixtures import make_properties, make_property


# =============================================================================
# Sample Data Fixtures
# =============================================================================

@pytest.fixture
def sample_properties() -> Dict[str, Dict[str, str]]:
    """Stored property set of a user with a verified email"""
    return make_properties(
        displayname=make_property("Jane Doe", "v2-federated"),
        email=make_property("jane@example.com", "v2-federated", verified="2"),
        phone=make_property("+4971125242890", "v2-local"),
    )


# =============================================================================
# Assertion Helpers
# =============================================================================

class AssertionHelpers:
    """Custom assertion helpers for tests"""

    @staticmethod
    def assert_http_success(response, expected_status: int = 200):
        """Assert HTTP response is successful"""
        assert response.status_code == expected_status, \
            f"Expected {expected_status}, got {response.status_code}: {response.text}"

    @staticmethod
    def assert_has_fields(data: Dict, fields: List[str]):
        """Assert dict has required fields"""
        missing = [f for f in fields if f not in data]
        assert not missing, f"Missing fields: {missing}"

    @staticmethod
    def assert_every_entry_verified_field(properties: Dict[str, Dict[str, Any]]):
        """Assert every property entry carries a verification status"""
        missing = [name for name, entry in properties.items() if "verified" not in entry]
        assert not missing, f"Entries without verification status: {missing}"


@pytest.fixture
def assertions() -> AssertionHelpers:
    """Provide assertion helpers"""
    return AssertionHelpers()


# =============================================================================
# Skip Markers Based on Environment
# =============================================================================

def pytest_collection_modifyitems(config, items):
    """Skip database tests when SKIP_DB_TESTS is set"""
    skip_db = pytest.mark.skip(reason="PostgreSQL not available")

    for item in items:
        if "requires_db" in item.keywords and os.getenv("SKIP_DB_TESTS"):
            item.add_marker(skip_db)
