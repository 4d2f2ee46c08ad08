"""
Unit Test Layer Configuration

Structure:
    tests/unit/
    └── account_service/   Scope rules, parsers, models, default filling

Usage:
    pytest tests/unit -v                 # All unit tests
    pytest tests/unit -m unit -v         # By marker
"""
import os
import sys

import pytest

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from core.config import AccountConfig


def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


@pytest.fixture
def account_config() -> AccountConfig:
    """Configuration with a German default phone region"""
    return AccountConfig(default_phone_region="DE")
