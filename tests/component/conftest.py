"""
Component Test Layer Configuration

Structure:
    tests/component/
    └── account_service/   AccountService with in-memory dependencies

Usage:
    pytest tests/component -v
    pytest tests/component/account_service -v
"""
import os
import sys

import pytest

# Set testing environment BEFORE any imports
os.environ["ENV"] = "testing"
os.environ["ENVIRONMENT"] = "testing"
os.environ["NATS_ENABLED"] = "false"

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from core.config import AccountConfig
from tests.component.account_service.mocks import (
    MockAccountRepository,
    MockEventBus,
    MockVerifier,
)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "component: marks tests as component tests"
    )


# =============================================================================
# Dependency Mocks
# =============================================================================

@pytest.fixture
def mock_repo() -> MockAccountRepository:
    """Empty in-memory account repository"""
    return MockAccountRepository()


@pytest.fixture
def mock_event_bus() -> MockEventBus:
    """Mock NATS event bus"""
    return MockEventBus()


@pytest.fixture
def mock_verifier() -> MockVerifier:
    """Verifier that marks changed emails as in progress with a fixed token"""
    return MockVerifier()


@pytest.fixture
def account_config() -> AccountConfig:
    """Configuration with a German default phone region"""
    return AccountConfig(default_phone_region="DE", nats_enabled=False)


@pytest.fixture
def account_service(mock_repo, mock_event_bus, mock_verifier, account_config):
    """AccountService wired to in-memory dependencies"""
    from microservices.account_service.account_service import AccountService

    return AccountService(
        repository=mock_repo,
        event_bus=mock_event_bus,
        verifier=mock_verifier,
        config=account_config,
    )
