"""
Integration Test Layer Configuration

Repository and service tests against a real PostgreSQL. The account schema
is created from the service migrations; tests are skipped when the
database cannot be reached.

Usage:
    POSTGRES_HOST=localhost POSTGRES_DB=account_test pytest tests/integration -v
"""
import os
import sys
from pathlib import Path
from typing import AsyncGenerator

import asyncpg
import pytest
import pytest_asyncio

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

from core.config import InfraConfig
from core.postgres_client import PostgresClientWrapper

MIGRATIONS_DIR = Path(__file__).parent.parent.parent / "microservices" / "account_service" / "migrations"


def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


@pytest.fixture(scope="session")
def infra_config() -> InfraConfig:
    return InfraConfig.from_env()


@pytest_asyncio.fixture
async def db(infra_config: InfraConfig) -> AsyncGenerator[PostgresClientWrapper, None]:
    """Connected client with the account schema migrated"""
    try:
        conn = await asyncpg.connect(dsn=infra_config.postgres_dsn, timeout=5)
    except (OSError, asyncpg.PostgresError) as e:
        pytest.skip(f"PostgreSQL not available: {e}")

    try:
        for migration in sorted(MIGRATIONS_DIR.glob("*.sql")):
            await conn.execute(migration.read_text())
    finally:
        await conn.close()

    client = PostgresClientWrapper("account_service_test", config=infra_config)
    yield client
    await client.close()
