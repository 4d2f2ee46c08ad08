"""
PostgreSQL Client Wrapper

Centralized PostgreSQL access built on an asyncpg connection pool.
Provides configuration from InfraConfig and a consistent access pattern
for repositories.

Usage:
    from core.postgres_client import PostgresClientWrapper

    # Create client (the pool opens lazily)
    db = PostgresClientWrapper("account_service")

    # Execute queries
    row = await db.query_row("SELECT data FROM account.accounts WHERE user_id = $1", [user_id])

    # Multiple statements in one transaction
    async with db.transaction() as conn:
        await conn.execute("DELETE FROM account.accounts_data WHERE user_id = $1", user_id)
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

import asyncpg

from core.config import InfraConfig

logger = logging.getLogger(__name__)


async def _init_connection(conn: asyncpg.Connection) -> None:
    """Decode JSON/JSONB columns into Python objects"""
    for type_name in ("json", "jsonb"):
        await conn.set_type_codec(
            type_name,
            encoder=json.dumps,
            decoder=json.loads,
            schema="pg_catalog",
        )


class PostgresClientWrapper:
    """
    PostgreSQL client wrapper around an asyncpg pool.

    Provides:
    - Lazy pool creation from InfraConfig
    - JSON/JSONB codecs on every connection
    - Transaction context manager for multi-statement writes
    """

    def __init__(
        self,
        service_name: str,
        config: Optional[InfraConfig] = None,
        dsn: Optional[str] = None,
    ):
        """
        Initialize PostgreSQL client wrapper.

        Args:
            service_name: Name of the service using this client
            config: Infrastructure configuration (defaults to environment)
            dsn: Explicit connection string overriding the config
        """
        self.service_name = service_name
        self.config = config or InfraConfig.from_env()
        self.dsn = dsn or self.config.postgres_dsn
        self._pool: Optional[asyncpg.Pool] = None

        logger.info(
            f"PostgreSQL client initialized for {service_name}: "
            f"{self.config.postgres_host}:{self.config.postgres_port}/{self.config.postgres_db}"
        )

    async def connect(self) -> asyncpg.Pool:
        """Create the connection pool if it does not exist yet"""
        if self._pool is None:
            self._pool = await asyncpg.create_pool(
                dsn=self.dsn,
                min_size=self.config.postgres_min_pool,
                max_size=self.config.postgres_max_pool,
                init=_init_connection,
            )
        return self._pool

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[asyncpg.Connection]:
        """Acquire a connection and run the block inside one transaction"""
        pool = await self.connect()
        async with pool.acquire() as conn:
            async with conn.transaction():
                yield conn

    async def health_check(self) -> Dict[str, Any]:
        """Check database health"""
        try:
            value = await self.fetch_value("SELECT 1")
            return {"healthy": value == 1, "database": self.config.postgres_db}
        except (OSError, asyncpg.PostgresError) as e:
            logger.error(f"PostgreSQL health check failed: {e}")
            return {"healthy": False, "database": self.config.postgres_db, "error": str(e)}

    async def query(self, sql: str, params: Optional[List[Any]] = None) -> List[Dict[str, Any]]:
        """Execute query and return results"""
        pool = await self.connect()
        rows = await pool.fetch(sql, *(params or []))
        return [dict(row) for row in rows]

    async def query_row(self, sql: str, params: Optional[List[Any]] = None) -> Optional[Dict[str, Any]]:
        """Execute query and return single row"""
        pool = await self.connect()
        row = await pool.fetchrow(sql, *(params or []))
        return dict(row) if row else None

    async def fetch_value(self, sql: str, params: Optional[List[Any]] = None) -> Any:
        """Execute query and return the first column of the first row"""
        pool = await self.connect()
        return await pool.fetchval(sql, *(params or []))

    async def close(self):
        """Close the pool"""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
