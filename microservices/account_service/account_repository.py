"""
Account Repository - Async Version

Data access layer for account property records.
Uses the asyncpg pool wrapper for non-blocking database access.

One row per user in account.accounts holds the whole property set as JSONB;
account.accounts_data mirrors each (name, value) pair for lookups.
"""

from typing import Optional, List, Dict
from datetime import datetime, timezone
import logging

import asyncpg

from core.config import InfraConfig
from core.postgres_client import PostgresClientWrapper
from .models import Properties

logger = logging.getLogger(__name__)


class DuplicateEntryException(Exception):
    """Duplicate entry exception"""
    pass


class AccountNotFoundException(Exception):
    """No stored account record for the user"""
    pass


class AccountRepository:
    """
    Account-specific repository layer

    Implements AccountRepositoryProtocol on top of PostgreSQL.
    Insert and update of one user's record run inside one transaction.
    """

    def __init__(
        self,
        config: Optional[InfraConfig] = None,
        db: Optional[PostgresClientWrapper] = None,
    ):
        self.db = db or PostgresClientWrapper("account_service", config=config)
        self.schema = "account"
        self.accounts_table = "accounts"
        self.data_table = "accounts_data"

    async def get_properties(self, user_id: str) -> Optional[Properties]:
        """Get the stored property set of a user"""
        row = await self.db.query_row(
            f"SELECT data FROM {self.schema}.{self.accounts_table} WHERE user_id = $1",
            params=[user_id]
        )
        if row is None:
            return None
        return row["data"] or {}

    async def insert_properties(self, user_id: str, properties: Properties) -> None:
        """Insert a new account record"""
        now = datetime.now(tz=timezone.utc)
        try:
            async with self.db.transaction() as conn:
                await conn.execute(
                    f"""INSERT INTO {self.schema}.{self.accounts_table}
                        (user_id, data, updated_at)
                        VALUES ($1, $2, $3)""",
                    user_id, properties, now
                )
                await self._write_lookup_rows(conn, user_id, properties)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateEntryException(f"Account record already exists: {user_id}") from e

        logger.info(f"Account record created: {user_id}")

    async def update_properties(self, user_id: str, properties: Properties) -> None:
        """Replace the stored account record"""
        now = datetime.now(tz=timezone.utc)
        async with self.db.transaction() as conn:
            status = await conn.execute(
                f"UPDATE {self.schema}.{self.accounts_table} SET data = $1, updated_at = $2 WHERE user_id = $3",
                properties, now, user_id
            )
            if not status.endswith(" 1"):
                raise AccountNotFoundException(f"No account record for user {user_id}")
            await conn.execute(
                f"DELETE FROM {self.schema}.{self.data_table} WHERE user_id = $1",
                user_id
            )
            await self._write_lookup_rows(conn, user_id, properties)

        logger.info(f"Account record updated: {user_id}")

    async def delete_properties(self, user_id: str) -> bool:
        """Delete the account record and its lookup rows"""
        async with self.db.transaction() as conn:
            await conn.execute(
                f"DELETE FROM {self.schema}.{self.data_table} WHERE user_id = $1",
                user_id
            )
            status = await conn.execute(
                f"DELETE FROM {self.schema}.{self.accounts_table} WHERE user_id = $1",
                user_id
            )

        deleted = status.endswith(" 1")
        if deleted:
            logger.info(f"Account record deleted: {user_id}")
        return deleted

    async def search_users(self, property_name: str, values: List[str]) -> Dict[str, str]:
        """Find users by exact property values"""
        if not values:
            return {}

        rows = await self.db.query(
            f"""SELECT user_id, value FROM {self.schema}.{self.data_table}
                WHERE name = $1 AND value = ANY($2::text[])""",
            params=[property_name, list(values)]
        )

        matches = {}
        for row in rows:
            matches[row["value"]] = row["user_id"]
        return matches

    async def _write_lookup_rows(self, conn: asyncpg.Connection, user_id: str, properties: Properties) -> None:
        rows = [
            (user_id, name, data.get("value", ""))
            for name, data in properties.items()
            if data.get("value")
        ]
        if rows:
            await conn.executemany(
                f"INSERT INTO {self.schema}.{self.data_table} (user_id, name, value) VALUES ($1, $2, $3)",
                rows
            )
