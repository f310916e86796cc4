"""
Key-value store

Every record the backend keeps is a JSON document under a namespaced key:

    user:{user_id}
    task:{user_id}:{task_id}
    journal:{user_id}:{entry_id}
    activity:{user_id}:{activity_id}
    feedback:{feedback_id}

Two backends share the same async interface: PostgresKVStore (a single
kv_store table with a JSONB value column) and InMemoryKVStore.
"""

import copy
import logging
from typing import Any, Optional

import psycopg
from psycopg import sql
from psycopg.types.json import Jsonb

from nimathi.db.connection import Database
from nimathi.exceptions import wrap_external_exception

logger = logging.getLogger(__name__)


class KVStore:
    """Async key-value store interface"""

    async def get(self, key: str) -> Optional[dict[str, Any]]:
        raise NotImplementedError

    async def set(self, key: str, value: dict[str, Any]) -> None:
        raise NotImplementedError

    async def delete(self, key: str) -> None:
        raise NotImplementedError

    async def get_by_prefix(self, prefix: str) -> list[dict[str, Any]]:
        """Values of every key starting with prefix, ordered by key"""
        raise NotImplementedError

    async def ping(self) -> bool:
        """True when the backend is reachable"""
        raise NotImplementedError


class InMemoryKVStore(KVStore):
    """Process-local store. Values are deep-copied in and out."""

    def __init__(self):
        self._data: dict[str, dict[str, Any]] = {}
        logger.warning("InMemoryKVStore initialized - data is NOT persisted across restarts")

    async def get(self, key: str) -> Optional[dict[str, Any]]:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    async def set(self, key: str, value: dict[str, Any]) -> None:
        self._data[key] = copy.deepcopy(value)
        logger.debug(f"Stored {key} in memory")

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def get_by_prefix(self, prefix: str) -> list[dict[str, Any]]:
        return [
            copy.deepcopy(self._data[key])
            for key in sorted(self._data)
            if key.startswith(prefix)
        ]

    async def ping(self) -> bool:
        return True


class PostgresKVStore(KVStore):
    """kv_store table backed by the async psycopg pool"""

    def __init__(self, db: Database, table_name: str = "kv_store"):
        self.db = db
        self.table = sql.Identifier(table_name)

    async def ensure_schema(self) -> None:
        """Create the kv table if it does not exist"""
        query = sql.SQL(
            """
            CREATE TABLE IF NOT EXISTS {table} (
                key TEXT PRIMARY KEY,
                value JSONB NOT NULL
            )
            """
        ).format(table=self.table)
        await self._execute(query, (), operation="kv_ensure_schema")
        logger.info("kv_store schema ensured")

    async def get(self, key: str) -> Optional[dict[str, Any]]:
        query = sql.SQL("SELECT value FROM {table} WHERE key = %s").format(table=self.table)
        rows = await self._execute(query, (key,), operation="kv_get", key=key, fetch=True)
        return rows[0]["value"] if rows else None

    async def set(self, key: str, value: dict[str, Any]) -> None:
        query = sql.SQL(
            """
            INSERT INTO {table} (key, value)
            VALUES (%s, %s)
            ON CONFLICT (key) DO UPDATE SET value = EXCLUDED.value
            """
        ).format(table=self.table)
        await self._execute(query, (key, Jsonb(value)), operation="kv_set", key=key)

    async def delete(self, key: str) -> None:
        query = sql.SQL("DELETE FROM {table} WHERE key = %s").format(table=self.table)
        await self._execute(query, (key,), operation="kv_delete", key=key)

    async def get_by_prefix(self, prefix: str) -> list[dict[str, Any]]:
        query = sql.SQL(
            "SELECT value FROM {table} WHERE key LIKE %s ORDER BY key"
        ).format(table=self.table)
        pattern = _escape_like(prefix) + "%"
        rows = await self._execute(query, (pattern,), operation="kv_get_by_prefix", key=prefix, fetch=True)
        return [row["value"] for row in rows]

    async def ping(self) -> bool:
        try:
            await self._execute(sql.SQL("SELECT 1"), (), operation="kv_ping", fetch=True)
            return True
        except Exception as e:
            logger.error(f"KV store health check failed: {e}")
            return False

    async def _execute(
        self,
        query: sql.Composable,
        params: tuple,
        operation: str,
        key: Optional[str] = None,
        fetch: bool = False
    ) -> list[dict[str, Any]]:
        try:
            async with self.db.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(query, params)
                    rows = await cur.fetchall() if fetch else []
                    await conn.commit()
                    return rows
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation=operation, context={"key": key})


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so prefixes match literally"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
