"""Unit tests for the key-value store backends"""
import pytest
import psycopg
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

from nimathi.db.kv_store import InMemoryKVStore, PostgresKVStore
from nimathi.exceptions import ConnectionError, QueryError


# ============================================================================
# InMemoryKVStore
# ============================================================================

@pytest.mark.asyncio
async def test_memory_get_set_delete(memory_store):
    assert await memory_store.get("user:1") is None

    await memory_store.set("user:1", {"id": "1", "reward_points": 10})
    assert await memory_store.get("user:1") == {"id": "1", "reward_points": 10}

    await memory_store.delete("user:1")
    assert await memory_store.get("user:1") is None


@pytest.mark.asyncio
async def test_memory_values_are_isolated_copies(memory_store):
    value = {"tags": ["calm"]}
    await memory_store.set("journal:1:a", value)

    value["tags"].append("mutated")
    fetched = await memory_store.get("journal:1:a")
    fetched["tags"].append("also mutated")

    assert await memory_store.get("journal:1:a") == {"tags": ["calm"]}


@pytest.mark.asyncio
async def test_memory_prefix_scan_is_scoped_and_ordered(memory_store):
    await memory_store.set("task:u1:u1_1700000000002", {"n": 2})
    await memory_store.set("task:u1:u1_1700000000001", {"n": 1})
    await memory_store.set("task:u2:u2_1700000000000", {"n": 99})
    await memory_store.set("journal:u1:u1_1700000000000", {"n": -1})

    assert await memory_store.get_by_prefix("task:u1:") == [{"n": 1}, {"n": 2}]


@pytest.mark.asyncio
async def test_memory_ping(memory_store):
    assert await memory_store.ping() is True


# ============================================================================
# PostgresKVStore (mocked connection)
# ============================================================================

def _mock_db(cursor):
    conn = MagicMock()
    conn.cursor.return_value.__aenter__.return_value = cursor
    conn.commit = AsyncMock()

    db = MagicMock()

    @asynccontextmanager
    async def connection():
        yield conn

    db.connection = connection
    return db, conn


@pytest.fixture
def mock_cursor():
    cursor = AsyncMock()
    cursor.execute = AsyncMock()
    cursor.fetchall = AsyncMock(return_value=[])
    return cursor


@pytest.mark.asyncio
async def test_postgres_get_returns_value(mock_cursor):
    mock_cursor.fetchall.return_value = [{"value": {"id": "u1", "reward_points": 5}}]
    db, _ = _mock_db(mock_cursor)
    store = PostgresKVStore(db)

    assert await store.get("user:u1") == {"id": "u1", "reward_points": 5}
    args = mock_cursor.execute.call_args[0]
    assert args[1] == ("user:u1",)


@pytest.mark.asyncio
async def test_postgres_get_missing_returns_none(mock_cursor):
    db, _ = _mock_db(mock_cursor)
    assert await PostgresKVStore(db).get("user:none") is None


@pytest.mark.asyncio
async def test_postgres_set_commits(mock_cursor):
    db, conn = _mock_db(mock_cursor)

    await PostgresKVStore(db).set("user:u1", {"id": "u1"})

    mock_cursor.execute.assert_awaited_once()
    conn.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_postgres_prefix_escapes_wildcards(mock_cursor):
    mock_cursor.fetchall.return_value = [{"value": {"n": 1}}]
    db, _ = _mock_db(mock_cursor)

    values = await PostgresKVStore(db).get_by_prefix("task:user_1:")

    assert values == [{"n": 1}]
    assert mock_cursor.execute.call_args[0][1] == ("task:user\\_1:%",)


@pytest.mark.asyncio
async def test_postgres_operational_error_wrapped(mock_cursor):
    mock_cursor.execute.side_effect = psycopg.OperationalError("server closed the connection")
    db, _ = _mock_db(mock_cursor)

    with pytest.raises(ConnectionError):
        await PostgresKVStore(db).get("user:u1")


@pytest.mark.asyncio
async def test_postgres_query_error_wrapped(mock_cursor):
    mock_cursor.execute.side_effect = psycopg.errors.UndefinedTable("relation does not exist")
    db, _ = _mock_db(mock_cursor)

    with pytest.raises(QueryError) as exc_info:
        await PostgresKVStore(db).set("user:u1", {"id": "u1"})
    assert exc_info.value.key == "user:u1"


@pytest.mark.asyncio
async def test_postgres_ping_reports_failure(mock_cursor):
    mock_cursor.execute.side_effect = psycopg.OperationalError("down")
    db, _ = _mock_db(mock_cursor)

    assert await PostgresKVStore(db).ping() is False
