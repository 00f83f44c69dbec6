"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`). Outside the app lifespan (scripts,
tests) `connection()` falls back to one short-lived connection per call.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

import asyncpg

from . import config

logger = logging.getLogger(__name__)

_pool: asyncpg.Pool | None = None

# Errors raised by the driver while a connection is being opened/acquired.
_CONNECT_ERRORS = (
    OSError,
    asyncio.TimeoutError,
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    ValueError,
)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS resources (
    id INT GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
    name VARCHAR
)
"""


class DatabaseConnectionError(RuntimeError):
    """
    The database could not be reached (bad host, auth failure, malformed DSN).
    """


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    """
    `DATABASE_URL` if set, else built from DB_ENDPOINT/DB_USERNAME/DB_NAME/DB_PASSWORD.
    """
    url = os.environ.get("DATABASE_URL", "").strip()
    if url:
        return _sanitize_database_url(url)

    endpoint = config.require_env("DB_ENDPOINT")
    username = config.require_env("DB_USERNAME")
    name = config.require_env("DB_NAME")
    password = config.require_env("DB_PASSWORD")
    return "postgres://{}:{}@{}/{}".format(
        quote(username, safe=""),
        quote(password, safe=""),
        endpoint,
        name,
    )


async def connect(dsn: str) -> asyncpg.Connection:
    """
    Open a single raw connection.
    """
    try:
        return await asyncpg.connect(dsn=dsn, command_timeout=config.command_timeout())
    except _CONNECT_ERRORS as exc:
        raise DatabaseConnectionError(f"unable to connect to database: {exc}") from exc


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    try:
        _pool = await asyncpg.create_pool(
            dsn=database_url(),
            min_size=config.pool_min_size(),
            max_size=config.pool_max_size(),
            command_timeout=config.command_timeout(),
        )
    except _CONNECT_ERRORS as exc:
        raise DatabaseConnectionError(f"unable to connect to database: {exc}") from exc
    logger.info(
        "db_pool_ready min_size=%s max_size=%s",
        config.pool_min_size(),
        config.pool_max_size(),
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None
    logger.info("db_pool_closed")


@asynccontextmanager
async def connection() -> AsyncIterator[asyncpg.Connection]:
    """
    Hold one connection for the duration of the block.

    Pooled connections are released and standalone ones closed on every exit
    path, including exceptions raised inside the block.
    """
    if _pool is None:
        conn = await connect(database_url())
        try:
            yield conn
        finally:
            await conn.close()
        return

    current = _pool
    try:
        conn = await current.acquire()
    except _CONNECT_ERRORS as exc:
        raise DatabaseConnectionError(f"unable to acquire database connection: {exc}") from exc
    try:
        yield conn
    finally:
        await current.release(conn)


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    async with connection() as conn:
        row = await conn.fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts (empty when no rows).
    """
    async with connection() as conn:
        rows = await conn.fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def fetch_value(sql: str, *args: Any) -> Any:
    async with connection() as conn:
        return await conn.fetchval(sql, *args)


async def execute(sql: str, *args: Any) -> str:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL) and return its command status,
    e.g. "UPDATE 1".
    """
    async with connection() as conn:
        return await conn.execute(sql, *args)


async def ensure_schema() -> None:
    await execute(SCHEMA_SQL)
    logger.info("db_schema_ready table=resources")
