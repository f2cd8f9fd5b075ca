"""Shared async SQLite handle with schema bootstrap.

Wraps a single `aiosqlite` connection for the whole process, applies the
static schema script on first use and tracks the schema version.
"""

from __future__ import annotations

import asyncio
import time
import logging
from pathlib import Path
from contextlib import asynccontextmanager
from typing import AsyncIterator

import aiosqlite

from ..config import get_settings

_settings = get_settings()

DATABASE_PATH = _settings.db.path
DB_TIMEOUT = _settings.db.timeout
CURRENT_SCHEMA_VERSION = 1

SCHEMA_FILE = Path(__file__).with_name("schema.sql")
logger = logging.getLogger(__name__)

_connection: aiosqlite.Connection | None = None
_connection_lock = asyncio.Lock()
_borrow_lock = asyncio.Lock()


async def _initialize_database(conn: aiosqlite.Connection) -> None:
    """Apply the schema script and bump the schema version if necessary."""
    try:
        cursor = await conn.execute("PRAGMA user_version;")
        row = await cursor.fetchone()
        current_version = row[0] if row else 0

        schema_sql = SCHEMA_FILE.read_text(encoding="utf-8")
        await conn.executescript(schema_sql)

        if current_version < CURRENT_SCHEMA_VERSION:
            await conn.execute(f"PRAGMA user_version = {CURRENT_SCHEMA_VERSION};")
            logger.info(
                "Schema applied from %s, version %d -> %d",
                SCHEMA_FILE,
                current_version,
                CURRENT_SCHEMA_VERSION,
            )
        else:
            logger.info("Database schema is up-to-date (version %d)", current_version)
        await conn.commit()
    except Exception as e:
        logger.exception("Failed to initialize database schema: %s", e)
        raise


async def _open_connection() -> aiosqlite.Connection:
    """Open the shared connection and make sure the schema exists."""
    conn = await aiosqlite.connect(DATABASE_PATH, timeout=DB_TIMEOUT)
    try:
        conn.row_factory = aiosqlite.Row
        await conn.execute("PRAGMA foreign_keys = ON;")
        await _initialize_database(conn)
    except Exception:
        await conn.close()
        raise
    logger.info("Opened database %s", DATABASE_PATH)
    return conn


async def open_database() -> aiosqlite.Connection:
    """Return the shared connection, opening it on first call."""
    global _connection

    if _connection is None:
        async with _connection_lock:
            if _connection is None:
                _connection = await _open_connection()
    return _connection


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    """
    Borrow the shared database connection.

    Usage:
        async with get_connection() as conn:
            await conn.execute(...)
            await conn.commit()
    """
    conn = await open_database()

    # statements, commit and rollback of one borrower never interleave with another
    async with _borrow_lock:
        start_time = time.monotonic()
        try:
            yield conn
        except Exception as e:
            logger.debug("Database operation error: %s", e)
            if conn.in_transaction:
                await conn.rollback()
            raise
        finally:
            elapsed = time.monotonic() - start_time
            logger.debug("Database connection held for %.3f seconds", elapsed)


async def close_connection() -> None:
    """Close the shared connection and reset state."""
    global _connection

    if _connection is None:
        return

    try:
        await _connection.close()
    except Exception as exc:  # pragma: no cover - cleanup best effort
        logger.warning("Error closing DB connection: %s", exc)
    _connection = None
    logger.info("Database connection closed")
