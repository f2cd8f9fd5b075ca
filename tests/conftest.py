"""
This file contains shared fixtures for the test suite.
"""

import asyncio
import os

import pytest
import pytest_asyncio

# Set env vars before any application modules are imported
os.environ.setdefault("TEST_MODE", "1")
os.environ.setdefault("PYTHONIOENCODING", "utf-8")


@pytest_asyncio.fixture
async def temp_db(tmp_path, monkeypatch):
    """Point the shared connection at a fresh database file and close it afterwards."""
    import byteframes.db.connection as db_conn

    db_path = str(tmp_path / "byteframes_test.db")
    monkeypatch.setattr(db_conn, "DATABASE_PATH", db_path)
    monkeypatch.setattr(db_conn, "_connection", None)
    monkeypatch.setattr(db_conn, "_connection_lock", asyncio.Lock())
    monkeypatch.setattr(db_conn, "_borrow_lock", asyncio.Lock())

    yield db_path

    await db_conn.close_connection()


@pytest_asyncio.fixture
async def initialized_db(temp_db):
    """A database with the schema applied and no rows."""
    from byteframes.db.connection import open_database

    await open_database()
    return temp_db


@pytest_asyncio.fixture
async def app(temp_db):
    """A started App against an empty database (the default scene is seeded)."""
    from byteframes.app import App

    instance = App()
    await instance.startup()
    yield instance
    await instance.shutdown()


@pytest.fixture
def clock(monkeypatch):
    """Controllable unix-seconds clock used by the repositories."""
    import byteframes.db.repositories as repos

    state = {"now": 1_700_000_000}

    def fake_now() -> int:
        return state["now"]

    monkeypatch.setattr(repos, "now", fake_now)
    return state
