"""Tests for application wiring and startup."""

import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from pagewise_backend import database, main
from pagewise_backend.config import settings

pytestmark = pytest.mark.anyio


def test_app_registers_item_routes():
    paths = {route.path for route in main.app.routes}

    assert "/api/items" in paths
    assert "/api/items/{item_id}" in paths
    assert "/api/health" in paths


@pytest.mark.parametrize("create_tables,expected_calls", [(True, 1), (False, 0)])
async def test_lifespan_creates_tables_only_when_enabled(
    monkeypatch, create_tables, expected_calls
):
    calls = []

    async def fake_init_db():
        calls.append(True)

    monkeypatch.setattr(settings, "database_create_tables", create_tables)
    monkeypatch.setattr(main, "init_db", fake_init_db)

    async with main.lifespan(main.app):
        pass

    assert len(calls) == expected_calls


async def test_init_db_creates_item_table(monkeypatch):
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    monkeypatch.setattr(database, "engine", engine)

    await database.init_db()

    async with engine.connect() as conn:
        tables = await conn.run_sync(lambda c: inspect(c).get_table_names())
    await engine.dispose()

    assert "items" in tables
