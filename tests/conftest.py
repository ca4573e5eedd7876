"""Test configuration shared by all test modules."""

import os
import pathlib
from decimal import Decimal

# Settings are loaded on import, so point CONFIG at the test file first.
os.environ["CONFIG"] = str(pathlib.Path(__file__).parent / "config" / "test.yaml")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import func, select  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from pagewise_backend.database import Base, get_db  # noqa: E402
from pagewise_backend.main import app  # noqa: E402
from pagewise_backend.modules.items.models import Item  # noqa: E402


def _memory_engine():
    return create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def session_factory():
    engine = _memory_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    await engine.dispose()


@pytest.fixture
async def broken_session_factory():
    """Sessions against a database with no tables, so every query fails."""
    engine = _memory_engine()
    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    await engine.dispose()


@pytest.fixture
async def session(session_factory) -> AsyncSession:
    async with session_factory() as session:
        yield session


@pytest.fixture
def seed_items(session_factory):
    """Insert ``count`` items in one category; ids follow insertion order."""

    async def _seed(count: int, category: str = "books", **overrides) -> list[Item]:
        prefix = category[:3].upper()
        async with session_factory() as session:
            existing = await session.scalar(
                select(func.count(Item.id)).where(Item.category == category)
            )
            items = [
                Item(
                    sku=f"{prefix}-{existing + i:04d}",
                    name=f"{category.title()} {existing + i}",
                    category=category,
                    price=Decimal("9.99"),
                    **overrides,
                )
                for i in range(1, count + 1)
            ]
            session.add_all(items)
            await session.commit()
        return items

    return _seed


def _client_for(factory):
    async def _get_db():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


@pytest.fixture
async def client(session_factory):
    async with _client_for(session_factory) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def broken_client(broken_session_factory):
    async with _client_for(broken_session_factory) as ac:
        yield ac
    app.dependency_overrides.clear()
