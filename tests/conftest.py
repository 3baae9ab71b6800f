"""
Pytest fixtures: test client, DB session, change feed, admin auth, sample menu rows.
Tests run against in-memory SQLite (aiosqlite); the app's engine and get_db are swapped out.
"""
import os
from decimal import Decimal
from typing import AsyncGenerator, Callable

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("TRANSLATOR_KEY", "test-translator-key")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from jelovnik.config import get_settings
from jelovnik.db import Base, get_db
from jelovnik.main import app
from jelovnik.models.user import User, UserRole
from jelovnik.schemas.menu import MenuItemSchema
from jelovnik.services.realtime import ChangeFeed, get_change_feed


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_item() -> Callable[..., MenuItemSchema]:
    """Build a MenuItemSchema with sensible defaults; keyword arguments override fields."""

    def _make(external_id: str = "item-1", **overrides) -> MenuItemSchema:
        data = {
            "external_id": external_id,
            "collection": "CLASSIC KEBAB",
            "product_name": "Classic kebab",
            "price": Decimal("5.00"),
            "collection_order": 1,
        }
        data.update(overrides)
        return MenuItemSchema(**data)

    return _make


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database per test."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for each test."""
    import jelovnik.db
    old_engine, old_sessionmaker = jelovnik.db.engine, jelovnik.db.AsyncSessionLocal
    jelovnik.db.engine = engine
    jelovnik.db.AsyncSessionLocal = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autocommit=False, autoflush=False
    )

    async with jelovnik.db.AsyncSessionLocal() as s:
        yield s

    jelovnik.db.engine = old_engine
    jelovnik.db.AsyncSessionLocal = old_sessionmaker


@pytest.fixture
def feed() -> ChangeFeed:
    return ChangeFeed(queue_size=10)


@pytest_asyncio.fixture
async def admin_user(session: AsyncSession) -> User:
    from jelovnik.core.security import hash_password

    user = User(
        email="admin@example.com",
        hashed_password=hash_password("admin123"),
        role=UserRole.ADMIN,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest.fixture
def admin_token(admin_user: User) -> str:
    from jelovnik.core.auth import create_access_token
    return create_access_token(admin_user.id, UserRole.ADMIN)


@pytest.fixture
def auth_headers(admin_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest_asyncio.fixture
async def menu_items(session: AsyncSession, make_item) -> list[MenuItemSchema]:
    """A small menu: sized classic kebab, a combo, chicken, a drink and a dessert."""
    from jelovnik.repositories.menu_repo import MenuItemRepository

    rows = [
        make_item("classic-velika", product_name="Classic kebab - VELIKA", price=Decimal("7.50"),
                  collection_order=1, description_hr="Teletina, luk", description_en="Veal, onion"),
        make_item("classic-mala", product_name="Classic kebab - MALA", price=Decimal("5.50"),
                  collection_order=2, description_hr="Teletina, luk"),
        make_item("classic-menu", collection="CLASSIC KEBAB MENU", product_name="Classic kebab menu",
                  price=Decimal("9.50"), collection_order=3),
        make_item("chicken", collection="CHICKEN KEBAB", product_name="Chicken kebab",
                  product_name_de="Hähnchen-Kebab", price=Decimal("6.00"), collection_order=4),
        make_item("ayran", collection="NAPITCI", product_name="Ayran", price=Decimal("2.00"), collection_order=5),
        make_item("baklava", collection="SLASTICE", product_name="Baklava", price=Decimal("3.00"), collection_order=6),
    ]
    inserted = await MenuItemRepository(session).insert(rows)
    await session.commit()
    return inserted


@pytest_asyncio.fixture
async def client(session: AsyncSession, feed: ChangeFeed):
    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_change_feed] = lambda: feed
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
