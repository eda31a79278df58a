"""
Pytest configuration and shared fixtures.

Catalog products are built as transient ``Product`` ORM instances for the
pure scoring/analytics tests.  Service and API tests run against a fresh
in-memory SQLite database per test, so nothing touches ``inventory.db``.

Usage:
    def test_example(make_product):
        product = make_product(price=1000, delivery_success_rate=90)

    async def test_db(session, service):
        products = await service.list_products(session)
"""

from collections.abc import AsyncIterator
from datetime import datetime, timezone

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.api.deps import get_inventory_service
from src.api.main import app
from src.models.database import Product, create_tables, get_db
from src.pipeline.inventory import InventoryService


# =============================================================================
# CATALOG FIXTURES
# =============================================================================


@pytest.fixture
def make_product():
    """
    Factory fixture for transient catalog products.

    Every field has a sensible default; override the ones a test cares
    about.
    """
    counter = {"next_id": 1}

    def _create(**overrides) -> Product:
        product_id = overrides.pop("id", counter["next_id"])
        counter["next_id"] = product_id + 1
        fields = {
            "id": product_id,
            "name": f"Product {product_id}",
            "sku": f"SKU{product_id:05d}",
            "stock": 100,
            "price": 1000.0,
            "last_restocked": datetime(2025, 3, 15, tzinfo=timezone.utc),
            "returns_count": 0,
            "delivery_success_rate": 85.0,
            "rto_risk": "medium",
            "aging": 10,
        }
        fields.update(overrides)
        return Product(**fields)

    return _create


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine with the schema created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as db_session:
        yield db_session


@pytest.fixture
def events():
    """List collecting every event broadcast by the service under test."""
    return []


@pytest.fixture
def service(events) -> InventoryService:
    """Inventory service whose broadcasts are captured in ``events``."""

    async def _record(message):
        events.append(message)

    return InventoryService(broadcast_callback=_record)


# =============================================================================
# API FIXTURES
# =============================================================================


@pytest_asyncio.fixture
async def client(session_factory, service) -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client bound to the app, backed by the in-memory database."""

    async def _override_get_db():
        async with session_factory() as db_session:
            yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_inventory_service] = lambda: service
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()
