"""SQLAlchemy 2.0 async database layer.

This module provides:

- ``Base``          — declarative base class shared by all ORM models.
- ``Product``       — ORM model representing one catalog entry.
- ``engine``        — shared ``AsyncEngine`` instance.
- ``async_session`` — ``async_sessionmaker`` factory bound to ``engine``.
- ``get_db``        — async generator for use with FastAPI ``Depends``.
- ``create_tables`` — coroutine that issues ``CREATE TABLE IF NOT EXISTS`` for all models.

SQLite is configured to run in WAL (Write-Ahead Logging) mode so that the
analytics endpoints are never blocked by an ongoing catalog seed.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime
from typing import Any

from sqlalchemy import (
    DateTime,
    Float,
    Index,
    Integer,
    String,
    event,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.config import settings

# ---------------------------------------------------------------------------
# Engine & session factory
# ---------------------------------------------------------------------------


def _set_sqlite_wal(dbapi_connection: Any, connection_record: Any) -> None:  # noqa: ANN401
    """Enable WAL mode immediately after each new SQLite connection is created.

    Args:
        dbapi_connection: The raw DBAPI connection handed to the listener by
            SQLAlchemy's ``connect`` event.
        connection_record: Internal SQLAlchemy connection pool record
            (not used here but required by the event signature).
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL;")
    cursor.close()


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
)

# Register WAL mode only when the backend is SQLite.
if "sqlite" in settings.DATABASE_URL:
    event.listen(engine.sync_engine, "connect", _set_sqlite_wal)


async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False,
)

# ---------------------------------------------------------------------------
# Declarative base
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""


# ---------------------------------------------------------------------------
# ORM Models
# ---------------------------------------------------------------------------


class Product(Base):
    """ORM model for the ``products`` table.

    Each row is one catalog entry.  ``delivery_success_rate`` and
    ``rto_risk`` are written from a ``RiskAssessment`` when the product is
    created or re-priced; the scan workflow only touches ``stock``,
    ``last_restocked`` and ``aging``.

    Indexed columns:
        - ``sku``   — exact-match lookups from the barcode scanner.
        - ``price`` — similarity window scans by the risk scorer.
    """

    __tablename__ = "products"

    __table_args__ = (
        Index("ix_products_sku", "sku"),
        Index("ix_products_price", "price"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Positive integer id assigned on insert; never reused.",
    )
    name: Mapped[str] = mapped_column(
        String,
        nullable=False,
        doc="Display name of the product.",
    )
    sku: Mapped[str] = mapped_column(
        String,
        nullable=False,
        doc="Stock-keeping unit.  Expected unique, not enforced.",
    )
    stock: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Units currently on hand.",
    )
    price: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        doc="Unit price in the catalog's currency.",
    )
    last_restocked: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        doc="Timestamp of the most recent stock event.",
    )
    returns_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Cumulative number of returns observed.",
    )
    delivery_success_rate: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        doc="Percentage of deliveries that were not returned, 0-100.",
    )
    rto_risk: Mapped[str] = mapped_column(
        String,
        nullable=False,
        doc="RTO risk tier. One of: low, medium, high.",
    )
    aging: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Days since the last restock (or creation).",
    )


# ---------------------------------------------------------------------------
# Database lifecycle helpers
# ---------------------------------------------------------------------------


async def create_tables(bind: AsyncEngine | None = None) -> None:
    """Create all ORM-mapped tables if they do not already exist.

    Safe to call on every application startup because it is a no-op when
    tables already exist.

    Args:
        bind: Engine to create the tables on.  Defaults to the shared
            ``engine``.
    """
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Async generator that yields a database session for each request.

    Designed for use with FastAPI's ``Depends`` dependency injection system.

    Yields:
        AsyncSession: A live SQLAlchemy async session bound to ``engine``.
    """
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
