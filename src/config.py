"""Application configuration settings.

All values can be overridden via environment variables or a `.env` file in the
project root.  The ``pydantic-settings`` library handles parsing, type coercion,
and validation automatically.

Example `.env` override::

    DATABASE_URL=sqlite+aiosqlite:///./staging_inventory.db
    SIMILARITY_PRICE_WINDOW=750
    LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration object for the ShelfSense inventory service.

    Attributes:
        DATABASE_URL: SQLAlchemy async database connection string.
            Defaults to a local SQLite file via the aiosqlite driver.
        SIMILARITY_PRICE_WINDOW: Catalog products whose price differs from
            the candidate's by strictly less than this amount are treated as
            similar when computing the baseline delivery success rate.
        DEFAULT_SUCCESS_RATE: Baseline rate used when no catalog product
            falls inside the similarity window.
        MIN_SUCCESS_RATE: Lower clamp bound for an assessed rate.
        MAX_SUCCESS_RATE: Upper clamp bound for an assessed rate.
        LOW_RISK_THRESHOLD: Rates strictly above this are ``low`` RTO risk.
        MEDIUM_RISK_THRESHOLD: Rates strictly above this (and not above
            ``LOW_RISK_THRESHOLD``) are ``medium``; the rest are ``high``.
        RESTOCK_RECOMMENDATION_LIMIT: Maximum number of products returned
            in the restock recommendation list.
        DEMO_PRODUCT_COUNT: Number of products produced by the demo data
            generator when no count is given.
        LOG_LEVEL: Root log level used by the CLI scripts.
        APP_TITLE: Human-readable application name surfaced in the OpenAPI
            documentation.
        APP_VERSION: Semantic version string exposed in the OpenAPI spec.
    """

    DATABASE_URL: str = "sqlite+aiosqlite:///./inventory.db"
    SIMILARITY_PRICE_WINDOW: float = 1000.0  # strict: |delta| < window
    DEFAULT_SUCCESS_RATE: float = 85.0
    MIN_SUCCESS_RATE: float = 50.0
    MAX_SUCCESS_RATE: float = 98.0
    LOW_RISK_THRESHOLD: float = 85.0  # > 85 is low
    MEDIUM_RISK_THRESHOLD: float = 75.0  # > 75 is medium
    RESTOCK_RECOMMENDATION_LIMIT: int = 5
    DEMO_PRODUCT_COUNT: int = 200
    LOG_LEVEL: str = "INFO"
    APP_TITLE: str = "ShelfSense RTO Inventory Service"
    APP_VERSION: str = "1.0.0"

    class Config:
        """Pydantic settings inner configuration."""

        env_file = ".env"


settings = Settings()
