"""Catalog management for the ShelfSense inventory service.

This module provides the ``InventoryService`` class that owns the full
lifecycle of a catalog product: creation (with RTO assessment), edits,
removal, barcode-scan restocking, and bulk seeding of demo data.  Every
mutation can optionally be pushed to the real-time dashboard via a
broadcast callback.

Supported seeding sources:
    - JSON files on disk (``seed_from_json``)
    - In-memory product lists (``seed_products``)
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Coroutine
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import ProductNotFoundError
from src.models.database import Product
from src.pipeline.risk_scorer import (
    CandidateInput,
    RiskAssessment,
    RiskScorer,
    classify_rate,
)
from src.pipeline.rules_engine import OrderContext
from src.pipeline.scanner import ScanResult, match_sku, normalize_code
from src.schemas.schemas import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

# Type alias for the optional WebSocket broadcast callback.
BroadcastCallback = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]


def product_payload(product: Product) -> dict[str, Any]:
    """Serialise a product into a JSON-friendly dict for broadcasts."""
    return {
        "id": product.id,
        "name": product.name,
        "sku": product.sku,
        "stock": product.stock,
        "price": product.price,
        "last_restocked": product.last_restocked.isoformat(),
        "returns_count": product.returns_count,
        "delivery_success_rate": product.delivery_success_rate,
        "rto_risk": product.rto_risk,
        "aging": product.aging,
    }


class InventoryService:
    """Catalog store operations backed by an async SQLAlchemy session.

    The risk scorer is consulted whenever a product is created or
    re-priced; its assessment is written onto the product row.  Scans and
    deletions never invoke the scorer.

    Args:
        broadcast_callback: Optional async callable invoked with an event
            dict after every catalog mutation.  Designed for WebSocket push
            to the dashboard.
        scorer: Risk scorer to use.  A default ``RiskScorer`` is built when
            omitted.
    """

    def __init__(
        self,
        broadcast_callback: BroadcastCallback | None = None,
        scorer: RiskScorer | None = None,
    ) -> None:
        self.broadcast_callback = broadcast_callback
        self.scorer = scorer or RiskScorer()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_products(self, session: AsyncSession) -> list[Product]:
        """Return every catalog product ordered by id."""
        result = await session.execute(select(Product).order_by(Product.id))
        return list(result.scalars().all())

    async def get_product(self, session: AsyncSession, product_id: int) -> Product:
        """Fetch one product.

        Raises:
            ProductNotFoundError: If no product has this id.
        """
        product = await session.get(Product, product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    async def assess(
        self,
        session: AsyncSession,
        candidate: CandidateInput,
        order_params: OrderContext | None = None,
        exclude_id: int | None = None,
    ) -> RiskAssessment:
        """Assess a candidate against the stored catalog without persisting.

        Args:
            session: Active async database session.
            candidate: Attributes of the product being assessed.
            order_params: Optional order signals.
            exclude_id: Product id to leave out of the catalog, used when a
                product is re-assessed against its peers.

        Returns:
            The scorer's ``RiskAssessment``.
        """
        catalog = await self.list_products(session)
        if exclude_id is not None:
            catalog = [p for p in catalog if p.id != exclude_id]
        return self.scorer.assess(catalog, candidate, order_params)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_product(
        self,
        session: AsyncSession,
        data: ProductCreate,
        order_params: OrderContext | None = None,
    ) -> tuple[Product, RiskAssessment]:
        """Assess and persist a new catalog product.

        Steps:
            1. Assess the candidate price against the current catalog.
            2. Persist the product with the assessed rate and tier, zero
               returns, zero aging and a fresh restock timestamp.
            3. Broadcast ``product_created``.

        Args:
            session: Active async database session.
            data: Validated product form data.
            order_params: Optional order signals for the assessment.

        Returns:
            The persisted product and the assessment written onto it.
        """
        assessment = await self.assess(
            session, CandidateInput(price=data.price), order_params,
        )

        product = Product(
            name=data.name,
            sku=data.sku,
            stock=data.stock,
            price=data.price,
            last_restocked=datetime.now(timezone.utc),
            returns_count=0,
            delivery_success_rate=assessment.delivery_success_rate,
            rto_risk=assessment.rto_risk,
            aging=0,
        )
        session.add(product)
        await session.commit()
        await session.refresh(product)

        logger.info(
            "Created product %d (%s) -- rate %.2f, risk %s",
            product.id,
            product.sku,
            product.delivery_success_rate,
            product.rto_risk,
        )
        await self._broadcast("product_created", product)
        return product, assessment

    async def update_product(
        self,
        session: AsyncSession,
        product_id: int,
        data: ProductUpdate,
        order_params: OrderContext | None = None,
    ) -> tuple[Product, RiskAssessment | None]:
        """Apply edits to an existing product.

        The product is re-assessed, against the catalog without itself,
        when its price changes or order signals are supplied.  ``aging``
        and ``returns_count`` are carried over untouched.

        Returns:
            The updated product and the new assessment, or ``None`` when no
            re-assessment was needed.

        Raises:
            ProductNotFoundError: If no product has this id.
        """
        product = await self.get_product(session, product_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        price_changed = "price" in changes and changes["price"] != product.price

        for attr, value in changes.items():
            setattr(product, attr, value)

        assessment: RiskAssessment | None = None
        if price_changed or order_params is not None:
            assessment = await self.assess(
                session,
                CandidateInput(price=product.price),
                order_params,
                exclude_id=product.id,
            )
            product.delivery_success_rate = assessment.delivery_success_rate
            product.rto_risk = assessment.rto_risk

        await session.commit()
        await session.refresh(product)

        logger.info(
            "Updated product %d fields=%s reassessed=%s",
            product.id,
            sorted(changes),
            assessment is not None,
        )
        await self._broadcast("product_updated", product)
        return product, assessment

    async def delete_product(self, session: AsyncSession, product_id: int) -> None:
        """Remove a product from the catalog.

        Raises:
            ProductNotFoundError: If no product has this id.
        """
        product = await self.get_product(session, product_id)
        payload = product_payload(product)
        await session.delete(product)
        await session.commit()

        logger.info("Deleted product %d (%s)", product_id, payload["sku"])
        if self.broadcast_callback is not None:
            await self.broadcast_callback({"type": "product_deleted", "product": payload})

    async def scan(
        self,
        session: AsyncSession,
        code: str,
        quantity: int = 1,
    ) -> ScanResult:
        """Match a scanned code to a product and book the units in.

        A match increments ``stock`` by ``quantity`` and counts as a restock
        event, resetting ``aging``.  An unknown code is reported as an
        unmatched result rather than an error.

        Args:
            session: Active async database session.
            code: Scanned barcode value.
            quantity: Units received.

        Returns:
            A ``ScanResult`` carrying the updated product on a match.
        """
        stmt = (
            select(Product)
            .where(Product.sku == normalize_code(code))
            .order_by(Product.id)
        )
        result = await session.execute(stmt)
        scan = match_sku(result.scalars().all(), code)
        if not scan.matched:
            return scan

        product: Product = scan.product
        product.stock += quantity
        product.last_restocked = datetime.now(timezone.utc)
        product.aging = 0
        await session.commit()
        await session.refresh(product)

        logger.info(
            "Scan booked %d unit(s) into %s, stock now %d",
            quantity,
            product.sku,
            product.stock,
        )
        await self._broadcast("stock_scanned", product)
        return scan

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    async def seed_products(
        self,
        session: AsyncSession,
        records: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """Bulk-load product records into the catalog.

        Records whose ``id`` already exists are skipped so that seeding is
        safe to repeat.  ``rto_risk`` is always derived from the rate;
        any tier a record carries is ignored.

        Args:
            session: Active async database session.
            records: Product dicts (field names matching ``Product``).

        Returns:
            A summary dictionary with keys ``total``, ``inserted``,
            ``skipped`` and ``processing_time_seconds``.
        """
        start_time = time.perf_counter()
        logger.info("Seeding %d product record(s)", len(records))

        existing_ids = set(
            (await session.execute(select(Product.id))).scalars().all()
        )
        inserted = 0
        skipped = 0

        for raw in records:
            record = dict(raw)
            product_id = record.get("id")
            if product_id is not None and product_id in existing_ids:
                logger.warning("Duplicate product id %s -- skipping", product_id)
                skipped += 1
                continue

            raw_ts = record.get("last_restocked")
            if isinstance(raw_ts, str):
                parsed = datetime.fromisoformat(raw_ts)
                if parsed.tzinfo is None:
                    parsed = parsed.replace(tzinfo=timezone.utc)
                record["last_restocked"] = parsed
            elif raw_ts is None:
                record["last_restocked"] = datetime.now(timezone.utc)

            record["rto_risk"] = classify_rate(record["delivery_success_rate"])
            session.add(Product(**record))
            if product_id is not None:
                existing_ids.add(product_id)
            inserted += 1

        await session.commit()

        elapsed = time.perf_counter() - start_time
        summary: dict[str, Any] = {
            "total": len(records),
            "inserted": inserted,
            "skipped": skipped,
            "processing_time_seconds": round(elapsed, 4),
        }
        logger.info("Seeding complete: %s", summary)
        if self.broadcast_callback is not None and inserted:
            await self.broadcast_callback({"type": "catalog_seeded", **summary})
        return summary

    async def seed_from_json(
        self,
        session: AsyncSession,
        file_path: str,
    ) -> dict[str, Any]:
        """Seed the catalog from a JSON file.

        The file must contain a JSON array of product objects at the top
        level.

        Returns:
            A summary dictionary identical to ``seed_products``.
        """
        path = Path(file_path)
        logger.info("Loading products from %s", path.resolve())

        with path.open("r", encoding="utf-8") as fh:
            records: list[dict[str, Any]] = json.load(fh)

        return await self.seed_products(session, records)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _broadcast(self, event_type: str, product: Product) -> None:
        if self.broadcast_callback is None:
            return
        await self.broadcast_callback(
            {"type": event_type, "product": product_payload(product)}
        )
