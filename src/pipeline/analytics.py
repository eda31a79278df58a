"""Inventory analytics for the prediction dashboard.

Pure aggregation helpers over a list of catalog products: aging buckets,
monthly RTO trends, restock recommendations and stock status labels.  The
API layer feeds them the current catalog and serialises the results.
"""

from __future__ import annotations

import logging
import math
from collections import Counter, defaultdict
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Protocol

from src.config import settings

logger = logging.getLogger(__name__)

AGING_BUCKETS: list[str] = ["0-30", "31-60", "61-90", "90+"]

RESTOCK_BASE_QUANTITY = 50
RTO_RESTOCK_MULTIPLIERS: dict[str, float] = {
    "high": 0.7,
    "medium": 0.85,
    "low": 1.0,
}


class InventoryRecord(Protocol):
    """Fields of a catalog product read by the analytics helpers."""

    stock: int
    delivery_success_rate: float
    rto_risk: str
    aging: int
    last_restocked: datetime


def _as_utc(ts: datetime) -> datetime:
    """Treat naive timestamps (as SQLite returns them) as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def aging_stats(products: Sequence[InventoryRecord]) -> dict[str, int]:
    """Count products per aging severity.

    Returns:
        Counts keyed ``critical`` (> 90 days), ``aging`` (> 60),
        ``moderate`` (> 30) and ``fresh``.
    """
    stats = {"critical": 0, "aging": 0, "moderate": 0, "fresh": 0}
    for product in products:
        if product.aging > 90:
            stats["critical"] += 1
        elif product.aging > 60:
            stats["aging"] += 1
        elif product.aging > 30:
            stats["moderate"] += 1
        else:
            stats["fresh"] += 1
    return stats


def aging_distribution(products: Sequence[InventoryRecord]) -> list[dict[str, int | str]]:
    """Bucket products into 30-day aging ranges for charting.

    Args:
        products: Catalog products.

    Returns:
        One dict per bucket, in ``AGING_BUCKETS`` order, with ``range`` and
        ``count`` keys.  Empty buckets are included with a zero count.
    """
    counts: Counter[str] = Counter()
    for product in products:
        if product.aging <= 30:
            counts["0-30"] += 1
        elif product.aging <= 60:
            counts["31-60"] += 1
        elif product.aging <= 90:
            counts["61-90"] += 1
        else:
            counts["90+"] += 1

    return [{"range": label, "count": counts.get(label, 0)} for label in AGING_BUCKETS]


def monthly_rto_trends(products: Sequence[InventoryRecord]) -> list[dict[str, float | int | str]]:
    """Compute the average RTO rate per restock month.

    Products are grouped by the ``YYYY-MM`` of ``last_restocked``.  A
    product's RTO rate is ``100 - delivery_success_rate``.

    Returns:
        Dicts with ``date`` (``YYYY-MM``), ``rto`` (percentage rounded to one
        decimal) and ``products`` (count), sorted by month ascending.
    """
    rto_totals: dict[str, float] = defaultdict(float)
    counts: Counter[str] = Counter()

    for product in products:
        month_key = _as_utc(product.last_restocked).strftime("%Y-%m")
        counts[month_key] += 1
        rto_totals[month_key] += 100 - product.delivery_success_rate

    return [
        {
            "date": month,
            "rto": round(rto_totals[month] / counts[month], 1),
            "products": counts[month],
        }
        for month in sorted(counts)
    ]


def average_rto_rate(products: Sequence[InventoryRecord]) -> float:
    """Mean RTO percentage across the catalog; ``0.0`` when it is empty."""
    if not products:
        return 0.0
    return sum(100 - p.delivery_success_rate for p in products) / len(products)


def restocked_this_month(
    products: Sequence[InventoryRecord],
    now: datetime | None = None,
) -> int:
    """Count products restocked in the current calendar month.

    Args:
        products: Catalog products.
        now: Reference time, defaulting to the current UTC time.
    """
    ref = _as_utc(now or datetime.now(timezone.utc))
    count = 0
    for product in products:
        ts = _as_utc(product.last_restocked)
        if ts.year == ref.year and ts.month == ref.month:
            count += 1
    return count


def stock_status(stock: int, delivery_success_rate: float) -> str:
    """Label the stock level of a product.

    Well-delivering products are flagged for restock earlier because they
    sell through faster.
    """
    if stock < 10:
        return "Critical"
    if stock < 20:
        return "Low"
    if delivery_success_rate > 85 and stock < 50:
        return "Restock Soon"
    return "Healthy"


def restock_quantity(product: InventoryRecord) -> int:
    """Recommend how many units to reorder for a product.

    The base quantity is scaled down by the delivery success rate and
    again by the RTO tier, so risky products are reordered conservatively.
    """
    multiplier = RTO_RESTOCK_MULTIPLIERS.get(product.rto_risk, 1.0)
    quantity = RESTOCK_BASE_QUANTITY * (product.delivery_success_rate / 100) * multiplier
    # half-up, not banker's rounding
    return math.floor(quantity + 0.5)


def needs_restock(product: InventoryRecord) -> bool:
    """Whether a product belongs on the restock recommendation list."""
    return product.stock < 20 or (
        product.delivery_success_rate > 85 and product.stock < 50
    )


def restock_recommendations(
    products: Sequence[InventoryRecord],
    limit: int | None = None,
) -> list[InventoryRecord]:
    """Select the products most in need of restocking.

    Args:
        products: Catalog products.
        limit: Maximum number of recommendations.  Defaults to
            ``RESTOCK_RECOMMENDATION_LIMIT``.

    Returns:
        Products needing restock, lowest stock first.
    """
    if limit is None:
        limit = settings.RESTOCK_RECOMMENDATION_LIMIT
    candidates = sorted(
        (p for p in products if needs_restock(p)),
        key=lambda p: p.stock,
    )
    logger.debug(
        "%d product(s) need restock, returning %d",
        len(candidates),
        min(limit, len(candidates)),
    )
    return candidates[:limit]
