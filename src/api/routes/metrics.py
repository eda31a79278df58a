"""Inventory analytics endpoints for the prediction dashboard."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_inventory_service
from src.models.database import get_db
from src.pipeline import analytics
from src.pipeline.inventory import InventoryService
from src.schemas.schemas import (
    MetricsResponse,
    ProductResponse,
    RestockRecommendation,
)

logger = logging.getLogger(__name__)

metrics_router = APIRouter(prefix="/api/metrics", tags=["metrics"])


@metrics_router.get("", response_model=MetricsResponse)
async def get_metrics(
    limit: int | None = Query(
        default=None, ge=1, description="Maximum restock recommendations",
    ),
    db: AsyncSession = Depends(get_db),
    service: InventoryService = Depends(get_inventory_service),
) -> MetricsResponse:
    """Compute aggregated inventory analytics.

    Provides aging statistics and distribution, monthly RTO trends, the
    catalog-wide RTO rate, this month's restocks and restock
    recommendations.

    Args:
        limit: Optional cap on the number of restock recommendations.
        db: Async database session dependency.
        service: Inventory service dependency.

    Returns:
        Aggregated metrics covering the whole catalog.
    """
    products = await service.list_products(db)

    recommendations = [
        RestockRecommendation(
            product=ProductResponse.model_validate(p),
            recommended_quantity=analytics.restock_quantity(p),
            stock_status=analytics.stock_status(p.stock, p.delivery_success_rate),
        )
        for p in analytics.restock_recommendations(products, limit=limit)
    ]

    logger.debug(
        "Metrics computed over %d product(s), %d recommendation(s)",
        len(products),
        len(recommendations),
    )

    return MetricsResponse(
        total_products=len(products),
        aging_stats=analytics.aging_stats(products),
        aging_distribution=analytics.aging_distribution(products),
        rto_trends=analytics.monthly_rto_trends(products),
        average_rto_rate=round(analytics.average_rto_rate(products), 1),
        restocked_this_month=analytics.restocked_this_month(products),
        restock_recommendations=recommendations,
    )
