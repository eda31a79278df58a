"""Catalog CRUD endpoints for the inventory dashboard."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_inventory_service
from src.exceptions import ProductNotFoundError
from src.models.database import get_db
from src.pipeline.inventory import InventoryService
from src.schemas.schemas import (
    AssessmentResponse,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    ProductWithAssessment,
)

logger = logging.getLogger(__name__)

products_router = APIRouter(prefix="/api/products", tags=["products"])


@products_router.get("", response_model=list[ProductResponse])
async def list_products(
    db: AsyncSession = Depends(get_db),
    service: InventoryService = Depends(get_inventory_service),
) -> list[ProductResponse]:
    """List every catalog product ordered by id."""
    products = await service.list_products(db)
    return [ProductResponse.model_validate(p) for p in products]


@products_router.post("", response_model=ProductWithAssessment, status_code=201)
async def create_product(
    body: ProductCreate,
    db: AsyncSession = Depends(get_db),
    service: InventoryService = Depends(get_inventory_service),
) -> ProductWithAssessment:
    """Create a product, assessing its RTO risk against the catalog.

    Args:
        body: Product form data, optionally with order signals.
        db: Async database session dependency.
        service: Inventory service dependency.

    Returns:
        The stored product and the assessment written onto it.
    """
    order_params = body.order_context.to_context() if body.order_context else None
    product, assessment = await service.create_product(db, body, order_params)
    return ProductWithAssessment(
        product=ProductResponse.model_validate(product),
        assessment=AssessmentResponse.from_assessment(assessment),
    )


@products_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    service: InventoryService = Depends(get_inventory_service),
) -> ProductResponse:
    """Retrieve a single product by its id.

    Raises:
        HTTPException: 404 if the product is not found.
    """
    try:
        product = await service.get_product(db, product_id)
    except ProductNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    return ProductResponse.model_validate(product)


@products_router.patch("/{product_id}", response_model=ProductWithAssessment)
async def update_product(
    product_id: int,
    body: ProductUpdate,
    db: AsyncSession = Depends(get_db),
    service: InventoryService = Depends(get_inventory_service),
) -> ProductWithAssessment:
    """Edit a product, re-assessing it when its price changes.

    Raises:
        HTTPException: 404 if the product is not found.
    """
    order_params = body.order_context.to_context() if body.order_context else None
    try:
        product, assessment = await service.update_product(
            db, product_id, body, order_params,
        )
    except ProductNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc

    return ProductWithAssessment(
        product=ProductResponse.model_validate(product),
        assessment=(
            AssessmentResponse.from_assessment(assessment)
            if assessment is not None
            else None
        ),
    )


@products_router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    service: InventoryService = Depends(get_inventory_service),
) -> Response:
    """Remove a product from the catalog.

    Raises:
        HTTPException: 404 if the product is not found.
    """
    try:
        await service.delete_product(db, product_id)
    except ProductNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    return Response(status_code=204)
