"""Barcode scan endpoint: match a code by SKU and book stock in."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_inventory_service
from src.models.database import get_db
from src.pipeline.inventory import InventoryService
from src.schemas.schemas import ProductResponse, ScanRequest, ScanResponse

logger = logging.getLogger(__name__)

scanner_router = APIRouter(prefix="/api/scanner", tags=["scanner"])


@scanner_router.post("/scan", response_model=ScanResponse)
async def scan_code(
    body: ScanRequest,
    db: AsyncSession = Depends(get_db),
    service: InventoryService = Depends(get_inventory_service),
) -> ScanResponse:
    """Process a scanned barcode.

    A matching SKU gets ``quantity`` units added to its stock.  Unknown
    codes are not an error; the response simply reports no match.
    """
    result = await service.scan(db, body.code, body.quantity)
    if not result.matched:
        return ScanResponse(
            code=result.code,
            matched=False,
            message=f"No product found for barcode {result.code}",
        )

    product = ProductResponse.model_validate(result.product)
    return ScanResponse(
        code=result.code,
        matched=True,
        product=product,
        message=f"Barcode {result.code} matched {product.name}; stock is now {product.stock}",
    )
