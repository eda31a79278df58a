"""RTO prediction endpoint: score a candidate without storing it."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_inventory_service
from src.models.database import get_db
from src.pipeline.inventory import InventoryService
from src.pipeline.risk_scorer import CandidateInput
from src.schemas.schemas import AssessmentRequest, AssessmentResponse

logger = logging.getLogger(__name__)

predictions_router = APIRouter(prefix="/api/predictions", tags=["predictions"])


@predictions_router.post("/assess", response_model=AssessmentResponse)
async def assess_candidate(
    body: AssessmentRequest,
    db: AsyncSession = Depends(get_db),
    service: InventoryService = Depends(get_inventory_service),
) -> AssessmentResponse:
    """Predict delivery success and RTO risk for a candidate product.

    Args:
        body: Candidate price and optional order signals.
        db: Async database session dependency.
        service: Inventory service dependency.

    Returns:
        The assessment, with one risk factor per supplied order signal.
    """
    order_params = body.order_context.to_context() if body.order_context else None
    assessment = await service.assess(
        db, CandidateInput(price=body.price), order_params,
    )
    return AssessmentResponse.from_assessment(assessment)
