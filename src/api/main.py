"""FastAPI application entry point for the ShelfSense inventory API."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import BackgroundTasks, FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from src.api.routes.metrics import metrics_router
from src.api.routes.predictions import predictions_router
from src.api.routes.products import products_router
from src.api.routes.scanner import scanner_router
from src.api.websocket import manager
from src.config import settings
from src.models.database import async_session, create_tables
from src.pipeline.inventory import InventoryService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown tasks.

    Creates database tables on startup and logs readiness.

    Args:
        app: The FastAPI application instance.
    """
    await create_tables()
    logger.info("%s started. Database tables ready.", settings.APP_TITLE)
    yield


app = FastAPI(
    title=settings.APP_TITLE,
    description="Inventory tracking with RTO risk prediction and a live event stream",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# CORS middleware for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include route modules
app.include_router(products_router)
app.include_router(predictions_router)
app.include_router(scanner_router)
app.include_router(metrics_router)


# ---------------------------------------------------------------------------
# WebSocket endpoint
# ---------------------------------------------------------------------------
@app.websocket("/ws/inventory")
async def websocket_inventory(websocket: WebSocket) -> None:
    """WebSocket endpoint for real-time inventory event streaming.

    Accepts a connection, sends a confirmation message, then keeps the
    connection alive until the client disconnects.

    Args:
        websocket: The incoming WebSocket connection.
    """
    await manager.connect(websocket)
    try:
        await websocket.send_json(
            {"type": "connected", "message": "Connected to inventory event stream"}
        )
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        manager.disconnect(websocket)


# ---------------------------------------------------------------------------
# Demo catalog endpoint (inline, not in a separate router)
# ---------------------------------------------------------------------------
class GenerateRequest(BaseModel):
    """Request body for the generate-and-seed endpoint."""
    count: int = Field(default=settings.DEMO_PRODUCT_COUNT, ge=1, le=10_000)
    seed: int = 42


class GenerateResponse(BaseModel):
    """Response after a generate job is accepted."""
    status: str
    count: int
    seed: int
    message: str


async def _run_generate_pipeline(count: int, seed: int) -> None:
    """Background task: generate a synthetic catalog then seed it."""
    try:
        import random
        from faker import Faker
        from data.generate_data import generate_products
        random.seed(seed)
        Faker.seed(seed)
        products = generate_products(count=count)
        service = InventoryService(broadcast_callback=manager.broadcast)
        async with async_session() as session:
            summary = await service.seed_products(session, products)
        logger.info(
            "Generate pipeline done: inserted=%s skipped=%s",
            summary.get("inserted"), summary.get("skipped"),
        )
    except Exception:
        logger.exception("Generate pipeline failed")


@app.post("/api/pipeline/generate", response_model=GenerateResponse, tags=["pipeline"])
async def generate_and_seed(
    body: GenerateRequest,
    background_tasks: BackgroundTasks,
) -> GenerateResponse:
    """Generate a synthetic catalog and seed it into the store.

    Products whose id already exists are skipped, so repeating the call
    does not duplicate the demo catalog.

    Args:
        body: count (number of products) and seed (for reproducibility).
        background_tasks: FastAPI background task manager.

    Returns:
        Confirmation with job parameters.
    """
    background_tasks.add_task(_run_generate_pipeline, body.count, body.seed)
    logger.info("Generate pipeline triggered: count=%s seed=%s", body.count, body.seed)
    return GenerateResponse(
        status="started",
        count=body.count,
        seed=body.seed,
        message=f"Generating {body.count} products in background (seed={body.seed})",
    )
