"""Shared FastAPI dependencies."""
from __future__ import annotations

from src.api.websocket import manager
from src.pipeline.inventory import InventoryService


def get_inventory_service() -> InventoryService:
    """Build an inventory service that pushes catalog events to the WebSocket stream."""
    return InventoryService(broadcast_callback=manager.broadcast)
