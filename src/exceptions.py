"""Exceptions raised by the inventory service layer.

The risk scorer itself never raises for documented inputs; these errors
belong to the catalog store and are translated to HTTP responses by the
API routes.
"""

from __future__ import annotations


class InventoryError(Exception):
    """Base class for inventory service errors.

    Attributes:
        message: Human-readable description of the error.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ProductNotFoundError(InventoryError):
    """Raised when a product id does not exist in the catalog.

    Attributes:
        product_id: The id that was looked up.
    """

    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        super().__init__(f"Product '{product_id}' not found")
