"""Pydantic v2 schemas for request validation and response serialization.

This module defines all data transfer objects (DTOs) used across the
ShelfSense inventory service:

- ``OrderContextPayload``   — optional order signals for an RTO assessment.
- ``ProductCreate``         — incoming product form payload.
- ``ProductUpdate``         — partial edit payload for PATCH /products/{id}.
- ``ProductResponse``       — product data returned from the API.
- ``RiskFactorResponse``    — one explainable score adjustment.
- ``AssessmentRequest``     — body for POST /predictions/assess.
- ``AssessmentResponse``    — RTO assessment returned from the API.
- ``ProductWithAssessment`` — product plus the assessment written onto it.
- ``ScanRequest`` / ``ScanResponse`` — barcode scan workflow.
- ``RestockRecommendation`` — product flagged for restocking.
- ``MetricsResponse``       — aggregate analytics for the dashboard.

Non-negative checks on prices, stock and counts live here, at the API
edge; the risk scorer itself accepts whatever numbers it is given.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.pipeline.risk_scorer import RiskAssessment
from src.pipeline.rules_engine import OrderContext


class OrderContextPayload(BaseModel):
    """Optional order-level signals that refine an RTO assessment.

    Every field may be omitted; omitted signals contribute no adjustment.

    Attributes:
        price: Order value.  Falls back to the product price when omitted.
        address_length: Character count of the delivery address.
        pincode: Delivery postal code.
        order_time: When the order was placed, in the customer's local
            time.  Offsets are not converted, so send local wall-clock time.
        previous_orders: Orders the customer placed before.
        previous_returns: How many of those orders were returned.
    """

    price: float | None = Field(
        default=None,
        ge=0,
        description="Order value.  Falls back to the product price.",
    )
    address_length: int | None = Field(
        default=None,
        ge=0,
        description="Character count of the delivery address.",
    )
    pincode: str | None = Field(
        default=None,
        description="Delivery postal code.",
    )
    order_time: datetime | None = Field(
        default=None,
        description=(
            "Order placement time in the customer's local time.  The hour is "
            "scored as given; a UTC offset is not converted."
        ),
    )
    previous_orders: int | None = Field(
        default=None,
        ge=0,
        description="Number of earlier orders by the customer.",
    )
    previous_returns: int | None = Field(
        default=None,
        ge=0,
        description="Number of earlier orders that were returned.",
    )

    def to_context(self) -> OrderContext:
        """Convert into the scorer's ``OrderContext``."""
        return OrderContext(**self.model_dump())


class ProductCreate(BaseModel):
    """Schema for creating a catalog product from the inventory form.

    ``delivery_success_rate`` and ``rto_risk`` are not accepted here; they
    are computed by the risk scorer.

    Attributes:
        name: Display name.
        sku: Stock-keeping unit, matched by the barcode scanner.
        stock: Units on hand.
        price: Unit price.
        order_context: Optional order signals used for the initial
            assessment.
    """

    name: str = Field(..., min_length=1, description="Display name of the product.")
    sku: str = Field(..., min_length=1, description="Stock-keeping unit.")
    stock: int = Field(default=0, ge=0, description="Units on hand.")
    price: float = Field(..., ge=0, description="Unit price.")
    order_context: OrderContextPayload | None = Field(
        default=None,
        description="Optional order signals for the initial RTO assessment.",
    )


class ProductUpdate(BaseModel):
    """Request body schema for ``PATCH /api/products/{product_id}``.

    Only the supplied fields are changed.  Changing ``price`` or supplying
    ``order_context`` triggers a re-assessment.
    """

    name: str | None = Field(default=None, min_length=1)
    sku: str | None = Field(default=None, min_length=1)
    stock: int | None = Field(default=None, ge=0)
    price: float | None = Field(default=None, ge=0)
    order_context: OrderContextPayload | None = Field(
        default=None,
        exclude=True,
        description="Optional order signals for the re-assessment.",
    )


class ProductResponse(BaseModel):
    """Schema for a catalog product as returned by the API.

    ``from_attributes=True`` enables direct construction from a ``Product``
    ORM instance without manual field mapping.
    """

    id: int
    name: str
    sku: str
    stock: int
    price: float
    last_restocked: datetime
    returns_count: int
    delivery_success_rate: float
    rto_risk: str
    aging: int

    model_config = ConfigDict(from_attributes=True)


class RiskFactorResponse(BaseModel):
    """One applied score adjustment.

    Attributes:
        factor: Factor label, e.g. ``"Returns History"``.
        impact: Percentage points added to the rate.
    """

    factor: str
    impact: float

    model_config = ConfigDict(from_attributes=True)


class AssessmentRequest(BaseModel):
    """Request body for ``POST /api/predictions/assess``.

    Attributes:
        price: Candidate unit price.  Omitted is compared as ``0``.
        order_context: Optional order signals.  Omitting it yields a plain
            assessment with no risk factors.
    """

    price: float | None = Field(default=None, ge=0)
    order_context: OrderContextPayload | None = None


class AssessmentResponse(BaseModel):
    """An RTO assessment as returned by the API.

    Attributes:
        delivery_success_rate: Predicted rate, within [50, 98].
        rto_risk: ``low``, ``medium`` or ``high``.
        risk_factors: Applied adjustments, in evaluation order.
    """

    delivery_success_rate: float
    rto_risk: str
    risk_factors: list[RiskFactorResponse] = Field(default_factory=list)

    @classmethod
    def from_assessment(cls, assessment: RiskAssessment) -> AssessmentResponse:
        """Build the response from a scorer ``RiskAssessment``."""
        return cls(
            delivery_success_rate=assessment.delivery_success_rate,
            rto_risk=assessment.rto_risk,
            risk_factors=[
                RiskFactorResponse.model_validate(f) for f in assessment.risk_factors
            ],
        )


class ProductWithAssessment(BaseModel):
    """A created or updated product together with its assessment.

    ``assessment`` is ``None`` for edits that did not trigger a
    re-assessment.
    """

    product: ProductResponse
    assessment: AssessmentResponse | None = None


class ScanRequest(BaseModel):
    """Request body for ``POST /api/scanner/scan``.

    Attributes:
        code: Decoded barcode value.
        quantity: Units received with this scan.
    """

    code: str = Field(..., description="Decoded barcode value.")
    quantity: int = Field(default=1, ge=1, description="Units received.")


class ScanResponse(BaseModel):
    """Outcome of a barcode scan.

    Attributes:
        code: The normalised code that was looked up.
        matched: Whether a product carries this SKU.
        product: The updated product on a match, ``None`` otherwise.
        message: Human-readable summary for the scanner UI.
    """

    code: str
    matched: bool
    product: ProductResponse | None = None
    message: str


class RestockRecommendation(BaseModel):
    """A product flagged for restocking.

    Attributes:
        product: The product itself.
        recommended_quantity: Units to reorder.
        stock_status: ``Critical``, ``Low``, ``Restock Soon`` or ``Healthy``.
    """

    product: ProductResponse
    recommended_quantity: int
    stock_status: str


class MetricsResponse(BaseModel):
    """Aggregate analytics for the prediction dashboard.

    Attributes:
        total_products: Number of catalog products.
        aging_stats: Counts keyed ``critical``, ``aging``, ``moderate``,
            ``fresh``.
        aging_distribution: Counts per 30-day bucket.
            Each element: ``{"range": "31-60", "count": 12}``.
        rto_trends: Average RTO rate per restock month.
            Each element: ``{"date": "2024-05", "rto": 18.4, "products": 31}``.
        average_rto_rate: Mean RTO percentage across the catalog.
        restocked_this_month: Products restocked in the current month.
        restock_recommendations: Products most in need of restocking.
    """

    total_products: int
    aging_stats: dict[str, int]
    aging_distribution: list[dict]
    rto_trends: list[dict]
    average_rto_rate: float
    restocked_this_month: int
    restock_recommendations: list[RestockRecommendation]
