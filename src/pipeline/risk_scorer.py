"""RTO risk scoring for candidate products.

Estimates the delivery success rate of a new or edited product from the
prices and outcomes of similar catalog products, applies the contextual
order adjustments from the rules engine, and classifies the clamped result
into an RTO (Return to Origin) risk tier.  Every applied adjustment is
reported back as a ``RiskFactor`` so the caller can explain the score.

The scorer is pure: it reads the catalog it is given and never mutates it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Literal, Protocol

from src.config import settings
from src.pipeline.rules_engine import AdjustmentRules, OrderContext, RiskFactor

logger = logging.getLogger(__name__)

RtoRisk = Literal["low", "medium", "high"]


class CatalogProduct(Protocol):
    """Any catalog record exposing a price and a delivery success rate."""

    price: float
    delivery_success_rate: float


@dataclass(frozen=True, slots=True)
class CandidateInput:
    """Attributes of the product being assessed.

    Attributes:
        price: Unit price.  ``None`` is compared against the catalog as if
            it were ``0``.
    """

    price: float | None = None


@dataclass(frozen=True, slots=True)
class RiskAssessment:
    """Assessed delivery outlook for a candidate product.

    Attributes:
        delivery_success_rate: Predicted rate, clamped to the configured
            ``[MIN_SUCCESS_RATE, MAX_SUCCESS_RATE]`` range.
        rto_risk: Tier derived from ``delivery_success_rate``.
        risk_factors: Adjustments applied, in evaluation order.  Empty for
            calls without order context.
    """

    delivery_success_rate: float
    rto_risk: RtoRisk
    risk_factors: list[RiskFactor] = field(default_factory=list)


def classify_rate(rate: float) -> RtoRisk:
    """Map a delivery success rate onto its RTO risk tier."""
    if rate > settings.LOW_RISK_THRESHOLD:
        return "low"
    if rate > settings.MEDIUM_RISK_THRESHOLD:
        return "medium"
    return "high"


class RiskScorer:
    """Predicts delivery success and RTO risk for candidate products.

    The baseline is a price-weighted mean over catalog products priced
    within ``SIMILARITY_PRICE_WINDOW`` of the candidate, where each product
    weighs ``1 / (|price delta| + 1)``.  Order context adjustments are added
    on top, and the total is clamped and classified.

    Usage::

        scorer = RiskScorer()
        result = scorer.assess(catalog, CandidateInput(price=1200))
        explained = scorer.assess(
            catalog,
            CandidateInput(price=6000),
            OrderContext(previous_returns=3),
        )
    """

    def __init__(self, rules: AdjustmentRules | None = None) -> None:
        self.rules = rules or AdjustmentRules()

    def baseline_rate(
        self,
        catalog: Iterable[CatalogProduct],
        price: float | None,
    ) -> float:
        """Compute the price-weighted baseline success rate.

        Args:
            catalog: Existing products.  Order does not matter.
            price: Candidate price; ``None`` is treated as ``0``.

        Returns:
            The weighted mean rate of similar products, or
            ``DEFAULT_SUCCESS_RATE`` when none are similar.
        """
        target = price or 0
        weighted_sum = 0.0
        total_weight = 0.0
        similar = 0

        for product in catalog:
            distance = abs(product.price - target)
            if distance < settings.SIMILARITY_PRICE_WINDOW:
                weight = 1 / (distance + 1)
                weighted_sum += product.delivery_success_rate * weight
                total_weight += weight
                similar += 1

        if similar == 0:
            logger.debug("No similar products near price %s, using default", target)
            return settings.DEFAULT_SUCCESS_RATE

        logger.debug("Baseline from %d similar product(s)", similar)
        return weighted_sum / total_weight

    def assess(
        self,
        catalog: Iterable[CatalogProduct],
        candidate: CandidateInput,
        order_params: OrderContext | None = None,
    ) -> RiskAssessment:
        """Assess the RTO risk of a candidate product.

        Args:
            catalog: Existing products used for the similarity baseline.
            candidate: Attributes of the product being assessed.
            order_params: Optional order signals.  When omitted no
                adjustment is applied and ``risk_factors`` is empty.

        Returns:
            A ``RiskAssessment`` with the clamped rate, its tier and the
            applied factors.
        """
        rate = self.baseline_rate(catalog, candidate.price)
        baseline = rate

        factors: list[RiskFactor] = []
        if order_params is not None:
            factors = self.rules.evaluate_all(order_params, price=candidate.price)
            for factor in factors:
                rate += factor.impact

        clamped = min(max(rate, settings.MIN_SUCCESS_RATE), settings.MAX_SUCCESS_RATE)
        tier = classify_rate(clamped)

        logger.info(
            "RTO assessment: rate=%.2f (baseline=%.2f, raw=%.2f), risk=%s, factors=%s",
            clamped,
            baseline,
            rate,
            tier,
            [f.factor for f in factors],
        )

        return RiskAssessment(
            delivery_success_rate=clamped,
            rto_risk=tier,
            risk_factors=factors,
        )
