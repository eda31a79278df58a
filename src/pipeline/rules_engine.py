"""Contextual adjustment rules for RTO risk scoring.

Each rule inspects one optional order signal and, when that signal is
present, produces a ``RiskFactor`` whose impact is added to the baseline
delivery success rate by the downstream risk scorer.  Absent signals
produce no factor at all.

Rules (evaluated in this order):
    Price Range      -- Expensive orders are returned more often.
    Address Quality  -- Very short or very long addresses fail delivery.
    Order History    -- Repeat customers accept deliveries.
    Returns History  -- Customers who returned before tend to return again.
    Order Timing     -- Orders placed during business hours convert better.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

logger = logging.getLogger(__name__)

BUSINESS_HOURS: tuple[int, int] = (10, 18)  # inclusive on both ends


@dataclass(frozen=True, slots=True)
class OrderContext:
    """Optional order-level signals supplied alongside a candidate product.

    Every field may be ``None``; a ``None`` field contributes neither an
    adjustment nor a risk factor.

    Attributes:
        price: Order value in the catalog's currency unit.
        address_length: Character count of the delivery address.
        pincode: Delivery postal code.  Accepted and carried for callers,
            it does not currently move the score.
        order_time: When the order was placed.  The wall-clock hour of the
            value as given is used, so callers pass local time.
        previous_orders: Number of orders the customer placed before.
        previous_returns: Number of those orders that came back.
    """

    price: float | None = None
    address_length: int | None = None
    pincode: str | None = None
    order_time: datetime | None = None
    previous_orders: int | None = None
    previous_returns: int | None = None


@dataclass(frozen=True, slots=True)
class RiskFactor:
    """One explainable adjustment applied to a delivery success rate.

    Attributes:
        factor: Human-readable factor label (e.g. ``"Price Range"``).
        impact: Percentage points added to the rate (negative lowers it).
    """

    factor: str
    impact: float


class AdjustmentRules:
    """Evaluates the contextual adjustment rules against an order context.

    Usage::

        rules = AdjustmentRules()
        factors = rules.evaluate_all(OrderContext(price=6000, previous_returns=3))
    """

    def evaluate_price_range(self, price: float | None) -> RiskFactor | None:
        """Evaluate the Price Range rule.

        Args:
            price: Order price, or ``None`` when unknown.

        Returns:
            A ``RiskFactor`` (possibly with zero impact) whenever the price
            is known, otherwise ``None``.
        """
        if price is None:
            return None
        if price > 5000:
            impact = -5
        elif price > 2000:
            impact = -2
        else:
            impact = 0
        logger.debug("Price Range rule: price=%s, impact=%d", price, impact)
        return RiskFactor(factor="Price Range", impact=impact)

    def evaluate_address_quality(self, address_length: int | None) -> RiskFactor | None:
        """Evaluate the Address Quality rule.

        Addresses shorter than 50 characters are usually incomplete and
        those longer than 150 are usually noisy; both hurt delivery.
        """
        if address_length is None:
            return None
        if address_length < 50:
            impact = -5
        elif address_length > 150:
            impact = -3
        else:
            impact = 2
        logger.debug(
            "Address Quality rule: length=%d, impact=%d", address_length, impact,
        )
        return RiskFactor(factor="Address Quality", impact=impact)

    def evaluate_order_history(self, previous_orders: int | None) -> RiskFactor | None:
        """Evaluate the Order History rule."""
        if previous_orders is None:
            return None
        if previous_orders == 0:
            impact = -3
        elif previous_orders > 5:
            impact = 5
        else:
            impact = 2
        logger.debug(
            "Order History rule: previous_orders=%d, impact=%d",
            previous_orders,
            impact,
        )
        return RiskFactor(factor="Order History", impact=impact)

    def evaluate_returns_history(self, previous_returns: int | None) -> RiskFactor | None:
        """Evaluate the Returns History rule."""
        if previous_returns is None:
            return None
        if previous_returns > 2:
            impact = -8
        elif previous_returns > 0:
            impact = -4
        else:
            impact = 2
        logger.debug(
            "Returns History rule: previous_returns=%d, impact=%d",
            previous_returns,
            impact,
        )
        return RiskFactor(factor="Returns History", impact=impact)

    def evaluate_order_timing(self, order_time: datetime | None) -> RiskFactor | None:
        """Evaluate the Order Timing rule.

        Args:
            order_time: Order placement time.  Only the wall-clock hour is
                inspected; an aware value is scored in its own offset.

        Returns:
            ``+2`` inside business hours (10:00-18:59), ``-2`` otherwise,
            or ``None`` when no time was supplied.
        """
        if order_time is None:
            return None
        start, end = BUSINESS_HOURS
        impact = 2 if start <= order_time.hour <= end else -2
        logger.debug("Order Timing rule: hour=%d, impact=%d", order_time.hour, impact)
        return RiskFactor(factor="Order Timing", impact=impact)

    def evaluate_all(
        self,
        context: OrderContext,
        price: float | None = None,
    ) -> list[RiskFactor]:
        """Run every adjustment rule against an order context.

        Rules run in a fixed order so that the returned factors read the
        same way on every call.

        Args:
            context: Order signals to evaluate.
            price: Fallback price used by the Price Range rule when the
                context itself carries none.

        Returns:
            The factors of every rule whose signal was present.
        """
        order_price = context.price if context.price is not None else price
        candidates = [
            self.evaluate_price_range(order_price),
            self.evaluate_address_quality(context.address_length),
            self.evaluate_order_history(context.previous_orders),
            self.evaluate_returns_history(context.previous_returns),
            self.evaluate_order_timing(context.order_time),
        ]
        factors = [factor for factor in candidates if factor is not None]
        logger.debug(
            "Applied %d adjustment(s): %s",
            len(factors),
            [f.factor for f in factors],
        )
        return factors
