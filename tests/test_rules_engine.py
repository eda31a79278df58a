"""Unit tests for the contextual adjustment rules."""

from datetime import datetime, timedelta, timezone

import pytest

from src.pipeline.rules_engine import AdjustmentRules, OrderContext, RiskFactor


@pytest.fixture
def rules() -> AdjustmentRules:
    return AdjustmentRules()


class TestPriceRange:
    @pytest.mark.parametrize(
        ("price", "impact"),
        [(6000, -5), (5000.01, -5), (5000, -2), (2000.5, -2), (2000, 0), (0, 0)],
    )
    def test_bands(self, rules, price, impact):
        assert rules.evaluate_price_range(price) == RiskFactor("Price Range", impact)

    def test_unknown_price_records_nothing(self, rules):
        assert rules.evaluate_price_range(None) is None


class TestAddressQuality:
    @pytest.mark.parametrize(
        ("length", "impact"),
        [(0, -5), (49, -5), (50, 2), (150, 2), (151, -3)],
    )
    def test_bands(self, rules, length, impact):
        assert rules.evaluate_address_quality(length).impact == impact

    def test_absent(self, rules):
        assert rules.evaluate_address_quality(None) is None


class TestOrderHistory:
    @pytest.mark.parametrize(
        ("orders", "impact"),
        [(0, -3), (1, 2), (5, 2), (6, 5)],
    )
    def test_bands(self, rules, orders, impact):
        assert rules.evaluate_order_history(orders).impact == impact

    def test_zero_orders_is_a_signal(self, rules):
        """Zero is present, not missing."""
        assert rules.evaluate_order_history(0) is not None


class TestReturnsHistory:
    @pytest.mark.parametrize(
        ("returns", "impact"),
        [(0, 2), (1, -4), (2, -4), (3, -8), (10, -8)],
    )
    def test_bands(self, rules, returns, impact):
        assert rules.evaluate_returns_history(returns).impact == impact


class TestOrderTiming:
    @pytest.mark.parametrize(
        ("hour", "minute", "impact"),
        [(9, 59, -2), (10, 0, 2), (14, 30, 2), (18, 59, 2), (19, 0, -2), (2, 0, -2)],
    )
    def test_business_hours_inclusive(self, rules, hour, minute, impact):
        order_time = datetime(2025, 7, 4, hour, minute)
        assert rules.evaluate_order_timing(order_time).impact == impact

    def test_absent(self, rules):
        assert rules.evaluate_order_timing(None) is None

    def test_aware_time_scored_on_its_own_offset(self, rules):
        ist = timezone(timedelta(hours=5, minutes=30))
        # 12:00 in IST is 06:30 UTC; the IST hour is scored
        local_noon = datetime(2025, 7, 4, 12, 0, tzinfo=ist)
        utc_morning = datetime(2025, 7, 4, 6, 30, tzinfo=timezone.utc)

        assert rules.evaluate_order_timing(local_noon).impact == 2
        assert rules.evaluate_order_timing(utc_morning).impact == -2


class TestEvaluateAll:
    def test_only_supplied_signals_produce_factors(self, rules):
        factors = rules.evaluate_all(OrderContext(address_length=200))

        assert factors == [RiskFactor("Address Quality", -3)]

    def test_context_price_wins_over_fallback(self, rules):
        factors = rules.evaluate_all(OrderContext(price=100), price=9000)

        assert factors == [RiskFactor("Price Range", 0)]

    def test_fallback_price_used_when_context_has_none(self, rules):
        factors = rules.evaluate_all(OrderContext(), price=9000)

        assert factors == [RiskFactor("Price Range", -5)]
