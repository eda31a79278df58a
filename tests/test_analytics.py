"""Unit tests for the inventory analytics helpers."""

from datetime import datetime, timezone

import pytest

from src.pipeline import analytics


class TestAging:
    def test_aging_stats(self, make_product):
        products = [make_product(aging=a) for a in (0, 30, 31, 60, 61, 90, 91, 200)]

        assert analytics.aging_stats(products) == {
            "critical": 2,
            "aging": 2,
            "moderate": 2,
            "fresh": 2,
        }

    def test_aging_distribution_keeps_empty_buckets(self, make_product):
        products = [make_product(aging=5), make_product(aging=95)]

        assert analytics.aging_distribution(products) == [
            {"range": "0-30", "count": 1},
            {"range": "31-60", "count": 0},
            {"range": "61-90", "count": 0},
            {"range": "90+", "count": 1},
        ]

    def test_empty_catalog(self):
        assert analytics.aging_stats([]) == {
            "critical": 0, "aging": 0, "moderate": 0, "fresh": 0,
        }
        assert [b["count"] for b in analytics.aging_distribution([])] == [0, 0, 0, 0]


class TestRtoTrends:
    def test_groups_by_restock_month_sorted(self, make_product):
        products = [
            make_product(
                last_restocked=datetime(2025, 5, 2, tzinfo=timezone.utc),
                delivery_success_rate=80,
            ),
            make_product(
                last_restocked=datetime(2025, 4, 20, tzinfo=timezone.utc),
                delivery_success_rate=90,
            ),
            make_product(
                last_restocked=datetime(2025, 5, 28),  # naive, read as UTC
                delivery_success_rate=70,
            ),
        ]

        assert analytics.monthly_rto_trends(products) == [
            {"date": "2025-04", "rto": 10.0, "products": 1},
            {"date": "2025-05", "rto": 25.0, "products": 2},
        ]

    def test_average_rto_rate(self, make_product):
        products = [
            make_product(delivery_success_rate=90),
            make_product(delivery_success_rate=70),
        ]

        assert analytics.average_rto_rate(products) == pytest.approx(20.0)
        assert analytics.average_rto_rate([]) == 0.0

    def test_restocked_this_month(self, make_product):
        now = datetime(2025, 3, 20, tzinfo=timezone.utc)
        products = [
            make_product(last_restocked=datetime(2025, 3, 1, tzinfo=timezone.utc)),
            make_product(last_restocked=datetime(2025, 2, 28, tzinfo=timezone.utc)),
            make_product(last_restocked=datetime(2024, 3, 10, tzinfo=timezone.utc)),
        ]

        assert analytics.restocked_this_month(products, now=now) == 1


class TestRestock:
    @pytest.mark.parametrize(
        ("stock", "rate", "status"),
        [
            (5, 95, "Critical"),
            (15, 60, "Low"),
            (40, 90, "Restock Soon"),
            (40, 85, "Healthy"),
            (60, 95, "Healthy"),
        ],
    )
    def test_stock_status(self, stock, rate, status):
        assert analytics.stock_status(stock, rate) == status

    @pytest.mark.parametrize(
        ("rate", "tier", "quantity"),
        [(90, "low", 45), (80, "medium", 34), (60, "high", 21)],
    )
    def test_restock_quantity(self, make_product, rate, tier, quantity):
        product = make_product(delivery_success_rate=rate, rto_risk=tier)

        assert analytics.restock_quantity(product) == quantity

    def test_recommendations_sorted_and_limited(self, make_product):
        products = [
            make_product(stock=15, delivery_success_rate=60),
            make_product(stock=45, delivery_success_rate=90),
            make_product(stock=45, delivery_success_rate=80),  # not needed
            make_product(stock=3, delivery_success_rate=70),
            make_product(stock=200, delivery_success_rate=95),  # not needed
        ]

        picked = analytics.restock_recommendations(products, limit=2)

        assert [p.stock for p in picked] == [3, 15]

    def test_default_limit_is_five(self, make_product):
        products = [make_product(stock=i) for i in range(8)]

        assert len(analytics.restock_recommendations(products)) == 5
