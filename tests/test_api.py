"""HTTP-level tests for the FastAPI routes."""

import pytest

from src.models.database import Product


async def _seed(session_factory, service, *records):
    async with session_factory() as db_session:
        await service.seed_products(db_session, list(records))


def _record(product_id, price, rate, **extra):
    record = {
        "id": product_id,
        "name": f"Seed {product_id}",
        "sku": f"SKU{product_id:05d}",
        "stock": 100,
        "price": price,
        "last_restocked": "2025-03-01T08:00:00",
        "returns_count": 0,
        "delivery_success_rate": rate,
        "aging": 40,
    }
    record.update(extra)
    return record


class TestProductRoutes:
    @pytest.mark.asyncio
    async def test_create_and_fetch(self, client):
        response = await client.post(
            "/api/products",
            json={
                "name": "Premium Watch",
                "sku": "PW-1",
                "stock": 12,
                "price": 6000,
                "order_context": {"price": 6000, "previous_returns": 3},
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["assessment"]["risk_factors"] == [
            {"factor": "Price Range", "impact": -5},
            {"factor": "Returns History", "impact": -8},
        ]
        assert body["assessment"]["delivery_success_rate"] == 72
        assert body["product"]["rto_risk"] == "high"

        fetched = await client.get(f"/api/products/{body['product']['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["sku"] == "PW-1"

    @pytest.mark.asyncio
    async def test_negative_price_rejected_at_the_edge(self, client):
        response = await client.post(
            "/api/products", json={"name": "Bad", "sku": "B", "price": -1},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_missing_product_is_404(self, client):
        assert (await client.get("/api/products/999")).status_code == 404
        assert (await client.patch("/api/products/999", json={"name": "x"})).status_code == 404
        assert (await client.delete("/api/products/999")).status_code == 404

    @pytest.mark.asyncio
    async def test_patch_and_delete(self, client, session_factory, service):
        await _seed(session_factory, service, _record(1, 1000, 60), _record(2, 5000, 95))

        patched = await client.patch("/api/products/1", json={"price": 5100})
        assert patched.status_code == 200
        assert patched.json()["assessment"]["rto_risk"] == "low"

        deleted = await client.delete("/api/products/2")
        assert deleted.status_code == 204

        listing = await client.get("/api/products")
        assert [p["id"] for p in listing.json()] == [1]


class TestPredictionRoute:
    @pytest.mark.asyncio
    async def test_assess_does_not_persist(self, client, session_factory):
        response = await client.post("/api/predictions/assess", json={"price": 1000})

        assert response.status_code == 200
        assert response.json() == {
            "delivery_success_rate": 85.0,
            "rto_risk": "medium",
            "risk_factors": [],
        }
        async with session_factory() as db_session:
            assert await db_session.get(Product, 1) is None

    @pytest.mark.asyncio
    async def test_assess_with_order_time(self, client, session_factory, service):
        await _seed(session_factory, service, _record(1, 1000, 80))

        response = await client.post(
            "/api/predictions/assess",
            json={
                "price": 1000,
                "order_context": {"order_time": "2025-06-01T21:15:00", "previous_orders": 8},
            },
        )

        body = response.json()
        assert [f["factor"] for f in body["risk_factors"]] == [
            "Price Range",
            "Order History",
            "Order Timing",
        ]
        assert body["delivery_success_rate"] == pytest.approx(80 + 0 + 5 - 2)


class TestScannerRoute:
    @pytest.mark.asyncio
    async def test_scan_match_and_miss(self, client, session_factory, service):
        await _seed(session_factory, service, _record(1, 1000, 80, stock=5))

        hit = await client.post("/api/scanner/scan", json={"code": "SKU00001"})
        miss = await client.post("/api/scanner/scan", json={"code": "NOPE"})

        assert hit.json()["matched"] is True
        assert hit.json()["product"]["stock"] == 6
        assert miss.status_code == 200
        assert miss.json()["matched"] is False
        assert miss.json()["product"] is None


class TestMetricsRoute:
    @pytest.mark.asyncio
    async def test_metrics_shape(self, client, session_factory, service):
        await _seed(
            session_factory,
            service,
            _record(1, 1000, 90, stock=8, aging=95),
            _record(2, 2000, 70, stock=300, aging=10),
        )

        response = await client.get("/api/metrics")

        body = response.json()
        assert response.status_code == 200
        assert body["total_products"] == 2
        assert body["aging_stats"] == {"critical": 1, "aging": 0, "moderate": 0, "fresh": 1}
        assert body["rto_trends"] == [{"date": "2025-03", "rto": 20.0, "products": 2}]
        assert body["average_rto_rate"] == 20.0
        assert len(body["restock_recommendations"]) == 1
        recommendation = body["restock_recommendations"][0]
        assert recommendation["product"]["id"] == 1
        assert recommendation["stock_status"] == "Critical"
        assert recommendation["recommended_quantity"] == 45


class TestGenerateRoute:
    @pytest.mark.asyncio
    async def test_count_is_capped(self, client):
        response = await client.post("/api/pipeline/generate", json={"count": 10_001})

        assert response.status_code == 422
