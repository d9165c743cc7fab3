"""Integration tests for the FastAPI extraction endpoints."""
import json
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from order_extractor.api import create_app
from order_extractor.config import AppConfig
from order_extractor.orchestrator import ExtractionOrchestrator

NEXT_DATA = {"props": {"pageProps": {"orders": [{
    "orderNumber": "200012345",
    "orderDate": "Mar 15, 2024",
    "orderTotal": 8.48,
    "deliveryCharges": 0,
    "items": [{"name": "Dish Soap", "price": 3.5, "quantity": 2, "productUrl": "/ip/soap/1"}],
}]}}}


@pytest.fixture
def client():
    return TestClient(create_app(AppConfig.for_testing()))


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestExtract:
    def test_from_embedded_script(self, client):
        html = f'<script id="__NEXT_DATA__" type="application/json">{json.dumps(NEXT_DATA)}</script>'
        response = client.post("/extract", json={"html": html, "url": "https://shop.example.com/orders"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["error"] is None
        order = body["data"]["orders"][0]
        assert order["orderNumber"] == "200012345"
        assert order["orderTotal"] == 8.48
        assert order["deliveryCharges"] == 0.0
        assert "tip" not in order
        assert "tax" not in order
        assert order["items"] == [{"name": "Dish Soap", "price": 3.5, "quantity": 2, "productUrl": "/ip/soap/1"}]

    def test_from_captured_globals(self, client):
        response = client.post("/extract", json={"html": "<html></html>", "globals": {"__NEXT_DATA__": NEXT_DATA}})
        assert response.json()["data"]["orders"][0]["orderDate"] == "Mar 15, 2024"

    def test_nothing_found(self, client):
        response = client.post("/extract", json={"html": "<p>Sign in to see your orders</p>"})
        assert response.status_code == 200
        assert response.json() == {"success": False, "data": None, "error": "No data found"}

    def test_unexpected_error_is_reported(self, client):
        with patch.object(ExtractionOrchestrator, "aextract", side_effect=RuntimeError("graph exploded")):
            response = client.post("/extract", json={"html": "<p></p>"})
        assert response.status_code == 200
        assert response.json() == {"success": False, "data": None, "error": "graph exploded"}

    def test_invalid_body(self, client):
        response = client.post("/extract", json={"html": ["not", "a", "string"]})
        assert response.status_code == 422


class TestPageType:
    @pytest.mark.parametrize("url, page_type", [
        ("https://shop.example.com/orders", "order_list"),
        ("https://shop.example.com/orders/200012345", "order_detail"),
        ("https://shop.example.com/cart", "other"),
    ])
    def test_classification(self, client, url, page_type):
        response = client.post("/page-type", json={"url": url})
        assert response.status_code == 200
        assert response.json() == {"pageType": page_type, "url": url}

    def test_configured_orders_path(self):
        config = AppConfig.for_testing().model_copy(update={"orders_path": "/purchase-history"})
        client = TestClient(create_app(config))
        response = client.post("/page-type", json={"url": "https://shop.example.com/purchase-history"})
        assert response.json()["pageType"] == "order_list"
