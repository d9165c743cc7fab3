"""Unit tests for the HTTP payload models and page classification."""
import pytest

from order_extractor.core.snapshot import PageSnapshot, PageTypeResponse, classify_page


class TestClassifyPage:
    @pytest.mark.parametrize("url, expected", [
        ("https://shop.example.com/orders", "order_list"),
        ("https://shop.example.com/orders/", "order_list"),
        ("https://shop.example.com/orders?page=2", "order_list"),
        ("https://shop.example.com/orders/200012345", "order_detail"),
        ("https://shop.example.com/orders/200012345?tab=items", "order_detail"),
        ("https://shop.example.com/ordersummary", "other"),
        ("https://shop.example.com/account/orders", "other"),
        ("https://shop.example.com/", "other"),
        ("", "other"),
    ])
    def test_classify(self, url, expected):
        assert classify_page(url) == expected

    def test_custom_orders_path(self):
        assert classify_page("https://shop.example.com/account/purchases/7", "/account/purchases") == "order_detail"


class TestPayloads:
    def test_snapshot_globals_alias(self):
        snapshot = PageSnapshot.model_validate({"html": "<p></p>", "globals": {"__NEXT_DATA__": {}}})
        assert snapshot.page_globals == {"__NEXT_DATA__": {}}
        assert snapshot.url == ""

    def test_page_type_wire_key(self):
        response = PageTypeResponse(page_type="order_list", url="https://shop.example.com/orders")
        assert response.model_dump(by_alias=True) == {"pageType": "order_list", "url": "https://shop.example.com/orders"}
