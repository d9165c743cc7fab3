"""Unit tests for OrderValidator."""
import pytest

from order_extractor.core.order import ParsedItem, ParsedOrder
from order_extractor.services.parsing.validator import OrderValidator


@pytest.fixture
def validator():
    return OrderValidator(["Sign in", "Lists & Registries"], max_quantity=100)


def parsed_order(**kwargs) -> ParsedOrder:
    defaults = {"order_number": "200012345", "order_date": "Mar 15, 2024"}
    return ParsedOrder(**{**defaults, **kwargs})


class TestOrderAcceptance:
    def test_accepts_number_and_date(self, validator):
        orders = validator.validate([parsed_order(order_total=12.5)])
        assert len(orders) == 1
        assert orders[0].order_number == "200012345"
        assert orders[0].order_total == 12.5

    @pytest.mark.parametrize("overrides", [
        {"order_date": None},
        {"order_date": "   "},
        {"order_number": None},
        {"order_number": ""},
    ])
    def test_rejects_missing_identity(self, validator, overrides):
        assert validator.validate([parsed_order(**overrides)]) == []

    def test_rejection_is_per_order(self, validator):
        orders = validator.validate([parsed_order(order_date=None), parsed_order(order_number="2")])
        assert [o.order_number for o in orders] == ["2"]

    def test_strips_identity_whitespace(self, validator):
        order = validator.validate([parsed_order(order_number=" 42 ", order_date=" Jan 2 ")])[0]
        assert order.order_number == "42"
        assert order.order_date == "Jan 2"

    def test_negative_amounts_become_none(self, validator):
        order = validator.validate([parsed_order(order_total=-1.0, tip=-2.0)])[0]
        assert order.order_total is None
        assert order.tip is None


class TestItemAcceptance:
    def test_short_names_are_dropped(self, validator):
        items = [ParsedItem(name="Tea"), ParsedItem(name="Green Tea")]
        order = validator.validate([parsed_order(items=items)])[0]
        assert [i.name for i in order.items] == ["Green Tea"]

    def test_keyword_names_are_dropped(self, validator):
        items = [ParsedItem(name="Sign in for deals"), ParsedItem(name="Dish Soap")]
        order = validator.validate([parsed_order(items=items)])[0]
        assert [i.name for i in order.items] == ["Dish Soap"]

    def test_order_with_no_items_survives(self, validator):
        order = validator.validate([parsed_order(items=[ParsedItem(name="")])])[0]
        assert order.items == []

    def test_item_values_are_clamped(self, validator):
        items = [ParsedItem(name="Dish Soap", price=-2.0, quantity=500, product_url="/ip/soap")]
        item = validator.validate([parsed_order(items=items)])[0].items[0]
        assert item.price == 0.0
        assert item.quantity == 1
        assert item.product_url == "/ip/soap"
