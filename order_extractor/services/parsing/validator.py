from collections.abc import Iterable

from order_extractor.core.order import Order, OrderItem, ParsedItem, ParsedOrder

MIN_NAME_LENGTH = 4


class OrderValidator:
    """Structural acceptance rules for parsed orders and items.

    Rejected elements are dropped; nothing here raises on bad input.
    """

    def __init__(self, filter_keywords: Iterable[str], max_quantity: int = 100):
        self.filter_keywords = list(filter_keywords)
        self.max_quantity = max_quantity

    def is_valid_order(self, order: ParsedOrder) -> bool:
        return bool(
            isinstance(order.order_number, str) and order.order_number.strip()
            and isinstance(order.order_date, str) and order.order_date.strip()
        )

    def is_valid_item(self, item: ParsedItem) -> bool:
        name = item.name or ""
        if len(name) < MIN_NAME_LENGTH:
            return False
        return not any(keyword in name for keyword in self.filter_keywords)

    def validate(self, parsed: Iterable[ParsedOrder]) -> list[Order]:
        return [self._to_order(p) for p in parsed if self.is_valid_order(p)]

    def _to_order(self, parsed: ParsedOrder) -> Order:
        return Order(
            order_number=parsed.order_number.strip(),
            order_date=parsed.order_date.strip(),
            order_total=_amount(parsed.order_total),
            tax=_amount(parsed.tax),
            delivery_charges=_amount(parsed.delivery_charges),
            tip=_amount(parsed.tip),
            items=[self._to_item(i) for i in parsed.items if self.is_valid_item(i)],
        )

    def _to_item(self, item: ParsedItem) -> OrderItem:
        quantity = item.quantity if 0 < item.quantity < self.max_quantity else 1
        return OrderItem(
            name=item.name,
            price=max(item.price, 0.0),
            quantity=quantity,
            product_url=item.product_url or "",
        )


def _amount(value):
    return value if value is not None and value >= 0 else None
