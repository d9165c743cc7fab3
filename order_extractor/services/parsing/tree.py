"""Order lookup over embedded page-state trees.

Known layouts are found through exact key paths, tried in priority order.
When none of them resolves, a bounded fuzzy search looks for order-ish key
names so that renamed or reshuffled layouts still have a chance.
"""
import logging
from collections.abc import Mapping
from typing import Any

import opik

from order_extractor.config import FieldNameConfig, TreeShapeConfig
from order_extractor.core.order import ParsedItem, ParsedOrder
from order_extractor.services.parsing.fields import FieldResolver
from order_extractor.services.parsing.sanitizer import ProductNameSanitizer

logger = logging.getLogger("order_extractor.tree")


class StructuredTreeParser:
    def __init__(
        self,
        fields: FieldNameConfig,
        sanitizer: ProductNameSanitizer,
        resolver: FieldResolver | None = None,
        max_quantity: int = 100,
    ):
        self.fields = fields
        self.sanitizer = sanitizer
        self.resolver = resolver or FieldResolver()
        self.max_quantity = max_quantity

    @opik.track(name="tree_parse")
    def parse(self, tree: Any, shape: TreeShapeConfig) -> list[ParsedOrder] | None:
        """Parsed orders from the tree, or None when no order array is found."""
        raw_orders = self.find_order_array(tree, shape)
        if raw_orders is None:
            return None
        return self.parse_order_array(raw_orders)

    def find_order_array(self, tree: Any, shape: TreeShapeConfig) -> list | None:
        if not isinstance(tree, Mapping):
            return None

        for path in shape.key_paths:
            found = self._resolve_path(tree, path, shape.nested_array_fields)
            if found is not None:
                logger.debug(f"Order array found at {'.'.join(path)} ({len(found)} entries)")
                return found

        root = self.resolver.get_path(tree, shape.search_root)
        found = self.fuzzy_search(root, shape.search_terms)
        if found is not None:
            logger.debug(f"Order array found by key search ({len(found)} entries)")
        return found

    def _resolve_path(self, tree: Mapping, path: list[str], nested_fields: list[str]) -> list | None:
        value = self.resolver.get_path(tree, path)
        if isinstance(value, list):
            return value
        if isinstance(value, Mapping):
            for field in nested_fields:
                nested = value.get(field)
                if isinstance(nested, list):
                    return nested
        return None

    @staticmethod
    def _matches(key: Any, terms: list[str]) -> bool:
        lowered = str(key).lower()
        return any(term in lowered for term in terms)

    def fuzzy_search(self, root: Any, terms: list[str]) -> list | None:
        """First list bound to an order-ish key, at most one level below `root`."""
        if not isinstance(root, Mapping):
            return None

        found = self._search_keys(root, terms)
        if found is not None:
            return found

        for value in root.values():
            if isinstance(value, Mapping):
                found = self._search_keys(value, terms, descend=False)
                if found is not None:
                    return found
        return None

    def _search_keys(self, obj: Mapping, terms: list[str], descend: bool = True) -> list | None:
        for key, value in obj.items():
            if not self._matches(key, terms):
                continue
            if isinstance(value, list):
                return value
            if descend and isinstance(value, Mapping):
                for sub_value in value.values():
                    if isinstance(sub_value, list):
                        return sub_value
        return None

    def parse_order_array(self, raw_orders: list) -> list[ParsedOrder]:
        parsed = [self.parse_order(o) for o in raw_orders if isinstance(o, Mapping)]
        logger.debug(f"Parsed {len(parsed)} candidate orders out of {len(raw_orders)} entries")
        return parsed

    def parse_order(self, obj: Mapping) -> ParsedOrder:
        resolve_str, resolve_num = self.resolver.resolve_string, self.resolver.resolve_number
        f = self.fields
        return ParsedOrder(
            order_number=resolve_str(obj, f.order_number),
            order_date=resolve_str(obj, f.order_date),
            order_total=_non_negative(resolve_num(obj, f.order_total)),
            tax=_non_negative(resolve_num(obj, f.tax)),
            delivery_charges=_non_negative(resolve_num(obj, f.delivery_charges)),
            tip=_non_negative(resolve_num(obj, f.tip)),
            items=self.extract_items(obj),
        )

    def extract_items(self, obj: Mapping) -> list[ParsedItem]:
        for field in self.fields.item_containers:
            raw_items = obj.get(field)
            if isinstance(raw_items, list):
                return [item for item in map(self.parse_item, raw_items) if item is not None]
        return []

    def parse_item(self, raw: Any) -> ParsedItem | None:
        if not isinstance(raw, Mapping):
            return None

        name = self.resolver.resolve_string(raw, self.fields.item_name)
        if not name:
            return None

        quantity = self.resolver.resolve_number(raw, self.fields.item_quantity)
        if quantity is None or not 0 < quantity < self.max_quantity:
            quantity = 1

        return ParsedItem(
            name=self.sanitizer.sanitize(name),
            price=_non_negative(self.resolver.resolve_number(raw, self.fields.item_price)) or 0.0,
            quantity=int(quantity) or 1,
            product_url=self.resolver.resolve_string(raw, self.fields.item_url) or "",
        )


def _non_negative(value: float | None) -> float | None:
    if value is None or value < 0:
        return None
    return value
