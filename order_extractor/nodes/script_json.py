import json
import logging
from typing import Any

from order_extractor.core.order import Order
from order_extractor.nodes.tree_source import AbstractTreeNode
from order_extractor.services.page.base import PageContext

logger = logging.getLogger("order_extractor.nodes")

_decoder = json.JSONDecoder()


def decode_json_prefix(text: str) -> Any:
    """Decode the JSON value at the start of `text`, ignoring whatever follows it."""
    value, _ = _decoder.raw_decode(text.lstrip())
    return value


class ScriptJsonNode(AbstractTreeNode):
    name = "script_json"

    def run(self, page: PageContext) -> list[Order]:
        for source in self.locator.script_sources(page):
            try:
                tree = decode_json_prefix(source.payload)
            except json.JSONDecodeError as e:
                logger.debug(f"Skipping malformed JSON in {source.origin}: {e}")
                continue

            orders = self.orders_from_tree(tree, source.shape)
            if orders:
                return orders
        return []
