import json
import logging

from order_extractor.core.order import Order
from order_extractor.nodes.tree_source import AbstractTreeNode
from order_extractor.services.page.base import PageContext

logger = logging.getLogger("order_extractor.nodes")


class PageJsonNode(AbstractTreeNode):
    """Last resort: any JSON the page carries, tried against every known tree shape."""
    name = "page_json"

    def __init__(self, *args, shape_order: list[str], **kwargs):
        super().__init__(*args, **kwargs)
        self.shape_order = shape_order

    def run(self, page: PageContext) -> list[Order]:
        for source in self.locator.page_json_sources(page):
            try:
                tree = json.loads(source.payload)
            except json.JSONDecodeError as e:
                logger.debug(f"Skipping malformed JSON in {source.origin}: {e}")
                continue

            for shape in self.shape_order:
                orders = self.orders_from_tree(tree, shape)
                if orders:
                    return orders
        return []
