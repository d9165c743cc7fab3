import logging
from urllib.parse import urlparse

from order_extractor.core.order import Order, ParsedOrder
from order_extractor.nodes.dom_structured import AbstractDomNode
from order_extractor.services.page.base import PageContext

logger = logging.getLogger("order_extractor.nodes")


class DomTextNode(AbstractDomNode):
    """Free-text fallback: order-bearing text blocks, then the page body as a single order."""
    name = "dom_text"

    def run(self, page: PageContext) -> list[Order]:
        for source in self.locator.text_sources(page):
            if source.origin == "blocks":
                parsed = self.parse_blocks(source.payload)
            else:
                parsed = self.parse_body(page, source.payload)

            orders = self.validator.validate(self.dedupe(parsed))
            if orders:
                return orders
        return []

    def parse_blocks(self, blocks: list[str]) -> list[ParsedOrder]:
        parsed = []
        for text in blocks:
            result = self.text_parser.parse(text)
            if result.order_number and result.order_date:
                parsed.append(self.build_order(result, result.items))
        return parsed

    def parse_body(self, page: PageContext, text: str) -> list[ParsedOrder]:
        result = self.text_parser.parse(text)

        detail = self.text_parser.patterns.detail_url.search(urlparse(page.url or "").path)
        if detail:
            order_number = detail.group(1)
        else:
            numbers = {m.group(1) for m in self.text_parser.patterns.order_number.finditer(text)}
            if len(numbers) != 1:
                # A listing page; its body text would blend several orders
                return []
            order_number = result.order_number

        items = self.dom_items.items_on_page(page) or result.items
        return [self.build_order(result, items, order_number=order_number)]
