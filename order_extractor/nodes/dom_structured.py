import asyncio
import logging

import opik

from order_extractor.core.extraction_state import ExtractionState
from order_extractor.core.order import Order, ParsedItem, ParsedOrder, TextParseResult
from order_extractor.nodes.base import AbstractStrategyNode
from order_extractor.services.locator import SourceLocator
from order_extractor.services.page.base import DomElement, PageContext
from order_extractor.services.parsing.dom_items import DomItemExtractor
from order_extractor.services.parsing.text import TextPatternParser
from order_extractor.services.parsing.validator import OrderValidator

logger = logging.getLogger("order_extractor.nodes")


class AbstractDomNode(AbstractStrategyNode):
    """Strategy that reads orders out of rendered page content."""

    def __init__(
        self,
        locator: SourceLocator,
        text_parser: TextPatternParser,
        dom_items: DomItemExtractor,
        validator: OrderValidator,
    ):
        self.locator = locator
        self.text_parser = text_parser
        self.dom_items = dom_items
        self.validator = validator

    @staticmethod
    def build_order(parsed: TextParseResult, items: list[ParsedItem],
                    order_number: str | None = None) -> ParsedOrder:
        return ParsedOrder(
            order_number=order_number or parsed.order_number,
            order_date=parsed.order_date,
            order_total=parsed.order_total,
            items=items,
        )

    @staticmethod
    def dedupe(parsed: list[ParsedOrder]) -> list[ParsedOrder]:
        seen, unique = set(), []
        for order in parsed:
            if order.order_number in seen:
                continue
            seen.add(order.order_number)
            unique.append(order)
        return unique


class DomStructuredNode(AbstractDomNode):
    """Order containers found by selector, after one attempt at expanding them."""
    name = "dom_structured"

    def __init__(self, *args, expand_controls: list[str], expand_labels: list[str],
                 settle_timeout: float, **kwargs):
        super().__init__(*args, **kwargs)
        self.expand_controls = expand_controls
        self.expand_labels = expand_labels
        self.settle_timeout = settle_timeout

    @opik.track(name="dom_structured_node")
    async def __call__(self, state: ExtractionState) -> dict:
        page = state["page"]
        clicks = 0
        try:
            clicks = self.expand(page)
            if clicks:
                await self.settle(page)
            orders = self.run(page)
        except Exception as e:
            update = self.failed(state, e)
        else:
            update = self.finished(state, orders)
        update["expansion_clicks"] = clicks
        return update

    def expand(self, page: PageContext) -> int:
        """Click every visible expand affordance once. Returns the number of clicks that took."""
        if not self.expand_controls or not self.expand_labels:
            return 0

        clicks = 0
        for control in page.query_dom(", ".join(self.expand_controls)):
            text = control.text
            if not any(label in text for label in self.expand_labels):
                continue
            try:
                if control.click():
                    clicks += 1
            except Exception as e:
                logger.debug(f"Expand click failed on {control!r}: {e}")
        if clicks:
            logger.debug(f"Clicked {clicks} expand controls")
        return clicks

    async def settle(self, page: PageContext) -> bool:
        """Bounded wait for the page to react to the expand clicks."""
        if self.settle_timeout <= 0:
            return False
        try:
            changed = await asyncio.wait_for(page.wait_for_mutation(self.settle_timeout), self.settle_timeout)
        except asyncio.TimeoutError:
            changed = False
        if not changed:
            logger.debug(f"No DOM change within {self.settle_timeout}s, scanning as is")
        return changed

    def run(self, page: PageContext) -> list[Order]:
        for source in self.locator.order_container_sources(page):
            parsed = [p for p in map(self.parse_container, source.payload) if p is not None]
            orders = self.validator.validate(self.dedupe(parsed))
            if orders:
                logger.debug(f"Order containers matched by {source.origin}")
                return orders
        return []

    def parse_container(self, element: DomElement) -> ParsedOrder | None:
        parsed = self.text_parser.parse(element.text)
        if not parsed.order_number or not parsed.order_date:
            return None

        items = self.dom_items.items_near(element) or parsed.items
        logger.debug(f"Order {parsed.order_number}: {len(items)} items")
        return self.build_order(parsed, items)
