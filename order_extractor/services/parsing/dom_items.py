import logging

from order_extractor.config import SelectorConfig
from order_extractor.core.order import ParsedItem
from order_extractor.services.page.base import DomElement, PageContext
from order_extractor.services.parsing.sanitizer import ProductNameSanitizer
from order_extractor.services.parsing.text import TextPatternParser

logger = logging.getLogger("order_extractor.dom")


def flatten(text: str) -> str:
    return " ".join((text or "").split())


class DomItemExtractor:
    """Reads order items out of item container elements."""

    def __init__(
        self,
        selectors: SelectorConfig,
        text_parser: TextPatternParser,
        sanitizer: ProductNameSanitizer,
        sibling_search_limit: int = 3,
    ):
        self.selectors = selectors
        self.text_parser = text_parser
        self.sanitizer = sanitizer
        self.sibling_search_limit = sibling_search_limit

    def items_in(self, element: DomElement) -> list[ParsedItem]:
        """Items under `element`, using the first item selector that yields any."""
        for selector in self.selectors.item_containers:
            item_elements = element.select(selector)
            if not item_elements:
                continue

            items = [item for item in map(self._read_item, item_elements) if item is not None]
            if items:
                logger.debug(f"Found {len(items)} items with selector: {selector}")
                return items
        return []

    def items_near(self, order_element: DomElement) -> list[ParsedItem]:
        """Items inside the order element, else its parent, else its next siblings."""
        items = self.items_in(order_element)
        if items:
            return items

        parent = order_element.parent
        if parent is not None:
            items = self.items_in(parent)
            if items:
                return items

        sibling = order_element.next_sibling
        for _ in range(self.sibling_search_limit):
            if sibling is None:
                break
            items = self.items_in(sibling)
            if items:
                return items
            sibling = sibling.next_sibling
        return []

    def items_on_page(self, page: PageContext) -> list[ParsedItem]:
        """Items anywhere on the page, parsed from each container's full text."""
        for selector in self.selectors.item_containers:
            items = []
            for element in page.query_dom(selector):
                item = self.text_parser.parse_element_text(element.text)
                if item is not None:
                    item.product_url = self.product_url(element)
                    items.append(item)
            if items:
                return items
        return []

    def product_url(self, element: DomElement) -> str:
        for selector in self.selectors.product_link:
            link = element.select_one(selector)
            if link is not None and link.get_attribute("href"):
                return link.get_attribute("href")
        return ""

    def _read_item(self, element: DomElement) -> ParsedItem | None:
        text = element.text
        name = self._name_from_elements(element)
        if not name:
            name = self.sanitizer.extract_name_from_text(text)
        if not name:
            return None

        flat = flatten(text)
        return ParsedItem(
            name=name,
            price=self.text_parser.extract_price(flat),
            quantity=self.text_parser.extract_quantity(flat),
            product_url=self.product_url(element),
        )

    def _name_from_elements(self, element: DomElement) -> str:
        for selector in self.selectors.product_name:
            name_element = element.select_one(selector)
            if name_element is not None and name_element.text:
                return self.sanitizer.sanitize(flatten(name_element.text))
        return ""
