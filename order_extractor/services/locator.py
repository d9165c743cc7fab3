"""Enumerates the raw-data sources a page exposes, most structured first.

The locator never parses anything: JSON stays text and DOM stays elements,
so a malformed source fails inside the strategy that consumes it.
"""
import logging
import re
from collections.abc import Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from order_extractor.config import AppConfig
from order_extractor.services.page.base import PageContext

logger = logging.getLogger("order_extractor.locator")


class SourceKind(str, Enum):
    TREE = "tree"
    SCRIPT_JSON = "script_json"
    DOM = "dom"
    TEXT = "text"
    PAGE_JSON = "page_json"


class Source(BaseModel):
    """One candidate piece of raw material and where it came from."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: SourceKind
    origin: str
    payload: Any
    shape: str | None = None


class SourceLocator:
    def __init__(self, config: AppConfig):
        self.config = config
        self.selectors = config.selectors
        self.patterns = config.patterns
        self._markers = [
            (config.initial_state_global, config.initial_state_shape),
            (config.page_data_global, config.page_data_shape),
        ]

    def sources(self, page: PageContext) -> Iterator[Source]:
        """Every available source, in strategy priority order."""
        for source in (self.initial_state(page), self.page_data(page)):
            if source is not None:
                yield source
        yield from self.script_sources(page)
        yield from self.order_container_sources(page)
        yield from self.text_sources(page)
        yield from self.page_json_sources(page)

    def initial_state(self, page: PageContext) -> Source | None:
        return self._global_source(page, self.config.initial_state_global, self.config.initial_state_shape)

    def page_data(self, page: PageContext) -> Source | None:
        return self._global_source(page, self.config.page_data_global, self.config.page_data_shape)

    def _global_source(self, page: PageContext, name: str, shape: str) -> Source | None:
        value = page.read_global(name)
        if value is None:
            return None
        logger.debug(f"Found page global {name}")
        return Source(kind=SourceKind.TREE, origin=f"global:{name}", payload=value, shape=shape)

    def script_sources(self, page: PageContext) -> list[Source]:
        """Inline scripts carrying one of the page globals as JSON text."""
        found = []
        for index, script in enumerate(page.query_dom(self.selectors.inline_scripts)):
            text = script.text
            if not text:
                continue
            for marker, shape in self._markers:
                if script.get_attribute("id") == marker:
                    found.append(Source(
                        kind=SourceKind.SCRIPT_JSON,
                        origin=f"script#{marker}",
                        payload=text.strip(),
                        shape=shape,
                    ))
                elif marker in text:
                    match = re.search(rf"window\.{re.escape(marker)}\s*=\s*", text)
                    if match:
                        found.append(Source(
                            kind=SourceKind.SCRIPT_JSON,
                            origin=f"script[{index}]:{marker}",
                            payload=text[match.end():],
                            shape=shape,
                        ))
        return found

    def order_container_sources(self, page: PageContext) -> list[Source]:
        """One source per order-container selector that matches anything."""
        found = []
        for selector in self.selectors.order_containers:
            elements = page.query_dom(selector)
            if elements:
                logger.debug(f"Found {len(elements)} elements with selector: {selector}")
                found.append(Source(kind=SourceKind.DOM, origin=selector, payload=elements))
        return found

    def text_sources(self, page: PageContext) -> list[Source]:
        """Order-number-bearing text blocks, then the whole body text."""
        found = []
        blocks = list(self._order_text_blocks(page))
        if blocks:
            found.append(Source(kind=SourceKind.TEXT, origin="blocks", payload=blocks))

        body = page.body
        if body is not None and body.text:
            found.append(Source(kind=SourceKind.TEXT, origin="body", payload=body.text))
        return found

    def _order_text_blocks(self, page: PageContext) -> Iterator[str]:
        selector = ", ".join(self.selectors.text_blocks)
        for element in page.query_dom(selector):
            text = element.text
            if not text or len(text) >= self.config.block_text_limit:
                continue
            numbers = {m.group(1) for m in self.patterns.order_number_block.finditer(text)}
            # Blocks spanning several orders are left to their inner blocks
            if len(numbers) == 1:
                yield text

    def page_json_sources(self, page: PageContext) -> list[Source]:
        """JSON script bodies and JSON-valued props attributes."""
        found = []
        for index, script in enumerate(page.query_dom(self.selectors.json_scripts)):
            if script.text and script.text.strip():
                found.append(Source(
                    kind=SourceKind.PAGE_JSON,
                    origin=f"json-script[{index}]",
                    payload=script.text,
                ))

        attributes = self.selectors.page_json_attributes
        if attributes:
            selector = ", ".join(f"[{attr}]" for attr in attributes)
            for element in page.query_dom(selector):
                for attr in attributes:
                    value = element.get_attribute(attr)
                    if value:
                        found.append(Source(kind=SourceKind.PAGE_JSON, origin=f"attr:{attr}", payload=value))
        return found
