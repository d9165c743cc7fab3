import asyncio
from abc import ABC, abstractmethod
from typing import Any


class DomElement(ABC):
    """Read-only view of one element on the page."""

    @property
    @abstractmethod
    def tag(self) -> str:
        """Lower-case tag name."""
        ...

    @property
    @abstractmethod
    def text(self) -> str:
        """Visible text, one line per text run."""
        ...

    @abstractmethod
    def get_attribute(self, name: str) -> str | None:
        ...

    @abstractmethod
    def select(self, selector: str) -> list["DomElement"]:
        """Descendants matching a CSS selector, in document order."""
        ...

    @property
    @abstractmethod
    def parent(self) -> "DomElement | None":
        ...

    @property
    @abstractmethod
    def next_sibling(self) -> "DomElement | None":
        """Next element sibling, skipping text nodes."""
        ...

    def select_one(self, selector: str) -> "DomElement | None":
        matches = self.select(selector)
        return matches[0] if matches else None

    def click(self) -> bool:
        """Simulate a click. Returns False when the page cannot be interacted with."""
        return False


class PageContext(ABC):
    """Read-only capability over the page an extraction runs against.

    Global objects and the DOM are owned by the page; they may change between
    calls, so nothing read here is cached by the pipeline.
    """

    @abstractmethod
    def read_global(self, name: str) -> Any:
        """Return the named global page object, or None when it is not defined."""
        ...

    @abstractmethod
    def query_dom(self, selector: str) -> list[DomElement]:
        """Elements matching a CSS selector across the whole document."""
        ...

    @property
    def url(self) -> str:
        return ""

    @property
    def body(self) -> DomElement | None:
        matches = self.query_dom("body")
        return matches[0] if matches else None

    async def wait_for_mutation(self, timeout: float) -> bool:
        """Wait up to `timeout` seconds for the DOM to change.

        Returns True if a change was observed. The default implementation can
        observe nothing, so it just sleeps for the bound.
        """
        if timeout > 0:
            await asyncio.sleep(timeout)
        return False
