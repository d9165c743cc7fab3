from typing import Any

from bs4 import BeautifulSoup, Tag

from order_extractor.services.page.base import DomElement, PageContext

_RAW_TEXT_TAGS = ("script", "style", "template")


class SoupElement(DomElement):
    """DomElement backed by a BeautifulSoup tag."""

    def __init__(self, tag: Tag):
        self._tag = tag

    @property
    def tag(self) -> str:
        return self._tag.name.lower()

    @property
    def text(self) -> str:
        if self.tag in _RAW_TEXT_TAGS:
            return "".join(str(s) for s in self._tag.find_all(string=True))
        return self._tag.get_text("\n", strip=True)

    def get_attribute(self, name: str) -> str | None:
        value = self._tag.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    def select(self, selector: str) -> list[DomElement]:
        return [SoupElement(t) for t in self._tag.select(selector)]

    @property
    def parent(self) -> DomElement | None:
        parent = self._tag.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return SoupElement(parent)

    @property
    def next_sibling(self) -> DomElement | None:
        sibling = self._tag.find_next_sibling()
        return SoupElement(sibling) if sibling is not None else None

    def __repr__(self) -> str:
        return f"<SoupElement {self.tag} class={self.get_attribute('class')!r}>"


class HtmlPageContext(PageContext):
    """Static page snapshot: serialized HTML plus the page globals captured with it.

    A snapshot cannot be interacted with, so clicks report failure and the
    DOM never changes.
    """

    def __init__(self, html: str, url: str = "", globals_: dict[str, Any] | None = None,
                 parser: str = "html.parser"):
        self._soup = BeautifulSoup(html or "", parser)
        self._url = url
        self._globals = dict(globals_ or {})

    @property
    def url(self) -> str:
        return self._url

    def read_global(self, name: str) -> Any:
        return self._globals.get(name)

    def query_dom(self, selector: str) -> list[DomElement]:
        return [SoupElement(t) for t in self._soup.select(selector)]

    @property
    def body(self) -> DomElement | None:
        return SoupElement(self._soup.body or self._soup)

    async def wait_for_mutation(self, timeout: float) -> bool:
        return False
