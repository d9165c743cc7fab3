"""Unit tests for the BeautifulSoup-backed page context."""
import asyncio

import pytest

from order_extractor.services.page.html import HtmlPageContext

HTML = """\
<html><body>
  <script id="__NEXT_DATA__" type="application/json">{"props": {"pageProps": {}}}</script>
  <section class="orders">
    <div class="order-card big" data-testid="order-1">
      <h3>Order #200012345</h3>
      <a href="/ip/milk/1">Great Value Whole Milk</a>
    </div>
    text between cards
    <div class="order-card" data-testid="order-2"><h3>Order #200067890</h3></div>
  </section>
</body></html>
"""


@pytest.fixture
def page():
    return HtmlPageContext(HTML, url="https://shop.example.com/orders", globals_={"__APP__": {"a": 1}})


class TestHtmlPageContext:
    def test_url_and_globals(self, page):
        assert page.url == "https://shop.example.com/orders"
        assert page.read_global("__APP__") == {"a": 1}
        assert page.read_global("__MISSING__") is None

    def test_query_dom(self, page):
        cards = page.query_dom(".order-card")
        assert [c.get_attribute("data-testid") for c in cards] == ["order-1", "order-2"]

    def test_body_text_excludes_script_contents(self, page):
        assert "Order #200012345" in page.body.text
        assert "pageProps" not in page.body.text

    def test_no_mutation_on_a_snapshot(self, page):
        assert asyncio.run(page.wait_for_mutation(0.01)) is False

    def test_empty_html(self):
        page = HtmlPageContext("")
        assert page.query_dom("div") == []
        assert page.body.text == ""


class TestSoupElement:
    def test_text_is_line_per_run(self, page):
        card = page.query_dom('[data-testid="order-1"]')[0]
        assert card.text.splitlines() == ["Order #200012345", "Great Value Whole Milk"]

    def test_script_text_is_raw(self, page):
        script = page.query_dom("script")[0]
        assert script.text == '{"props": {"pageProps": {}}}'

    def test_multi_valued_attribute_is_joined(self, page):
        assert page.query_dom(".big")[0].get_attribute("class") == "order-card big"

    def test_nested_select(self, page):
        card = page.query_dom(".order-card")[0]
        assert card.select_one('a[href*="/ip/"]').get_attribute("href") == "/ip/milk/1"
        assert card.select_one("table") is None

    def test_parent_and_sibling(self, page):
        first, second = page.query_dom(".order-card")
        assert first.parent.tag == "section"
        assert first.next_sibling.get_attribute("data-testid") == second.get_attribute("data-testid")
        assert second.next_sibling is None

    def test_document_root_has_no_parent(self, page):
        assert page.query_dom("html")[0].parent is None

    def test_click_is_not_supported(self, page):
        assert page.query_dom("a")[0].click() is False
