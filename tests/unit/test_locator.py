"""Unit tests for SourceLocator."""
import pytest

from order_extractor.config import AppConfig
from order_extractor.services.locator import SourceKind, SourceLocator
from order_extractor.services.page.html import HtmlPageContext

FULL_PAGE = """\
<html><body>
  <script id="__NEXT_DATA__" type="application/json">{"props": {"pageProps": {"orders": []}}}</script>
  <script>window.__WML_REDUX_INITIAL_STATE__ = {"orders": {"data": []}};window.other = 1;</script>
  <script>console.log("no state here")</script>
  <div id="list">
    <div class="order-card"><span>Order #200012345</span><span>Mar 15, 2024</span></div>
    <div class="order-card"><span>Order #200067890</span><span>Apr 2, 2024</span></div>
  </div>
  <div data-react-props='{"orders": []}'></div>
</body></html>
"""


@pytest.fixture
def config():
    return AppConfig.for_testing()


@pytest.fixture
def locator(config):
    return SourceLocator(config)


@pytest.fixture
def page():
    return HtmlPageContext(
        FULL_PAGE,
        globals_={"__WML_REDUX_INITIAL_STATE__": {"orders": {}}, "__NEXT_DATA__": {"props": {}}},
    )


class TestSources:
    def test_priority_order(self, locator, page):
        kinds = [s.kind for s in locator.sources(page)]
        assert kinds[:2] == [SourceKind.TREE, SourceKind.TREE]
        # Each kind appears as one contiguous run, most structured first
        runs = [k for i, k in enumerate(kinds) if i == 0 or kinds[i - 1] != k]
        assert runs == [SourceKind.TREE, SourceKind.SCRIPT_JSON, SourceKind.DOM, SourceKind.TEXT, SourceKind.PAGE_JSON]

    def test_globals(self, locator, page):
        state = locator.initial_state(page)
        assert state.payload == {"orders": {}}
        assert state.shape == "state"
        assert locator.page_data(page).shape == "page_props"

    def test_missing_globals(self, locator):
        page = HtmlPageContext("<html></html>")
        assert locator.initial_state(page) is None
        assert locator.page_data(page) is None


class TestScriptSources:
    def test_id_and_assignment_forms(self, locator, page):
        sources = locator.script_sources(page)
        assert [s.shape for s in sources] == ["page_props", "state"]
        assert sources[0].payload == '{"props": {"pageProps": {"orders": []}}}'
        assert sources[1].payload.startswith('{"orders": {"data": []}};')

    def test_marker_mentioned_without_assignment(self, locator):
        page = HtmlPageContext("<script>if (window.__NEXT_DATA__) { boot(); }</script>")
        assert locator.script_sources(page) == []


class TestContainerSources:
    def test_one_source_per_matching_selector(self, locator, page):
        sources = locator.order_container_sources(page)
        assert [s.origin for s in sources] == [".order-card"]
        assert len(sources[0].payload) == 2


class TestTextSources:
    def test_single_order_blocks_then_body(self, locator, page):
        blocks, body = locator.text_sources(page)
        assert blocks.origin == "blocks"
        assert len(blocks.payload) == 2
        assert all(text.count("Order #") == 1 for text in blocks.payload)
        assert body.origin == "body"
        assert "Order #200067890" in body.payload

    def test_oversized_blocks_are_skipped(self):
        config = AppConfig.for_testing().model_copy(update={"block_text_limit": 20})
        page = HtmlPageContext("<div>Order #200012345 placed Mar 15, 2024</div>")
        sources = SourceLocator(config).text_sources(page)
        assert [s.origin for s in sources] == ["body"]


class TestPageJsonSources:
    def test_json_scripts_and_props_attributes(self, locator, page):
        sources = locator.page_json_sources(page)
        assert [s.origin for s in sources] == ["json-script[0]", "attr:data-react-props"]
        assert sources[1].payload == '{"orders": []}'
