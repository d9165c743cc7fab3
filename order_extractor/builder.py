"""ExtractorBuilder: wires parsers, locator and strategy nodes based on AppConfig."""
from order_extractor.config import AppConfig, TreeShapeConfig
from order_extractor.nodes.dom_structured import DomStructuredNode
from order_extractor.nodes.dom_text import DomTextNode
from order_extractor.nodes.page_json import PageJsonNode
from order_extractor.nodes.report import ReportNode
from order_extractor.nodes.script_json import ScriptJsonNode
from order_extractor.nodes.tree_source import InitialStateNode, PageDataNode
from order_extractor.orchestrator import ExtractionOrchestrator
from order_extractor.services.locator import SourceLocator
from order_extractor.services.parsing.dom_items import DomItemExtractor
from order_extractor.services.parsing.fields import FieldResolver
from order_extractor.services.parsing.sanitizer import ProductNameSanitizer
from order_extractor.services.parsing.text import TextPatternParser
from order_extractor.services.parsing.tree import StructuredTreeParser
from order_extractor.services.parsing.validator import OrderValidator
from order_extractor.workflow import build_graph


class ExtractorBuilder:
    """Builds the extraction graph by wiring services and nodes from config."""

    def __init__(self, config: AppConfig):
        self.config = config

        # Instantiate services
        self._shapes = self._build_shapes()
        self._sanitizer = ProductNameSanitizer(config.patterns, config.filter_keywords)
        self._resolver = FieldResolver()
        self._text_parser = TextPatternParser(
            config.patterns, self._sanitizer, max_quantity=config.max_quantity,
        )
        self._tree_parser = StructuredTreeParser(
            config.field_names, self._sanitizer, self._resolver, max_quantity=config.max_quantity,
        )
        self._validator = OrderValidator(config.filter_keywords, max_quantity=config.max_quantity)
        self._locator = SourceLocator(config)
        self._dom_items = DomItemExtractor(
            config.selectors, self._text_parser, self._sanitizer,
            sibling_search_limit=config.sibling_search_limit,
        )

    @property
    def locator(self) -> SourceLocator:
        return self._locator

    @property
    def text_parser(self) -> TextPatternParser:
        return self._text_parser

    def build_nodes(self) -> dict:
        tree_args = dict(
            locator=self._locator, tree_parser=self._tree_parser,
            validator=self._validator, shapes=self._shapes,
        )
        dom_args = dict(
            locator=self._locator, text_parser=self._text_parser,
            dom_items=self._dom_items, validator=self._validator,
        )
        return {
            "initial_state": InitialStateNode(**tree_args),
            "page_data": PageDataNode(**tree_args),
            "script_json": ScriptJsonNode(**tree_args),
            "dom_structured": DomStructuredNode(
                **dom_args,
                expand_controls=self.config.selectors.expand_controls,
                expand_labels=self.config.expand_labels,
                settle_timeout=self.config.settle_timeout_seconds,
            ),
            "dom_text": DomTextNode(**dom_args),
            "page_json": PageJsonNode(
                **tree_args,
                shape_order=[self.config.initial_state_shape, self.config.page_data_shape],
            ),
            "report": ReportNode(),
        }

    def build(self):
        """Build and return a compiled LangGraph workflow."""
        return build_graph(self.build_nodes())

    def build_orchestrator(self) -> ExtractionOrchestrator:
        return ExtractionOrchestrator(self.build())

    def _build_shapes(self) -> dict[str, TreeShapeConfig]:
        shapes = self.config.tree_shapes
        for shape in (self.config.initial_state_shape, self.config.page_data_shape):
            if shape not in shapes:
                raise ValueError(f"Unknown tree shape: {shape}")
        return shapes
