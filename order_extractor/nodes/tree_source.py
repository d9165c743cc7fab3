from abc import abstractmethod
from typing import Any

from order_extractor.config import TreeShapeConfig
from order_extractor.core.order import Order
from order_extractor.nodes.base import AbstractStrategyNode
from order_extractor.services.locator import Source, SourceLocator
from order_extractor.services.page.base import PageContext
from order_extractor.services.parsing.tree import StructuredTreeParser
from order_extractor.services.parsing.validator import OrderValidator


class AbstractTreeNode(AbstractStrategyNode):
    """Strategy whose sources are nested state trees."""

    def __init__(
        self,
        locator: SourceLocator,
        tree_parser: StructuredTreeParser,
        validator: OrderValidator,
        shapes: dict[str, TreeShapeConfig],
    ):
        self.locator = locator
        self.tree_parser = tree_parser
        self.validator = validator
        self.shapes = shapes

    def orders_from_tree(self, tree: Any, shape: str) -> list[Order]:
        parsed = self.tree_parser.parse(tree, self.shapes[shape])
        if parsed is None:
            return []
        return self.validator.validate(parsed)


class AbstractGlobalTreeNode(AbstractTreeNode):
    """Reads one page global and parses it as a state tree."""

    def run(self, page: PageContext) -> list[Order]:
        source = self.locate(page)
        if source is None:
            return []
        return self.orders_from_tree(source.payload, source.shape)

    @abstractmethod
    def locate(self, page: PageContext) -> Source | None:
        ...


class InitialStateNode(AbstractGlobalTreeNode):
    name = "initial_state"

    def locate(self, page: PageContext) -> Source | None:
        return self.locator.initial_state(page)


class PageDataNode(AbstractGlobalTreeNode):
    name = "page_data"

    def locate(self, page: PageContext) -> Source | None:
        return self.locator.page_data(page)
