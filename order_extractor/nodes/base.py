import logging
from abc import ABC, abstractmethod

import opik

from order_extractor.core.extraction_state import ExtractionState
from order_extractor.core.order import Order
from order_extractor.services.page.base import PageContext

logger = logging.getLogger("order_extractor.nodes")


class BaseNode(ABC):
    """Base class for all workflow nodes.

    Subclasses must set `name` as a class variable (str) and implement `__call__`.
    """

    name: str  # Class variable, set by each subclass (e.g. name = "script_json")

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if not getattr(cls, 'name', None) and 'Abstract' not in cls.__name__:
            raise TypeError(f"{cls.__name__} must define a 'name' class variable")

    @abstractmethod
    def __call__(self, state: ExtractionState) -> dict:
        """Execute node logic. Returns a dict that updates the state."""
        ...


class AbstractStrategyNode(BaseNode):
    """One extraction attempt over one kind of source.

    Failures never escape: an exception is recorded in `strategy_errors` and
    the workflow moves on to the next strategy.
    """

    @opik.track(name="strategy_node")
    def __call__(self, state: ExtractionState) -> dict:
        try:
            orders = self.run(state["page"])
        except Exception as e:
            return self.failed(state, e)
        return self.finished(state, orders)

    @abstractmethod
    def run(self, page: PageContext) -> list[Order]:
        """Validated orders from this strategy's sources; empty when nothing matched."""
        ...

    def finished(self, state: ExtractionState, orders: list[Order]) -> dict:
        update = {"trajectory": state.get("trajectory", []) + [self.name]}
        if orders:
            logger.info(f"{self.name}: extracted {len(orders)} orders")
            update.update({"orders": orders, "source": self.name})
        else:
            logger.debug(f"{self.name}: no orders")
        return update

    def failed(self, state: ExtractionState, error: Exception) -> dict:
        message = f"{type(self).__name__} failed: {error}"
        logger.warning(message)
        return {
            "strategy_errors": state.get("strategy_errors", []) + [message],
            "trajectory": state.get("trajectory", []) + [self.name],
        }
