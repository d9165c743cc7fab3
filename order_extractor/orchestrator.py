"""Entry point: extract order data from the current page context."""
import asyncio
import logging

import opik

from order_extractor.core.extraction_state import ExtractionState
from order_extractor.core.order import OrderData
from order_extractor.services.page.base import PageContext

logger = logging.getLogger("order_extractor.orchestrator")


class ExtractionOrchestrator:
    """Runs the compiled strategy graph against one page.

    Returns OrderData when some strategy produced validated orders and None
    when every strategy came up empty. Calls against the same page must be
    serialized by the caller.
    """

    def __init__(self, graph):
        self.graph = graph

    async def arun(self, page: PageContext) -> ExtractionState:
        """Run the workflow and return the final state (trajectory, errors, status)."""
        logger.info(f"Starting order extraction for {page.url or '<unknown url>'}")
        return await self.graph.ainvoke({
            "page": page,
            "trajectory": [],
            "strategy_errors": [],
            "expansion_clicks": 0,
        })

    async def aextract(self, page: PageContext) -> OrderData | None:
        state = await self.arun(page)
        if state.get("final_status") != "found":
            return None
        return OrderData(orders=state["orders"])

    @opik.track(name="extract_order_data")
    def extract(self, page: PageContext) -> OrderData | None:
        """Blocking variant of `aextract`; must not be called from a running event loop."""
        return asyncio.run(self.aextract(page))
