import logging

import opik

from order_extractor.nodes.base import BaseNode
from order_extractor.core.extraction_state import ExtractionState

logger = logging.getLogger("order_extractor.nodes")


class ReportNode(BaseNode):
    name = "report"

    @opik.track(name="report_node")
    def __call__(self, state: ExtractionState) -> dict:
        # Only validated orders count as success; page content alone never does
        if state.get("orders"):
            final_status = "found"
            logger.info(f"Extraction found {len(state['orders'])} orders via {state.get('source')}")
        else:
            final_status = "not_found"
            logger.info(f"Extraction found nothing after {len(state.get('trajectory', []))} strategies")

        return {
            "final_status": final_status,
            "trajectory": state.get("trajectory", []) + ["report"],
        }
