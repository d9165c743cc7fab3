"""LangGraph workflow definition for order extraction.

Each strategy is a node. After every strategy a conditional edge either stops
(validated orders found) or moves on to the next, less structured strategy.
"""
from typing import Callable

from langgraph.graph import StateGraph, END

from order_extractor.core.extraction_state import ExtractionState

# Strategy order, most structured first
STRATEGY_ORDER = [
    "initial_state",
    "page_data",
    "script_json",
    "dom_structured",
    "dom_text",
    "page_json",
]


def has_orders(state: ExtractionState) -> bool:
    return bool(state.get("orders"))


def continue_or_report(next_node: str) -> Callable[[ExtractionState], str]:
    """Route after a strategy: stop on success, otherwise try `next_node`."""
    def route(state: ExtractionState) -> str:
        if has_orders(state):
            return "report"
        return next_node
    return route


def build_graph(nodes: dict):
    """Build and compile the extraction graph.

    Graph structure:
        initial_state → page_data → script_json → dom_structured → dom_text → page_json → report
        every strategy ↘ (orders found?) → report

    `nodes` maps every name in STRATEGY_ORDER plus "report" to a node callable.
    Returns a compiled LangGraph to be invoked with an ExtractionState.
    """
    missing = [name for name in STRATEGY_ORDER + ["report"] if name not in nodes]
    if missing:
        raise ValueError(f"Missing workflow nodes: {missing}")

    graph = StateGraph(ExtractionState)

    for name in STRATEGY_ORDER + ["report"]:
        graph.add_node(name, nodes[name])

    graph.set_entry_point(STRATEGY_ORDER[0])

    following = STRATEGY_ORDER[1:] + ["report"]
    for name, next_node in zip(STRATEGY_ORDER, following):
        targets = {"report": "report", next_node: next_node}
        graph.add_conditional_edges(name, continue_or_report(next_node), targets)

    graph.add_edge("report", END)

    return graph.compile()
