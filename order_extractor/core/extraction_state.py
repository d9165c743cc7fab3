from typing import Any, TypedDict

from order_extractor.core.order import Order


class ExtractionState(TypedDict, total=False):
    # --- Input ---
    page: Any                            # PageContext, read-only for the whole run

    # --- Strategy results ---
    orders: list[Order]                  # validated orders from the first successful strategy
    source: str                          # node name that produced `orders`
    expansion_clicks: int                # affordances clicked by dom_structured
    strategy_errors: list[str]
    trajectory: list[str]                # node names visited

    # --- Final ---
    final_status: str                    # "found" | "not_found"
