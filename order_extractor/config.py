import re
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SelectorConfig(BaseModel):
    """CSS selectors per structural role, tried in order."""
    order_containers: list[str] = [
        '[data-testid*="order"]',
        '[data-test*="order"]',
        ".order-card",
        '[class*="OrderCard"]',
        '[class*="order-item"]',
        '[class*="PurchaseGroup"]',
        '[class*="OrderGroup"]',
        '[role="article"]',
        'div[class*="bg-white"][class*="rounded"]',
        'section[class*="order"]',
    ]
    item_containers: list[str] = [
        '[data-testid*="item"]',
        '[data-testid*="product"]',
        '[class*="LineItem"]',
        '[class*="line-item"]',
        '[class*="product-item"]',
        '[class*="order-item"]',
        'div[class*="item"][class*="container"]',
        'div[class*="product"][class*="row"]',
        'div[data-automation-id*="product"]',
        'div[data-automation-id*="item"]',
        "[data-item-id]",
        'article[class*="product"]',
        'div[class*="OrderItem"]',
        'div[class*="fulfillment-group"] div[class*="item"]',
        'div[role="article"]',
        'section[class*="item"] > div',
    ]
    product_name: list[str] = [
        '[class*="product-name"]',
        '[class*="item-name"]',
        '[class*="title"]',
        "h3",
        "h4",
        'a[href*="/ip/"]',
    ]
    product_link: list[str] = ['a[href*="/ip/"]']
    expand_controls: list[str] = ["button", "a"]
    text_blocks: list[str] = ["div", "section", "article"]
    inline_scripts: str = "script"
    json_scripts: str = 'script[type="application/json"]'
    page_json_attributes: list[str] = ["data-react-props", "data-initial-props", "data-page-props"]


class PatternConfig(BaseModel):
    """Regular expressions used by the text parser and the name sanitizer.

    Strings loaded from YAML are compiled by pydantic; use inline flags
    such as ``(?i)`` for case-insensitive patterns.
    """
    price: re.Pattern = re.compile(r"\$\s*([\d,]+\.?\d{2})")
    quantity: re.Pattern = re.compile(r"(?i)(?:Qty|Quantity)[\s:]*(\d+)")
    quantity_x: re.Pattern = re.compile(r"(?i)^\s*(\d+)\s*x\s+")
    quantity_parens: re.Pattern = re.compile(r"\(\s*(\d+)\s*\)$")
    date: re.Pattern = re.compile(
        r"(?i)\b(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|Aug(?:ust)?"
        r"|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)\b\.?\s+\d{1,2}\b(?:,?\s+\d{4})?"
    )
    year: re.Pattern = re.compile(r"\d{4}")
    order_number: re.Pattern = re.compile(r"(?i)(?:Order\s*#?|#)\s*(\d[\d-]*)")
    order_number_block: re.Pattern = re.compile(r"(?i)(?:Order\s*#?|#)\s*([\d-]{6,})")
    order_total: re.Pattern = re.compile(r"(?i)\b(?:Order Total|Total)\s*\$\s*([\d,]+\.?\d{2})")
    total_alternatives: list[re.Pattern] = [
        re.compile(r"(?i)\$\s*([\d,]+\.?\d{2})\s*total\b"),
        re.compile(r"(?i)\btotal\s*:\s*\$\s*([\d,]+\.?\d{2})"),
        re.compile(r"(?i)\b(?:Grand\s+)?Total\s+\$\s*([\d,]+\.?\d{2})"),
    ]
    detail_url: re.Pattern = re.compile(r"/orders/([\w-]+)/?$")
    skip_lines: list[re.Pattern] = [
        re.compile(r"(?i)^Order\s*#"),
        re.compile(r"(?i)^Delivered"),
        re.compile(r"(?i)^Start a return"),
        re.compile(r"(?i)^View details"),
        re.compile(r"(?i)^Delivery from"),
        re.compile(r"(?i)^(?:Order\s+)?Total"),
        re.compile(r"(?i)^Subtotal"),
        re.compile(r"(?i)^Tax"),
        re.compile(r"(?i)^Shipping"),
        re.compile(r"^\+\d+$"),
    ]
    non_product: list[re.Pattern] = [
        re.compile(r"(?i)^(?:view|start|cancel|return|track|details|delivery)"),
        re.compile(r"(?i)^(?:from store|pickup|shipping)"),
        re.compile(r"(?i)^(?:order|purchase|transaction)"),
        re.compile(r"^[\d\s\-+]+$"),
        re.compile(r"^[A-Z]{2,}$"),
    ]
    bare_amount: re.Pattern = re.compile(r"^\$?[\d.,]+$")

    # Name cleanup, applied in this order by ProductNameSanitizer
    cleanup_quantity: re.Pattern = re.compile(r"(?i)\s*(?:Shopped)?Qty\s+\d+.*$")
    cleanup_multipack: re.Pattern = re.compile(r"(?i)Multipack Quantity:.*$")
    cleanup_was_price: re.Pattern = re.compile(r"(?i)Was\s+\$[\d.,]+")
    cleanup_price: re.Pattern = re.compile(r"(?i)\$[\d.,]+.*$")
    cleanup_unit_price: re.Pattern = re.compile(r"(?i)[\d.]+¢/[a-z\s]+.*$")
    cleanup_weight_adjusted: re.Pattern = re.compile(r"(?i)Weight-adjusted.*$")
    cleanup_count: re.Pattern = re.compile(r"(?i)Count:.*$")


class FieldNameConfig(BaseModel):
    """Candidate field names per canonical field; earlier names win."""
    order_number: list[str] = [
        "orderNumber", "orderId", "id", "number", "orderNum", "purchaseOrderId",
        "transactionId", "orderIdentifier", "confirmationNumber",
    ]
    order_date: list[str] = [
        "orderDate", "date", "createdAt", "placedDate", "purchaseDate",
        "orderPlacedDate", "submittedDate", "transactionDate", "created",
    ]
    order_total: list[str] = [
        "orderTotal", "total", "grandTotal", "amount", "totalAmount",
        "orderAmount", "finalTotal", "totalPrice", "paymentTotal",
    ]
    tax: list[str] = ["tax", "taxAmount", "taxes", "totalTax"]
    delivery_charges: list[str] = [
        "deliveryCharges", "shipping", "shippingCost", "shippingAmount", "deliveryFee",
    ]
    tip: list[str] = ["tip", "tipAmount", "gratuity"]
    item_containers: list[str] = ["items", "lineItems", "products", "orderItems"]
    item_name: list[str] = ["name", "productName", "title", "description"]
    item_price: list[str] = ["price", "unitPrice", "itemPrice", "amount"]
    item_quantity: list[str] = ["quantity", "qty", "count"]
    item_url: list[str] = ["productUrl", "url", "link", "href"]


class TreeShapeConfig(BaseModel):
    """Where to look for an order array inside one kind of state tree."""
    key_paths: list[list[str]]
    search_root: list[str] = Field(default_factory=list)
    search_terms: list[str] = ["order", "purchase", "history"]
    nested_array_fields: list[str] = Field(default_factory=list)


def _default_tree_shapes() -> dict[str, TreeShapeConfig]:
    return {
        "state": TreeShapeConfig(
            key_paths=[
                ["orders", "data"],
                ["account", "orders"],
                ["orderHistory", "orders"],
                ["data", "orders"],
                ["props", "pageProps", "initialData", "orders"],
            ],
        ),
        "page_props": TreeShapeConfig(
            key_paths=[
                ["props", "pageProps", "orders"],
                ["props", "pageProps", "initialData", "orders"],
                ["props", "pageProps", "data", "orders"],
                ["props", "pageProps", "initialData", "data", "orders"],
                ["props", "pageProps", "orderList"],
                ["props", "pageProps", "orderHistory"],
                ["props", "pageProps", "purchaseHistory"],
                ["props", "pageProps", "initialReduxState", "orders"],
                ["props", "pageProps", "initialReduxState", "orderHistory"],
                ["props", "pageProps", "__APOLLO_STATE__"],
                ["props", "pageProps", "initialProps", "orders"],
            ],
            search_root=["props", "pageProps"],
            nested_array_fields=["orders", "data", "items", "results", "list"],
        ),
    }


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Page globals
    initial_state_global: str = "__WML_REDUX_INITIAL_STATE__"
    initial_state_shape: str = "state"
    page_data_global: str = "__NEXT_DATA__"
    page_data_shape: str = "page_props"

    # Parsing
    selectors: SelectorConfig = Field(default_factory=SelectorConfig)
    patterns: PatternConfig = Field(default_factory=PatternConfig)
    field_names: FieldNameConfig = Field(default_factory=FieldNameConfig)
    tree_shapes: dict[str, TreeShapeConfig] = Field(default_factory=_default_tree_shapes)
    filter_keywords: list[str] = [
        "ReorderListsRegistries",
        "Lists & Registries",
        "Sign in",
        "Create account",
    ]
    max_quantity: int = 100
    block_text_limit: int = 5000
    sibling_search_limit: int = 3

    # DOM expansion
    expand_labels: list[str] = ["View details", "Show items", "Expand"]
    settle_timeout_seconds: float = 0.5

    # Page classification
    orders_path: str = "/orders"

    # Logging / tracing
    log_level: str = "INFO"
    opik_project: str = "order-extractor"

    @classmethod
    def from_yaml(cls, path: str | Path) -> "AppConfig":
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    @classmethod
    def for_testing(cls) -> "AppConfig":
        """Pre-configured for tests: no settle wait, no .env lookup."""
        return cls(settle_timeout_seconds=0.0, _env_file=None)
