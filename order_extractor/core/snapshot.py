from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field


class PageSnapshot(BaseModel):
    """A page captured by the extension: serialized DOM plus its state globals."""
    model_config = ConfigDict(populate_by_name=True)

    html: str = ""
    url: str = ""
    page_globals: dict[str, Any] = Field(default_factory=dict, alias="globals")


class ExtractResponse(BaseModel):
    """Reply to an extract request, in the extension's message format."""
    success: bool
    data: dict | None = None
    error: str | None = None


class PageTypeRequest(BaseModel):
    url: str


class PageTypeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page_type: str = Field(alias="pageType")
    url: str


def classify_page(url: str, orders_path: str = "/orders") -> str:
    """"order_detail", "order_list" or "other", from the URL path alone."""
    path = urlparse(url).path
    if path.startswith(f"{orders_path}/"):
        return "order_detail"
    if path.rstrip("/") == orders_path:
        return "order_list"
    return "other"
