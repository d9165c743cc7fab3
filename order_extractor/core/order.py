from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    """Serializes with camelCase keys, the shape the extension consumes.

    Fields that were never observed are left out rather than sent as null.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class OrderItem(_WireModel):
    """One line within an order."""
    name: str = Field(min_length=4)
    price: float = Field(default=0.0, ge=0)
    quantity: int = Field(default=1, gt=0)
    product_url: str = ""


class Order(_WireModel):
    """Canonical purchase order extracted from a page."""
    order_number: str = Field(min_length=1)
    order_date: str = Field(min_length=1)
    order_total: float | None = Field(default=None, ge=0)
    tax: float | None = Field(default=None, ge=0)
    delivery_charges: float | None = Field(default=None, ge=0)
    tip: float | None = Field(default=None, ge=0)
    items: list[OrderItem] = Field(default_factory=list)


class OrderData(_WireModel):
    """Result of a successful extraction."""
    orders: list[Order] = Field(default_factory=list)


class ParsedItem(BaseModel):
    """Candidate item as produced by a parser, before validation."""
    name: str = ""
    price: float = 0.0
    quantity: int = 1
    product_url: str = ""


class ParsedOrder(BaseModel):
    """Candidate order as produced by a parser, before validation."""
    order_number: str | None = None
    order_date: str | None = None
    order_total: float | None = None
    tax: float | None = None
    delivery_charges: float | None = None
    tip: float | None = None
    items: list[ParsedItem] = Field(default_factory=list)


class TextParseResult(BaseModel):
    """Best-effort fields recovered from a block of free text."""
    order_number: str | None = None
    order_date: str | None = None
    order_total: float | None = None
    items: list[ParsedItem] = Field(default_factory=list)
