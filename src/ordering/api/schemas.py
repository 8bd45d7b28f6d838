"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from the
internal cart and checkout types.
"""

from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    name: str
    unit_price: float | None = None
    discount_percent: float | None = None
    image_ref: str | None = None
    quantity: int = Field(ge=1, default=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-rice-5kg",
                    "name": "Jasmine Rice 5kg",
                    "unit_price": 320.0,
                    "discount_percent": 10,
                    "image_ref": "/img/rice.png",
                    "quantity": 1,
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Cart Response Schemas
# ---------------------------------------------------------------------------
class CartEntrySchema(BaseModel):
    id: str
    product_id: str
    name: str
    unit_price: float
    discount_percent: float
    quantity: int
    stock_at_add: int
    image_ref: str | None = None
    selling_price: float
    line_total: float
    selected: bool


class CartViewResponse(BaseModel):
    entries: list[CartEntrySchema]
    selection: list[str]
    subtotal_all: float
    subtotal_selected: float
    item_count: int
    badge: str


class QuantityResponse(BaseModel):
    product_id: str
    quantity: int


class SelectionResponse(BaseModel):
    product_id: str
    selected: bool


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Checkout Schemas
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    payment_method: Literal["card", "cod"] = "card"


class OrderLineSchema(BaseModel):
    product_id: str
    name: str
    quantity: int
    unit_price: float
    discount_percent: float
    image_ref: str | None = None
    line_total: float


class OrderResponse(BaseModel):
    items: list[OrderLineSchema]
    subtotal: float
    shipping_fee: float
    total: float
    payment_method: str
    placed_at: str
    delivery_window: list[str]


class StockViolationSchema(BaseModel):
    product_id: str
    name: str
    requested: int
    available: int


class CheckoutFailureResponse(BaseModel):
    success: bool = False
    message: str | None = None
    violations: list[StockViolationSchema] = []
