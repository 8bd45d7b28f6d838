"""Pydantic request/response schemas for the Inventory API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from pydantic import BaseModel, Field


class RegisterStockRequest(BaseModel):
    product_id: str
    name: str | None = None
    stock: int = Field(ge=0, default=0)


class SetStockRequest(BaseModel):
    stock: int = Field(ge=0)
    reason: str = "Correction"


class StockResponse(BaseModel):
    product_id: str
    name: str | None = None
    stock: int


class ProductIdResponse(BaseModel):
    product_id: str


class StatusResponse(BaseModel):
    status: str = "ok"
