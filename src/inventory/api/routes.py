"""FastAPI routes for the Inventory domain — per-product stock."""

from fastapi import APIRouter, HTTPException
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from inventory.api.schemas import (
    ProductIdResponse,
    RegisterStockRequest,
    SetStockRequest,
    StatusResponse,
    StockResponse,
)
from inventory.stock.adjustment import SetStockLevel
from inventory.stock.initialization import RegisterStock
from inventory.stock.stock import InventoryItem

inventory_router = APIRouter(prefix="/inventory", tags=["inventory"])


@inventory_router.post("", status_code=201, response_model=ProductIdResponse)
async def register_stock(body: RegisterStockRequest) -> ProductIdResponse:
    command = RegisterStock(
        product_id=body.product_id,
        name=body.name,
        stock=body.stock,
    )
    try:
        product_id = current_domain.process(command, asynchronous=False)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.messages) from exc
    return ProductIdResponse(product_id=product_id)


@inventory_router.get("/{product_id}", response_model=StockResponse)
async def get_stock(product_id: str) -> StockResponse:
    try:
        item = current_domain.repository_for(InventoryItem).get(product_id)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"No stock record for {product_id}") from exc
    return StockResponse(product_id=str(item.product_id), name=item.name, stock=item.stock or 0)


@inventory_router.put("/{product_id}", response_model=StatusResponse)
async def set_stock(product_id: str, body: SetStockRequest) -> StatusResponse:
    command = SetStockLevel(product_id=product_id, stock=body.stock, reason=body.reason)
    try:
        current_domain.process(command, asynchronous=False)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"No stock record for {product_id}") from exc
    return StatusResponse()
