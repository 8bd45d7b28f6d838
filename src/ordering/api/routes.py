"""FastAPI routes for the Ordering domain — cart and checkout.

The cart store and the checkout orchestrator are created once by the
application root and kept on ``app.state``; routes reach them through the
dependencies below, never through module globals.
"""

from contextlib import contextmanager

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ValidationError

from ordering.api.schemas import (
    AddToCartRequest,
    CartViewResponse,
    CheckoutFailureResponse,
    CheckoutRequest,
    OrderResponse,
    QuantityResponse,
    SelectionResponse,
    StatusResponse,
)
from ordering.cart.catalog import CatalogItem
from ordering.cart.exceptions import ConfirmationRequired
from ordering.cart.store import CartStore
from ordering.checkout.orchestrator import CheckoutOrchestrator


def get_cart_store(request: Request) -> CartStore:
    return request.app.state.cart_store


def get_checkout(request: Request) -> CheckoutOrchestrator:
    return request.app.state.checkout


@contextmanager
def _domain_errors():
    """Map cart outcomes onto HTTP: consent needed → 409, invalid request → 422."""
    try:
        yield
    except ConfirmationRequired as exc:
        raise HTTPException(status_code=409, detail={"confirmation_required": exc.to_dict()}) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.messages) from exc


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartViewResponse)
async def view_cart(store: CartStore = Depends(get_cart_store)) -> CartViewResponse:
    return CartViewResponse(**store.view(), badge=store.badge_text())


@cart_router.post("/items", response_model=QuantityResponse)
async def add_cart_item(body: AddToCartRequest, store: CartStore = Depends(get_cart_store)) -> QuantityResponse:
    with _domain_errors():
        item = CatalogItem(**body.model_dump(exclude={"quantity"}, exclude_none=True))
        quantity = store.add_item(item, requested_qty=body.quantity)
    return QuantityResponse(product_id=body.product_id, quantity=quantity)


@cart_router.post("/items/{product_id}/increase", response_model=QuantityResponse)
async def increase_cart_item(product_id: str, store: CartStore = Depends(get_cart_store)) -> QuantityResponse:
    with _domain_errors():
        quantity = store.increase_quantity(product_id)
    return QuantityResponse(product_id=product_id, quantity=quantity)


@cart_router.post("/items/{product_id}/decrease", response_model=QuantityResponse)
async def decrease_cart_item(
    product_id: str, confirmed: bool = False, store: CartStore = Depends(get_cart_store)
) -> QuantityResponse:
    with _domain_errors():
        quantity = store.decrease_quantity(product_id, confirmed=confirmed)
    return QuantityResponse(product_id=product_id, quantity=quantity)


@cart_router.delete("/items/{product_id}", response_model=StatusResponse)
async def remove_cart_item(
    product_id: str, confirmed: bool = False, store: CartStore = Depends(get_cart_store)
) -> StatusResponse:
    with _domain_errors():
        store.remove_item(product_id, confirmed=confirmed)
    return StatusResponse()


@cart_router.post("/items/{product_id}/toggle", response_model=SelectionResponse)
async def toggle_cart_item(product_id: str, store: CartStore = Depends(get_cart_store)) -> SelectionResponse:
    with _domain_errors():
        selected = store.toggle_select(product_id)
    return SelectionResponse(product_id=product_id, selected=selected)


@cart_router.post("/selection", response_model=StatusResponse)
async def select_all(store: CartStore = Depends(get_cart_store)) -> StatusResponse:
    store.select_all()
    return StatusResponse()


@cart_router.delete("/selection", response_model=StatusResponse)
async def clear_selection(store: CartStore = Depends(get_cart_store)) -> StatusResponse:
    store.clear_selection()
    return StatusResponse()


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.get("/preview", responses={409: {"model": CheckoutFailureResponse}})
async def preview_checkout(checkout: CheckoutOrchestrator = Depends(get_checkout)):
    result = checkout.validate()
    if not result.success:
        return JSONResponse(status_code=409, content=result.to_dict())
    return StatusResponse()


@checkout_router.post(
    "",
    status_code=201,
    response_model=OrderResponse,
    responses={409: {"model": CheckoutFailureResponse}},
)
async def place_order(body: CheckoutRequest, checkout: CheckoutOrchestrator = Depends(get_checkout)):
    with _domain_errors():
        result = checkout.checkout(payment_method=body.payment_method)
    if not result.success:
        return JSONResponse(status_code=409, content=result.to_dict())
    return OrderResponse(**result.order.to_dict())
