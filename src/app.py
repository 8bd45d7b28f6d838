"""Freshcart FastAPI application.

Single-shopper storefront backend: one cart store per process, owned here
and handed to the routes through ``app.state``. Each request is wrapped in
the correct domain context based on URL prefix.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
import json
from pathlib import Path

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from inventory.domain import inventory
from inventory.stock.access import DomainInventory
from inventory.stock.initialization import RegisterStock
from ordering.cart.storage import JsonFileStorage
from ordering.cart.store import CartStore
from ordering.checkout.orchestrator import CheckoutOrchestrator
from ordering.config import settings
from ordering.domain import ordering
from ordering.utils.logging import add_context, clear_context, configure_logging

configure_logging(settings.log_dir)
logger = structlog.get_logger(__name__)

inventory.init()
ordering.init()


def _seed_inventory(path: Path) -> None:
    """Register stock records from a JSON file of ``{product_id: {name, stock}}``."""
    records = json.loads(path.read_text(encoding="utf-8"))
    with inventory.domain_context():
        for product_id, record in records.items():
            inventory.process(
                RegisterStock(product_id=product_id, name=record.get("name"), stock=int(record.get("stock", 0))),
                asynchronous=False,
            )
    logger.info("Inventory seeded", path=str(path), products=len(records))


if settings.stock_file and Path(settings.stock_file).exists():
    _seed_inventory(Path(settings.stock_file))

inventory_access = DomainInventory(inventory)
with ordering.domain_context():
    cart_store = CartStore.load(inventory_access, JsonFileStorage(settings.storage_dir))

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/cart": ordering,
    "/checkout": ordering,
    "/inventory": inventory,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Freshcart API",
    description="Grocery storefront cart, checkout and inventory",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.cart_store = cart_store
app.state.checkout = CheckoutOrchestrator(cart_store, inventory_access)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    clear_context()
    add_context(method=request.method, path=request.url.path)

    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # Health check and docs run outside any domain
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from inventory.api import inventory_router  # noqa: E402
from ordering.api.routes import cart_router, checkout_router  # noqa: E402

app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(inventory_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "ordering": {"name": ordering.name},
                "inventory": {"name": inventory.name},
            },
            "cart": {"dirty": cart_store.dirty},
        }
    )
