"""Runtime settings for the cart and checkout core.

Values come from the environment; a ``.env`` file at the project root is
loaded first if present.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=ROOT_DIR / ".env")


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_int(*keys: str, default: int) -> int:
    v = _get_env(*keys)
    if v is None:
        return default
    return int(v)


def _get_float(*keys: str, default: float) -> float:
    v = _get_env(*keys)
    if v is None:
        return default
    return float(v)


@dataclass(frozen=True)
class Settings:
    shipping_fee: float
    currency_symbol: str
    decimals: int
    storage_dir: str
    stock_file: str | None
    log_dir: str | None
    delivery_min_days: int
    delivery_max_days: int


settings = Settings(
    shipping_fee=_get_float("FRESHCART_SHIPPING_FEE", default=50.0),
    currency_symbol=_get_env("FRESHCART_CURRENCY_SYMBOL", default="₱") or "₱",
    decimals=_get_int("FRESHCART_DECIMALS", default=2),
    storage_dir=_get_env("FRESHCART_STORAGE_DIR", default=str(ROOT_DIR / "data" / "cart")) or "",
    stock_file=_get_env("FRESHCART_STOCK_FILE"),
    log_dir=_get_env("FRESHCART_LOG_DIR"),
    delivery_min_days=_get_int("FRESHCART_DELIVERY_MIN_DAYS", default=3),
    delivery_max_days=_get_int("FRESHCART_DELIVERY_MAX_DAYS", default=5),
)

if settings.delivery_min_days > settings.delivery_max_days:
    raise RuntimeError("FRESHCART_DELIVERY_MIN_DAYS must not exceed FRESHCART_DELIVERY_MAX_DAYS")
