from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from core import gateway
from core.errors import ValidationError
from core.utils import parse_iso_date

logger = logging.getLogger(__name__)


@dataclass
class ProductInput:
    name: str
    selling_price: Any
    acquisition_price: Any
    purchase_qty: Any
    purchase_date: Any
    expiration_date: Any = None
    supplier_name: Optional[str] = None
    category: Optional[str] = None
    tier_prices: dict[str, Any] = field(default_factory=dict)


def _money(value: Any, label: str) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a number.")
    if v < 0:
        raise ValidationError(f"{label} must be >= 0.")
    return round(v, 2)


def _quantity(value: Any, label: str) -> int:
    try:
        f = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a whole number.")
    if not f.is_integer():
        raise ValidationError(f"{label} must be a whole number.")
    if f < 0:
        raise ValidationError(f"{label} must be >= 0.")
    return int(f)


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s if s else None


def validate_product_input(data: ProductInput) -> dict:
    """Form values -> row values for the products table."""
    name = _optional_text(data.name)
    if not name:
        raise ValidationError("Product name is required.")

    purchase = parse_iso_date(data.purchase_date)
    if purchase is None:
        raise ValidationError("Purchase date must be a valid date (YYYY-MM-DD).")

    expiration = None
    if data.expiration_date is not None and str(data.expiration_date).strip():
        expiration = parse_iso_date(data.expiration_date)
        if expiration is None:
            raise ValidationError("Expiration date must be a valid date (YYYY-MM-DD).")

    qty = _quantity(data.purchase_qty, "Quantity")

    return {
        "name": name,
        "selling_price": _money(data.selling_price, "Selling price"),
        "acquisition_price": _money(data.acquisition_price, "Acquisition price"),
        "purchase_qty": qty,
        "remaining": qty,
        "purchase_date": purchase.isoformat(),
        "expiration_date": expiration.isoformat() if expiration else None,
        "supplier_name": _optional_text(data.supplier_name),
        "category": _optional_text(data.category),
    }


def _tier_prices(data: ProductInput) -> dict[str, float]:
    out: dict[str, float] = {}
    for tier, price in (data.tier_prices or {}).items():
        if price is None or str(price).strip() == "":
            continue
        out[str(tier).strip().lower()] = _money(price, f"Price for {tier}")
    return out


def create_product(conn, data: ProductInput) -> int:
    """One record per purchase batch, even when the name already exists."""
    row = validate_product_input(data)
    tiers = _tier_prices(data)

    product_id = gateway.insert_product(conn, row)
    if tiers:
        gateway.set_tier_prices(conn, product_id, tiers)
    return product_id


def update_product(conn, product_id: int, data: ProductInput) -> None:
    """
    In-place edit. The form's quantity field edits the stock on hand, so it
    sets both purchase_qty and remaining.
    """
    row = validate_product_input(data)
    tiers = _tier_prices(data)

    gateway.update_product(conn, int(product_id), row)
    gateway.set_tier_prices(conn, int(product_id), tiers)


def delete_product(conn, product_id: int) -> None:
    # Sales pointing at this product are left as they are.
    gateway.delete_product(conn, int(product_id))
