from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from core import gateway
from core.errors import GatewayError, ValidationError
from core.utils import parse_iso_date

logger = logging.getLogger(__name__)


@dataclass
class SaleResult:
    sale_id: int
    product_id: int
    quantity: int
    sale_price: float
    remaining_after: int


def _normalize_client(client_name: Optional[str]) -> str:
    s = str(client_name or "").strip()
    if not s:
        raise ValidationError("Client name is required.")
    return s


def _normalize_quantity(quantity: Any) -> int:
    try:
        f = float(quantity)
    except (TypeError, ValueError):
        raise ValidationError("Quantity must be a whole number.")
    if not f.is_integer() or f <= 0:
        raise ValidationError("Quantity must be a whole number > 0.")
    return int(f)


def _normalize_sale_date(sale_date: Any) -> str:
    d = parse_iso_date(sale_date)
    if d is None:
        raise ValidationError("Sale date must be a valid date (YYYY-MM-DD).")
    return d.isoformat()


def _custom_price_or_none(custom_price: Any) -> Optional[float]:
    if custom_price is None or str(custom_price).strip() == "":
        return None
    try:
        cp = float(custom_price)
    except (TypeError, ValueError):
        raise ValidationError("Custom price must be a number.")
    if cp < 0:
        raise ValidationError("Custom price must be >= 0.")
    # 0 means "no override", same as leaving the field empty.
    return cp if cp > 0 else None


def resolve_sale_price(product: dict, custom_price: Any = None) -> float:
    """Price captured on the sale: operator override, else the product's current selling price."""
    cp = _custom_price_or_none(custom_price)
    if cp is not None:
        return round(cp, 2)
    return float(product["selling_price"])


def _require_product(conn, product_id: int) -> dict:
    product = gateway.get_product(conn, int(product_id))
    if product is None:
        raise ValidationError("Product not found.")
    return product


def record_sale(
    conn,
    *,
    product_id: int,
    client_name: Optional[str],
    quantity: Any,
    sale_date: Any,
    custom_price: Any = None,
) -> SaleResult:
    """
    Record a sale against one product batch and take the quantity off its stock.

    The stock write is a compare-and-swap on the value read here, so a sale
    recorded concurrently against the same batch surfaces as StockConflictError
    instead of a silent overcount. The two writes are not one transaction: if the
    sale insert fails, the stock is put back (best effort).
    """
    client = _normalize_client(client_name)
    qty = _normalize_quantity(quantity)
    sold_on = _normalize_sale_date(sale_date)

    product = _require_product(conn, product_id)
    remaining = int(product["remaining"])
    if qty > remaining:
        raise ValidationError(f"Quantity exceeds remaining stock ({remaining}).")

    price = resolve_sale_price(product, custom_price)
    new_remaining = remaining - qty

    gateway.set_product_remaining(conn, int(product_id), new_remaining, expected=remaining)
    try:
        sale_id = gateway.insert_sale(
            conn,
            {
                "product_id": int(product_id),
                "client_name": client,
                "quantity": qty,
                "sale_date": sold_on,
                "sale_price": price,
            },
        )
    except GatewayError:
        logger.error("Sale insert failed; restoring stock on product id=%s", product_id)
        _restore_stock(conn, int(product_id), remaining, expected=new_remaining)
        raise

    return SaleResult(
        sale_id=int(sale_id),
        product_id=int(product_id),
        quantity=qty,
        sale_price=price,
        remaining_after=new_remaining,
    )


def update_sale(
    conn,
    sale_id: int,
    *,
    product_id: int,
    client_name: Optional[str],
    quantity: Any,
    sale_date: Any,
    custom_price: Any = None,
) -> None:
    """
    Edit a sale in place. Stock is NOT re-adjusted here (only delete restores
    stock), so changing the quantity leaves the product's remaining untouched.
    """
    if gateway.get_sale(conn, int(sale_id)) is None:
        raise ValidationError("Sale not found.")

    product = _require_product(conn, product_id)
    gateway.update_sale(
        conn,
        int(sale_id),
        {
            "product_id": int(product_id),
            "client_name": _normalize_client(client_name),
            "quantity": _normalize_quantity(quantity),
            "sale_date": _normalize_sale_date(sale_date),
            "sale_price": resolve_sale_price(product, custom_price),
        },
    )


def delete_sale(conn, sale_id: int) -> Optional[int]:
    """
    Delete a sale and give its quantity back to the product batch.
    Returns the product's new remaining, or None when the product is gone.
    """
    sale = gateway.get_sale(conn, int(sale_id))
    if sale is None:
        raise ValidationError("Sale not found.")

    product = gateway.get_product(conn, int(sale["product_id"]))
    restored: Optional[int] = None
    if product is None:
        logger.warning("Sale id=%s points at missing product id=%s; deleting without restock", sale_id, sale["product_id"])
    else:
        before = int(product["remaining"])
        restored = before + int(sale["quantity"])
        gateway.set_product_remaining(conn, int(product["id"]), restored, expected=before)

    try:
        gateway.delete_sale(conn, int(sale_id))
    except GatewayError:
        if restored is not None:
            logger.error("Sale delete failed; taking restock back off product id=%s", product["id"])
            _restore_stock(conn, int(product["id"]), before, expected=restored)
        raise
    return restored


def _restore_stock(conn, product_id: int, value: int, *, expected: int) -> None:
    """Undo a stock write after the paired sale write failed; the caller re-raises the original error."""
    try:
        gateway.set_product_remaining(conn, product_id, value, expected=expected)
    except GatewayError:
        logger.exception("Could not restore stock on product id=%s (wanted %s)", product_id, value)
