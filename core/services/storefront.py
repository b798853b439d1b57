from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from core.services.pricing import price_for

ALL_CATEGORIES = "All"


def categories(products: Iterable[Mapping]) -> list[str]:
    found = {str(p["category"]) for p in products if p.get("category")}
    return [ALL_CATEGORIES] + sorted(found)


def storefront_catalog(
    products: Iterable[Mapping],
    tier: Optional[str],
    search: str = "",
    category: str = ALL_CATEGORIES,
) -> list[dict[str, Any]]:
    """In-stock products priced for the client's tier, filtered by name search and category."""
    term = (search or "").strip().lower()
    out: list[dict[str, Any]] = []
    for p in products:
        if int(p.get("remaining") or 0) <= 0:
            continue
        if term and term not in str(p.get("name", "")).lower():
            continue
        if category != ALL_CATEGORIES and p.get("category") != category:
            continue
        out.append(
            {
                "id": p.get("id"),
                "name": p.get("name"),
                "category": p.get("category"),
                "price": price_for(p, tier),
                "in_stock": int(p.get("remaining") or 0),
                "expiration_date": p.get("expiration_date"),
            }
        )
    return out


# -------------------------
# Cart (list of {"id", "quantity"} kept in session state)
# -------------------------

def add_to_cart(cart: list[dict], product_id: Any, quantity: int = 1) -> list[dict]:
    """Returns a new cart; an existing line for the product is incremented."""
    out = [dict(line) for line in cart]
    for line in out:
        if line["id"] == product_id:
            line["quantity"] += int(quantity)
            return out
    out.append({"id": product_id, "quantity": int(quantity)})
    return out


def remove_from_cart(cart: list[dict], product_id: Any) -> list[dict]:
    return [dict(line) for line in cart if line["id"] != product_id]


def cart_count(cart: Iterable[Mapping]) -> int:
    return sum(int(line["quantity"]) for line in cart)


def cart_total(cart: Iterable[Mapping], catalog: Iterable[Mapping]) -> float:
    prices = {item["id"]: float(item["price"]) for item in catalog}
    return sum(prices.get(line["id"], 0.0) * int(line["quantity"]) for line in cart)
