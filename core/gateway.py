"""
Data gateway: the only module that talks to the store.

Every call is a plain request/response: rows come back as dicts, failures come
back as GatewayError. Callers re-fetch whole collections after each mutation;
nothing here caches.

Stock updates assume a single writer unless `expected` is passed to
set_product_remaining(), which turns the write into a compare-and-swap.
"""
from __future__ import annotations

import logging
import sqlite3
from typing import Any, Optional

from core.db import q, x, xc
from core.errors import GatewayError, StockConflictError
from core.utils import iso_now

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = (
    "name",
    "selling_price",
    "acquisition_price",
    "purchase_qty",
    "remaining",
    "purchase_date",
    "expiration_date",
    "supplier_name",
    "category",
)
SALE_FIELDS = ("product_id", "client_name", "quantity", "sale_date", "sale_price")
CLIENT_FIELDS = ("name", "address", "contact_number", "account", "tin_number", "contact_person")

SALES_SELECT = """
    SELECT s.*,
           p.name AS product_name,
           p.selling_price AS product_selling_price,
           p.acquisition_price AS acquisition_price
    FROM sales s
    LEFT JOIN products p ON p.id = s.product_id
"""


def _fail(operation: str, err: Exception) -> GatewayError:
    logger.error("Gateway %s failed: %s", operation, err)
    return GatewayError(f"{operation} failed: {err}", operation=operation)


def _pick(data: dict, fields: tuple[str, ...]) -> dict:
    return {k: data[k] for k in fields if k in data}


def _update(conn, table: str, row_id: int, values: dict, operation: str) -> None:
    if not values:
        raise GatewayError(f"{operation}: nothing to update.", operation=operation)
    cols = ", ".join(f"{k}=?" for k in values)
    try:
        n = xc(conn, f"UPDATE {table} SET {cols} WHERE id=?", (*values.values(), int(row_id)))
    except sqlite3.Error as e:
        raise _fail(operation, e) from e
    if n == 0:
        raise GatewayError(f"{operation}: no {table} row with id {row_id}.", operation=operation)


def _delete(conn, table: str, row_id: int, operation: str) -> None:
    try:
        n = xc(conn, f"DELETE FROM {table} WHERE id=?", (int(row_id),))
    except sqlite3.Error as e:
        raise _fail(operation, e) from e
    if n == 0:
        raise GatewayError(f"{operation}: no {table} row with id {row_id}.", operation=operation)
    logger.info("Deleted %s id=%s", table, row_id)


# -------------------------
# Products
# -------------------------

def _tier_prices_by_product(conn) -> dict[int, dict[str, float]]:
    out: dict[int, dict[str, float]] = {}
    for r in q(conn, "SELECT product_id, tier, price FROM product_tier_prices"):
        out.setdefault(int(r["product_id"]), {})[str(r["tier"])] = float(r["price"])
    return out


def list_products(conn) -> list[dict[str, Any]]:
    try:
        rows = q(conn, "SELECT * FROM products ORDER BY created_at DESC, id DESC")
        tiers = _tier_prices_by_product(conn)
    except sqlite3.Error as e:
        raise _fail("list_products", e) from e

    out = []
    for r in rows:
        rec = dict(r)
        rec["tier_prices"] = tiers.get(int(r["id"]), {})
        out.append(rec)
    return out


def get_product(conn, product_id: int) -> Optional[dict[str, Any]]:
    try:
        rows = q(conn, "SELECT * FROM products WHERE id=?", (int(product_id),))
        if not rows:
            return None
        tiers = q(conn, "SELECT tier, price FROM product_tier_prices WHERE product_id=?", (int(product_id),))
    except sqlite3.Error as e:
        raise _fail("get_product", e) from e

    rec = dict(rows[0])
    rec["tier_prices"] = {str(t["tier"]): float(t["price"]) for t in tiers}
    return rec


def insert_product(conn, data: dict) -> int:
    values = _pick(data, PRODUCT_FIELDS)
    values["created_at"] = iso_now()
    cols = ", ".join(values)
    marks = ", ".join("?" for _ in values)
    try:
        product_id = x(conn, f"INSERT INTO products ({cols}) VALUES ({marks})", tuple(values.values()))
    except sqlite3.Error as e:
        raise _fail("insert_product", e) from e
    logger.info("Inserted product id=%s name=%r remaining=%s", product_id, values.get("name"), values.get("remaining"))
    return product_id


def update_product(conn, product_id: int, data: dict) -> None:
    _update(conn, "products", product_id, _pick(data, PRODUCT_FIELDS), "update_product")


def delete_product(conn, product_id: int) -> None:
    # No cascade to sales: a deleted product leaves its sales dangling.
    _delete(conn, "products", product_id, "delete_product")


def set_product_remaining(conn, product_id: int, new_remaining: int, *, expected: Optional[int] = None) -> None:
    """
    Write a new stock value. With `expected`, the write only lands if the row still
    holds that value; otherwise StockConflictError (someone else sold in between).
    """
    sql = "UPDATE products SET remaining=? WHERE id=?"
    params: tuple = (int(new_remaining), int(product_id))
    if expected is not None:
        sql += " AND remaining=?"
        params += (int(expected),)

    try:
        n = xc(conn, sql, params)
    except sqlite3.Error as e:
        raise _fail("set_product_remaining", e) from e

    if n == 0:
        if expected is not None and get_product(conn, product_id) is not None:
            logger.warning("Stock conflict on product id=%s (expected remaining=%s)", product_id, expected)
            raise StockConflictError(
                "Stock changed while recording this sale. Reload and try again.",
                operation="set_product_remaining",
            )
        raise GatewayError(f"set_product_remaining: no product with id {product_id}.", operation="set_product_remaining")
    logger.info("Product id=%s remaining -> %s", product_id, new_remaining)


def set_tier_prices(conn, product_id: int, prices: dict[str, float]) -> None:
    try:
        conn.execute("DELETE FROM product_tier_prices WHERE product_id=?", (int(product_id),))
        for tier, price in prices.items():
            conn.execute(
                "INSERT INTO product_tier_prices (product_id, tier, price) VALUES (?, ?, ?)",
                (int(product_id), str(tier), float(price)),
            )
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        raise _fail("set_tier_prices", e) from e


# -------------------------
# Sales
# -------------------------

def list_sales(conn) -> list[dict[str, Any]]:
    try:
        rows = q(conn, SALES_SELECT + " ORDER BY s.created_at DESC, s.id DESC")
    except sqlite3.Error as e:
        raise _fail("list_sales", e) from e
    return [dict(r) for r in rows]


def get_sale(conn, sale_id: int) -> Optional[dict[str, Any]]:
    try:
        rows = q(conn, SALES_SELECT + " WHERE s.id=?", (int(sale_id),))
    except sqlite3.Error as e:
        raise _fail("get_sale", e) from e
    return dict(rows[0]) if rows else None


def insert_sale(conn, data: dict) -> int:
    values = _pick(data, SALE_FIELDS)
    values["created_at"] = iso_now()
    cols = ", ".join(values)
    marks = ", ".join("?" for _ in values)
    try:
        sale_id = x(conn, f"INSERT INTO sales ({cols}) VALUES ({marks})", tuple(values.values()))
    except sqlite3.Error as e:
        raise _fail("insert_sale", e) from e
    logger.info("Inserted sale id=%s product_id=%s qty=%s", sale_id, values.get("product_id"), values.get("quantity"))
    return sale_id


def update_sale(conn, sale_id: int, data: dict) -> None:
    _update(conn, "sales", sale_id, _pick(data, SALE_FIELDS), "update_sale")


def delete_sale(conn, sale_id: int) -> None:
    _delete(conn, "sales", sale_id, "delete_sale")


# -------------------------
# Clients
# -------------------------

def list_clients(conn, *, offset: int = 0, limit: Optional[int] = None) -> tuple[list[dict[str, Any]], int]:
    try:
        total = int(q(conn, "SELECT COUNT(1) AS n FROM clients")[0]["n"])
        if limit is None:
            rows = q(conn, "SELECT * FROM clients ORDER BY name, id")
        else:
            rows = q(
                conn,
                "SELECT * FROM clients ORDER BY name, id LIMIT ? OFFSET ?",
                (int(limit), max(0, int(offset))),
            )
    except sqlite3.Error as e:
        raise _fail("list_clients", e) from e
    return [dict(r) for r in rows], total


def insert_client(conn, data: dict) -> int:
    values = _pick(data, CLIENT_FIELDS)
    values["created_at"] = iso_now()
    cols = ", ".join(values)
    marks = ", ".join("?" for _ in values)
    try:
        return x(conn, f"INSERT INTO clients ({cols}) VALUES ({marks})", tuple(values.values()))
    except sqlite3.Error as e:
        raise _fail("insert_client", e) from e


# -------------------------
# Users
# -------------------------

def get_user(conn, email: str) -> Optional[dict[str, Any]]:
    try:
        rows = q(conn, "SELECT * FROM users WHERE email=?", (str(email).strip().lower(),))
    except sqlite3.Error as e:
        raise _fail("get_user", e) from e
    return dict(rows[0]) if rows else None


def get_current_user_role(conn, email: str) -> str:
    user = get_user(conn, email)
    if user is None:
        raise GatewayError("User profile not found", operation="get_current_user_role")
    return str(user["role"])


def upsert_user(conn, *, email: str, password_hash: str, role: str) -> None:
    try:
        x(
            conn,
            """
            INSERT INTO users (email, password_hash, role) VALUES (?, ?, ?)
            ON CONFLICT(email) DO UPDATE SET password_hash=excluded.password_hash, role=excluded.role
            """,
            (str(email).strip().lower(), password_hash, role),
        )
    except sqlite3.Error as e:
        raise _fail("upsert_user", e) from e
