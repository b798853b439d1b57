# tests/conftest.py
# ---------------------------------------------------------------------
# - Fresh SQLite file per test under tmp_path (schema via ensure_schema)
# - conn.row_factory = sqlite3.Row, PRAGMA foreign_keys=ON (core.db.connect)
# - Small builders for product / sale records used by the pure report tests
# ---------------------------------------------------------------------

from __future__ import annotations

import pytest

from core import gateway
from core.db import connect, ensure_schema


@pytest.fixture
def conn(tmp_path):
    c = connect(tmp_path / "test.db")
    ensure_schema(c)
    yield c
    c.close()


def make_product(**overrides) -> dict:
    rec = {
        "id": 1,
        "name": "X",
        "selling_price": 100.0,
        "acquisition_price": 60.0,
        "purchase_qty": 10,
        "remaining": 10,
        "purchase_date": "2024-01-05",
        "expiration_date": None,
        "supplier_name": None,
        "category": None,
        "tier_prices": {},
    }
    rec.update(overrides)
    return rec


def make_sale(**overrides) -> dict:
    rec = {
        "id": 1,
        "product_id": 1,
        "product_name": "X",
        "client_name": "Happy Paws",
        "quantity": 2,
        "sale_price": 100.0,
        "acquisition_price": 60.0,
        "sale_date": "2024-01-10",
    }
    rec.update(overrides)
    return rec


@pytest.fixture
def product_factory():
    return make_product


@pytest.fixture
def sale_factory():
    return make_sale


@pytest.fixture
def stored_product(conn):
    """One product batch in the database: X, 10 in stock @ 100 (cost 60)."""
    product_id = gateway.insert_product(
        conn,
        {
            "name": "X",
            "selling_price": 100.0,
            "acquisition_price": 60.0,
            "purchase_qty": 10,
            "remaining": 10,
            "purchase_date": "2024-01-05",
            "expiration_date": "2025-06-30",
            "supplier_name": "Mindanao Vet Distributors",
        },
    )
    return gateway.get_product(conn, product_id)
