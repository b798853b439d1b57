from __future__ import annotations

import random
from datetime import date, timedelta

from core import gateway
from core.db import ensure_schema
from core.services.auth import create_user
from core.services.clients import ClientInput, add_client
from core.services.products import ProductInput, create_product
from core.services.sales import record_sale

DEMO_ADMIN_EMAIL = "admin@vetsupply.local"
DEMO_ADMIN_PASSWORD = "admin123"

DEMO_PRODUCTS = [
    # name, category, selling, acquisition, shelf life (days)
    ("Rabies Vaccine Vial", "Vaccines", 450.0, 320.0, 420),
    ("Amoxicillin Suspension", "Medications", 280.0, 190.0, 700),
    ("Sterile Syringe Pack", "Supplies", 120.0, 75.0, None),
    ("Nitrile Gloves Box", "Supplies", 350.0, 260.0, None),
    ("Kennel Disinfectant", "Cleaning", 310.0, 200.0, 900),
    ("Pet Multivitamin Tabs", "Supplements", 520.0, 410.0, 200),
]
DEMO_CLIENTS = ["Happy Paws Clinic", "Greenfield Farms", "Petsmart Davao", "Dr. Reyes"]


def wipe_all(conn) -> None:
    # Keep schema, delete data (order matters for FKs).
    for t in ["sales", "product_tier_prices", "products", "clients", "users"]:
        conn.execute(f"DELETE FROM {t};")
    conn.commit()


def load_demo_data(conn, *, seed: int = 7) -> None:
    rng = random.Random(seed)
    ensure_schema(conn)

    create_user(conn, DEMO_ADMIN_EMAIL, DEMO_ADMIN_PASSWORD, "admin")
    for name in DEMO_CLIENTS:
        add_client(conn, ClientInput(name=name, contact_person="Purchasing"))

    today = date.today()
    product_ids: list[int] = []
    for i, (name, category, sell, acq, shelf_days) in enumerate(DEMO_PRODUCTS):
        # Two purchase batches per product, the second one a bit pricier
        for lot in range(2):
            bought = today - timedelta(days=60 - 25 * lot + i)
            qty = rng.randint(20, 80)
            product_ids.append(
                create_product(
                    conn,
                    ProductInput(
                        name=name,
                        selling_price=sell,
                        acquisition_price=acq + 10 * lot,
                        purchase_qty=qty,
                        purchase_date=bought.isoformat(),
                        expiration_date=(bought + timedelta(days=shelf_days)).isoformat() if shelf_days else None,
                        supplier_name="Mindanao Vet Distributors",
                        category=category,
                        tier_prices={"vets": round(sell * 0.95, 2), "farms": round(sell * 0.9, 2)},
                    ),
                )
            )

    for pid in product_ids[::2]:
        product = gateway.get_product(conn, pid)
        qty = rng.randint(1, max(1, int(product["remaining"]) // 3))
        record_sale(
            conn,
            product_id=pid,
            client_name=rng.choice(DEMO_CLIENTS),
            quantity=qty,
            sale_date=(today - timedelta(days=rng.randint(0, 20))).isoformat(),
        )
