import pytest

from core import gateway
from core.errors import GatewayError, ValidationError
from core.services.products import ProductInput, create_product, delete_product, update_product, validate_product_input


def _input(**kw) -> ProductInput:
    data = dict(
        name="Rabies Vaccine Vial",
        selling_price="450",
        acquisition_price=320,
        purchase_qty="24",
        purchase_date="2024-03-01",
        expiration_date="2025-04-30",
        supplier_name="  Mindanao Vet  ",
    )
    data.update(kw)
    return ProductInput(**data)


def test_validate_product_input_normalizes_values():
    row = validate_product_input(_input())
    assert row == {
        "name": "Rabies Vaccine Vial",
        "selling_price": 450.0,
        "acquisition_price": 320.0,
        "purchase_qty": 24,
        "remaining": 24,
        "purchase_date": "2024-03-01",
        "expiration_date": "2025-04-30",
        "supplier_name": "Mindanao Vet",
        "category": None,
    }


@pytest.mark.parametrize(
    "field,value,message",
    [
        ("name", "  ", "name is required"),
        ("selling_price", "abc", "Selling price must be a number"),
        ("acquisition_price", -1, "Acquisition price must be >= 0"),
        ("purchase_qty", 2.5, "whole number"),
        ("purchase_qty", -3, ">= 0"),
        ("purchase_date", "", "Purchase date"),
        ("expiration_date", "31/12/2025", "Expiration date"),
    ],
)
def test_validate_product_input_rejects(field, value, message):
    with pytest.raises(ValidationError, match=message):
        validate_product_input(_input(**{field: value}))


def test_expiration_date_is_optional():
    assert validate_product_input(_input(expiration_date=None))["expiration_date"] is None
    assert validate_product_input(_input(expiration_date=" "))["expiration_date"] is None


def test_create_product_sets_remaining_to_purchase_qty(conn):
    pid = create_product(conn, _input(tier_prices={"Vets": "430", "farms": "", "petshops": None}))
    p = gateway.get_product(conn, pid)
    assert p["purchase_qty"] == 24
    assert p["remaining"] == 24
    assert p["tier_prices"] == {"vets": 430.0}


def test_same_name_creates_separate_batches(conn):
    a = create_product(conn, _input(acquisition_price=300))
    b = create_product(conn, _input(acquisition_price=310, purchase_date="2024-04-01"))
    assert a != b
    assert len(gateway.list_products(conn)) == 2


def test_update_product_edits_in_place(conn):
    pid = create_product(conn, _input(tier_prices={"vets": 430}))
    update_product(conn, pid, _input(name="Rabies Vaccine (10 dose)", purchase_qty=12, selling_price=500))
    p = gateway.get_product(conn, pid)
    assert p["name"] == "Rabies Vaccine (10 dose)"
    assert p["remaining"] == 12
    assert p["purchase_qty"] == 12
    assert p["selling_price"] == 500.0
    assert p["tier_prices"] == {}


def test_delete_product(conn):
    pid = create_product(conn, _input())
    delete_product(conn, pid)
    assert gateway.get_product(conn, pid) is None
    with pytest.raises(GatewayError):
        delete_product(conn, pid)
