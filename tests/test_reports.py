import pytest

from core.services.reports import (
    ALL,
    distinct_clients,
    distinct_product_names,
    distinct_years,
    filter_products_by_period,
    group_inventory_batches,
    in_period,
    inventory_summary,
    monthly_sales_summary,
    months,
    sales_performance,
)


# ---------- end to end ----------

def test_end_to_end_summary_and_performance(product_factory, sale_factory):
    products = [product_factory()]
    sales = [sale_factory()]

    inv = inventory_summary(products)
    assert inv.total_stock == 10
    assert inv.inventory_value == 1000

    rows = sales_performance(sales, "2024", "1", "all", "all")
    assert len(rows) == 1
    row = rows[0]
    assert row.name == "X"
    assert row.selling_price == 100
    assert row.total_sales == 2
    assert row.total_revenue == 200
    assert row.total_cost == 120
    assert row.total_profit == 80
    assert not row.is_loss


# ---------- inventory ----------

@pytest.mark.parametrize("remaining,price", [(0, 99.5), (1, 0.0), (7, 12.25), (250, 3.0)])
def test_inventory_value_is_price_times_remaining(product_factory, remaining, price):
    assert inventory_summary([product_factory(remaining=remaining, selling_price=price)]).inventory_value == remaining * price


def test_inventory_summary_sums_all_batches(product_factory):
    products = [
        product_factory(id=1, remaining=4, selling_price=10.0),
        product_factory(id=2, remaining=6, selling_price=20.0),
    ]
    inv = inventory_summary(products)
    assert inv.total_stock == 10
    assert inv.inventory_value == 160.0


def test_inventory_summary_empty():
    inv = inventory_summary([])
    assert inv.total_stock == 0
    assert inv.inventory_value == 0


# ---------- monthly summary ----------

def test_monthly_summary_only_counts_sales_in_period(sale_factory):
    sales = [
        sale_factory(id=1, quantity=2, sale_price=100.0, sale_date="2024-01-10"),
        sale_factory(id=2, quantity=3, sale_price=50.0, sale_date="2024-01-31"),
        sale_factory(id=3, quantity=7, sale_price=10.0, sale_date="2024-02-01"),
        sale_factory(id=4, quantity=9, sale_price=10.0, sale_date="2023-01-15"),
    ]
    s = monthly_sales_summary(sales, 2024, 1)
    assert s.items_sold == 5
    assert s.gross_income == 350.0
    assert s.total_profit == pytest.approx(2 * 40 + 3 * -10)


def test_monthly_summary_accepts_string_filters(sale_factory):
    s = monthly_sales_summary([sale_factory()], "2024", "1")
    assert s.items_sold == 2


def test_monthly_summary_profit_skips_dangling_sales(sale_factory):
    sales = [sale_factory(product_name=None, acquisition_price=None, quantity=4, sale_price=25.0)]
    s = monthly_sales_summary(sales, 2024, 1)
    assert s.items_sold == 4
    assert s.gross_income == 100.0
    assert s.total_profit == 0


# ---------- sales performance ----------

def test_loss_is_reported_negative_and_flagged(sale_factory):
    rows = sales_performance([sale_factory(sale_price=50.0, acquisition_price=60.0, quantity=3)])
    assert rows[0].total_profit == -30
    assert rows[0].is_loss


def test_performance_groups_by_name_and_price_in_first_seen_order(sale_factory):
    sales = [
        sale_factory(id=1, product_name="B", sale_price=10.0, quantity=1),
        sale_factory(id=2, product_name="A", sale_price=10.0, quantity=1),
        sale_factory(id=3, product_name="B", sale_price=10.0, quantity=2),
        sale_factory(id=4, product_name="B", sale_price=12.0, quantity=1),
    ]
    rows = sales_performance(sales)
    assert [(r.name, r.selling_price, r.total_sales) for r in rows] == [
        ("B", 10.0, 3),
        ("A", 10.0, 1),
        ("B", 12.0, 1),
    ]


def test_performance_filters(sale_factory):
    sales = [
        sale_factory(id=1, client_name="Farm A", product_name="X", sale_date="2024-01-10"),
        sale_factory(id=2, client_name="Farm B", product_name="X", sale_date="2024-01-11"),
        sale_factory(id=3, client_name="Farm A", product_name="Y", sale_date="2024-01-12"),
        sale_factory(id=4, client_name="Farm A", product_name="X", sale_date="2024-03-01"),
    ]
    assert sum(r.total_sales for r in sales_performance(sales, ALL, ALL, ALL, ALL)) == 8
    assert sum(r.total_sales for r in sales_performance(sales, 2024, 1, ALL, ALL)) == 6
    assert sum(r.total_sales for r in sales_performance(sales, 2024, ALL, "Farm A", ALL)) == 6
    rows = sales_performance(sales, "2024", "1", "Farm A", "X")
    assert len(rows) == 1 and rows[0].total_sales == 2
    assert sales_performance(sales, 2024, 1, "Nobody", ALL) == []


def test_performance_uses_stored_sale_price_not_current_product_price(sale_factory):
    # product_selling_price is the live value; sale_price is what was charged
    sale = sale_factory(sale_price=90.0, product_selling_price=150.0)
    row = sales_performance([sale])[0]
    assert row.selling_price == 90.0
    assert row.total_revenue == 180.0


def test_performance_skips_sales_without_product(sale_factory):
    assert sales_performance([sale_factory(product_name=None, acquisition_price=None)]) == []


def test_performance_excludes_unparseable_dates_when_filtered(sale_factory):
    sales = [sale_factory(sale_date="garbage")]
    assert sales_performance(sales, 2024, 1) == []
    assert len(sales_performance(sales, ALL, ALL)) == 1


# ---------- batch grouping ----------

def test_group_batches_keeps_every_record_separate_by_default(product_factory):
    products = [
        product_factory(id=1, remaining=3, supplier_name="S1"),
        product_factory(id=2, remaining=4, supplier_name="S2"),
    ]
    groups = group_inventory_batches(products, ALL, ALL)
    assert len(groups) == 2
    assert [g.total_stock for g in groups] == [3, 4]
    assert all(len(g.batches) == 1 for g in groups)
    assert groups[0].batches[0].supplier == "S1"


def test_group_batches_merge_mode_folds_identical_batches(product_factory):
    products = [
        product_factory(id=1, remaining=3),
        product_factory(id=2, remaining=4),
        product_factory(id=3, remaining=5, acquisition_price=55.0),
    ]
    groups = group_inventory_batches(products, ALL, ALL, merge=True)
    assert len(groups) == 2
    assert groups[0].total_stock == 7
    assert [b.id for b in groups[0].batches] == [1, 2]
    assert groups[1].total_stock == 5


def test_group_batches_filters_by_purchase_period(product_factory):
    products = [
        product_factory(id=1, purchase_date="2024-01-05"),
        product_factory(id=2, purchase_date="2024-02-05"),
        product_factory(id=3, purchase_date="2023-01-05"),
    ]
    assert [g.batches[0].id for g in group_inventory_batches(products, 2024, 1)] == [1]
    assert [g.batches[0].id for g in group_inventory_batches(products, ALL, 1)] == [1, 3]
    assert [g.batches[0].id for g in group_inventory_batches(products, "2024", ALL)] == [1, 2]


def test_group_batches_output_shape(product_factory):
    g = group_inventory_batches([product_factory(expiration_date="2026-01-01", supplier_name="Acme")])[0]
    assert g.name == "X"
    assert g.acquisition_price == 60.0
    assert g.selling_price == 100.0
    assert g.expiration_date == "2026-01-01"
    assert g.total_stock == 10
    assert g.potential_profit == 400.0
    b = g.batches[0]
    assert (b.id, b.purchase_date, b.expiration_date, b.quantity, b.supplier) == (1, "2024-01-05", "2026-01-01", 10, "Acme")


def test_group_batches_is_idempotent(product_factory):
    products = [product_factory(id=i, remaining=i) for i in range(1, 5)]
    assert group_inventory_batches(products, 2024, 1) == group_inventory_batches(products, 2024, 1)


# ---------- filters & options ----------

def test_in_period_sentinels():
    assert in_period("2024-05-02", ALL, ALL)
    assert in_period("2024-05-02", "All", 5)
    assert in_period("2024-05-02", 2024, "5")
    assert not in_period("2024-05-02", 2023, ALL)
    assert not in_period(None, 2024, ALL)
    assert in_period(None, ALL, ALL)


def test_filter_products_by_period(product_factory):
    products = [product_factory(id=1, purchase_date="2024-01-05"), product_factory(id=2, purchase_date="bad")]
    assert [p["id"] for p in filter_products_by_period(products, 2024, 1)] == [1]


def test_distinct_years_descending(product_factory, sale_factory):
    products = [product_factory(purchase_date="2022-03-01"), product_factory(purchase_date="2024-01-01")]
    sales = [sale_factory(sale_date="2023-07-07"), sale_factory(sale_date="2024-02-02"), sale_factory(sale_date="x")]
    assert distinct_years(products, sales) == [2024, 2023, 2022]


def test_months_literal():
    assert months() == list(range(1, 13))


def test_distinct_clients_and_products(sale_factory):
    sales = [
        sale_factory(client_name="B", product_name="Y"),
        sale_factory(client_name="A", product_name="X"),
        sale_factory(client_name="B", product_name=None),
    ]
    assert distinct_clients(sales) == ["A", "B"]
    assert distinct_product_names(sales) == ["X", "Y"]
