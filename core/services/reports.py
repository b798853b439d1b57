"""
Report aggregation over in-memory product and sale records.

Everything here is a pure function of its arguments: the pages fetch whole
collections through the gateway and hand them over on every render. Filter
arguments accept the "all" sentinel to leave an axis unconstrained.

Record keys (as returned by core.gateway):
  product: id, name, selling_price, acquisition_price, remaining,
           purchase_date, expiration_date, supplier_name
  sale:    product_id, product_name, client_name, quantity, sale_date,
           sale_price, acquisition_price (joined from the product when read)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from core.utils import parse_iso_date

ALL = "all"


@dataclass
class BatchEntry:
    id: Any
    purchase_date: Optional[str]
    expiration_date: Optional[str]
    quantity: int
    supplier: Optional[str]


@dataclass
class InventoryBatchGroup:
    name: str
    acquisition_price: float
    selling_price: float
    expiration_date: Optional[str]
    total_stock: int = 0
    batches: list[BatchEntry] = field(default_factory=list)

    @property
    def potential_profit(self) -> float:
        return (self.selling_price - self.acquisition_price) * self.total_stock


@dataclass
class PerformanceRow:
    name: Optional[str]
    selling_price: float
    acquisition_price: float
    total_sales: int = 0
    total_revenue: float = 0.0
    total_cost: float = 0.0
    total_profit: float = 0.0

    @property
    def is_loss(self) -> bool:
        return self.total_profit < 0


@dataclass(frozen=True)
class InventorySummary:
    total_stock: int
    inventory_value: float


@dataclass(frozen=True)
class MonthlySalesSummary:
    items_sold: int
    gross_income: float
    total_profit: float


# -------------------------
# Filters
# -------------------------

def is_all(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip().lower() == ALL)


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def in_period(date_value: Any, year_filter: Any = ALL, month_filter: Any = ALL) -> bool:
    """
    True when the date falls in the given year/month. An unparseable date only
    passes when both axes are "all".
    """
    year_all, month_all = is_all(year_filter), is_all(month_filter)
    if year_all and month_all:
        return True

    d = parse_iso_date(date_value)
    if d is None:
        return False
    if not year_all and d.year != _as_int(year_filter):
        return False
    if not month_all and d.month != _as_int(month_filter):
        return False
    return True


def filter_products_by_period(products: Iterable[Mapping], year_filter: Any = ALL, month_filter: Any = ALL) -> list[Mapping]:
    return [p for p in products if in_period(p.get("purchase_date"), year_filter, month_filter)]


def filter_sales_by_period(sales: Iterable[Mapping], year_filter: Any = ALL, month_filter: Any = ALL) -> list[Mapping]:
    return [s for s in sales if in_period(s.get("sale_date"), year_filter, month_filter)]


# -------------------------
# Inventory
# -------------------------

def group_inventory_batches(
    products: Iterable[Mapping],
    year_filter: Any = ALL,
    month_filter: Any = ALL,
    *,
    merge: bool = False,
) -> list[InventoryBatchGroup]:
    """
    Group product batches for the inventory view.

    With merge=False the key carries the product id, so no two records ever
    share a group (each product is a one-batch group). merge=True drops the id
    and folds batches with identical name, prices, purchase and expiration dates.
    """
    groups: dict[tuple, InventoryBatchGroup] = {}

    for p in filter_products_by_period(products, year_filter, month_filter):
        key = (
            p.get("name"),
            float(p.get("acquisition_price") or 0),
            float(p.get("selling_price") or 0),
            p.get("purchase_date"),
            p.get("expiration_date"),
        )
        if not merge:
            key = (p.get("id"),) + key

        g = groups.get(key)
        if g is None:
            g = InventoryBatchGroup(
                name=str(p.get("name")),
                acquisition_price=float(p.get("acquisition_price") or 0),
                selling_price=float(p.get("selling_price") or 0),
                expiration_date=p.get("expiration_date"),
            )
            groups[key] = g

        remaining = int(p.get("remaining") or 0)
        g.total_stock += remaining
        g.batches.append(
            BatchEntry(
                id=p.get("id"),
                purchase_date=p.get("purchase_date"),
                expiration_date=p.get("expiration_date"),
                quantity=remaining,
                supplier=p.get("supplier_name"),
            )
        )

    return list(groups.values())


def inventory_summary(products: Iterable[Mapping]) -> InventorySummary:
    total_stock = 0
    value = 0.0
    for p in products:
        remaining = int(p.get("remaining") or 0)
        total_stock += remaining
        value += float(p.get("selling_price") or 0) * remaining
    return InventorySummary(total_stock=total_stock, inventory_value=value)


# -------------------------
# Sales
# -------------------------

def _has_product(sale: Mapping) -> bool:
    return sale.get("product_name") is not None and sale.get("acquisition_price") is not None


def sales_performance(
    sales: Iterable[Mapping],
    year_filter: Any = ALL,
    month_filter: Any = ALL,
    client_filter: Any = ALL,
    product_filter: Any = ALL,
) -> list[PerformanceRow]:
    """
    Per (product name, sale price) totals. Cost uses the acquisition price joined
    from the product when the sales were read, so editing a product's cost
    later changes past profit. Sales whose product no longer exists are skipped.
    """
    rows: dict[tuple, PerformanceRow] = {}

    for s in filter_sales_by_period(sales, year_filter, month_filter):
        if not is_all(client_filter) and s.get("client_name") != client_filter:
            continue
        if not is_all(product_filter) and s.get("product_name") != product_filter:
            continue
        if not _has_product(s):
            continue

        price = float(s.get("sale_price") or 0)
        cost = float(s.get("acquisition_price") or 0)
        qty = int(s.get("quantity") or 0)

        key = (s.get("product_name"), price)
        row = rows.get(key)
        if row is None:
            row = PerformanceRow(name=s.get("product_name"), selling_price=price, acquisition_price=cost)
            rows[key] = row

        row.total_sales += qty
        row.total_revenue += qty * price
        row.total_cost += qty * cost
        row.total_profit += qty * (price - cost)

    return list(rows.values())


def monthly_sales_summary(sales: Iterable[Mapping], year: Any, month: Any) -> MonthlySalesSummary:
    items = 0
    gross = 0.0
    profit = 0.0
    for s in filter_sales_by_period(sales, year, month):
        qty = int(s.get("quantity") or 0)
        price = float(s.get("sale_price") or 0)
        items += qty
        gross += qty * price
        if _has_product(s):
            profit += qty * (price - float(s.get("acquisition_price") or 0))
    return MonthlySalesSummary(items_sold=items, gross_income=gross, total_profit=profit)


# -------------------------
# Filter options
# -------------------------

def distinct_years(products: Iterable[Mapping], sales: Iterable[Mapping]) -> list[int]:
    years: set[int] = set()
    for p in products:
        d = parse_iso_date(p.get("purchase_date"))
        if d is not None:
            years.add(d.year)
    for s in sales:
        d = parse_iso_date(s.get("sale_date"))
        if d is not None:
            years.add(d.year)
    return sorted(years, reverse=True)


def months() -> list[int]:
    return list(range(1, 13))


def distinct_clients(sales: Iterable[Mapping]) -> list[str]:
    return sorted({str(s["client_name"]) for s in sales if s.get("client_name")})


def distinct_product_names(sales: Iterable[Mapping]) -> list[str]:
    return sorted({str(s["product_name"]) for s in sales if s.get("product_name")})
