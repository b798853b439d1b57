from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Mapping, Optional

from core.errors import ValidationError
from core.utils import parse_iso_date

SHORT_RECEIPT_MAX_SALES = 5


@dataclass
class ReceiptLine:
    name: Optional[str]
    price: float
    quantity: int = 0
    total: float = 0.0


@dataclass
class Receipt:
    number: str
    client_name: str
    date_display: str
    is_short: bool
    lines: list[ReceiptLine] = field(default_factory=list)

    @property
    def total_amount(self) -> float:
        return sum(line.total for line in self.lines)

    @property
    def paper_hint(self) -> str:
        if self.is_short:
            return "Please load 9.5 × 5.5 inch paper for short receipt."
        return "Please load 9.5 × 11 inch paper for full receipt."


def receipt_number(now: datetime) -> str:
    millis = int(now.timestamp() * 1000)
    return f"ST-{now.year}-{str(millis)[-6:]}"


def _format_date(d) -> str:
    return d.strftime("%B %d, %Y")


def build_receipt(sales: Iterable[Mapping], client_name: str, now: datetime) -> Receipt:
    """
    Receipt for a set of sales to one client. Sales of the same product at the
    same price collapse into one line.
    """
    selected = list(sales)
    if not selected:
        raise ValidationError("Select at least one sale for the receipt.")

    lines: dict[tuple, ReceiptLine] = {}
    for s in selected:
        price = float(s.get("sale_price") or 0)
        qty = int(s.get("quantity") or 0)
        key = (s.get("product_name"), price)
        line = lines.get(key)
        if line is None:
            line = ReceiptLine(name=s.get("product_name"), price=price)
            lines[key] = line
        line.quantity += qty
        line.total += qty * price

    dates = [d for d in (parse_iso_date(s.get("sale_date")) for s in selected) if d is not None]
    if not dates:
        date_display = _format_date(now)
    elif min(dates) == max(dates):
        date_display = _format_date(min(dates))
    else:
        date_display = f"{_format_date(min(dates))} to {_format_date(max(dates))}"

    return Receipt(
        number=receipt_number(now),
        client_name=client_name,
        date_display=date_display,
        is_short=len(selected) <= SHORT_RECEIPT_MAX_SALES,
        lines=list(lines.values()),
    )
