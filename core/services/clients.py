from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Optional

from core import gateway
from core.errors import ValidationError


@dataclass
class ClientInput:
    name: str
    address: Optional[str] = None
    contact_number: Optional[str] = None
    account: Optional[str] = None
    tin_number: Optional[str] = None
    contact_person: Optional[str] = None


@dataclass
class ClientPage:
    rows: list[dict[str, Any]] = field(default_factory=list)
    page: int = 1
    total_items: int = 0
    total_pages: int = 0


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s if s else None


def add_client(conn, data: ClientInput) -> int:
    name = _clean(data.name)
    if not name:
        raise ValidationError("Client name is required.")
    return gateway.insert_client(
        conn,
        {
            "name": name,
            "address": _clean(data.address),
            "contact_number": _clean(data.contact_number),
            "account": _clean(data.account),
            "tin_number": _clean(data.tin_number),
            "contact_person": _clean(data.contact_person),
        },
    )


def page_count(total_items: int, per_page: int) -> int:
    if per_page <= 0:
        raise ValidationError("Items per page must be > 0.")
    return math.ceil(max(0, int(total_items)) / int(per_page))


def clamp_page(page: int, total_pages: int) -> int:
    if total_pages <= 0:
        return 1
    return min(max(1, int(page)), int(total_pages))


def list_clients_page(conn, page: int = 1, per_page: int = 10) -> ClientPage:
    _, total = gateway.list_clients(conn, offset=0, limit=0)
    pages = page_count(total, per_page)
    current = clamp_page(page, pages)

    rows, total = gateway.list_clients(conn, offset=(current - 1) * per_page, limit=per_page)
    return ClientPage(rows=rows, page=current, total_items=total, total_pages=pages)


def all_client_names(conn) -> list[str]:
    rows, _ = gateway.list_clients(conn)
    return [str(r["name"]) for r in rows]
