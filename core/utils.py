from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional


def iso_now() -> str:
    # Use UTC ISO timestamps for consistency.
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def parse_iso_date(value: Any) -> Optional[date]:
    """
    Accepts a date, a datetime or an ISO string ("2024-01-05", "2024-01-05T10:00:00").
    Returns None for missing or unparseable values instead of raising.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if not s:
        return None
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None


def to_naive_datetime(value: Any) -> Optional[datetime]:
    """Date-like value as a naive datetime (aware values are converted to UTC first)."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    d = parse_iso_date(value)
    if d is None:
        return None
    return datetime(d.year, d.month, d.day)


def format_currency(value: Optional[float], symbol: str = "₱") -> str:
    amount = float(value or 0.0)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"
