from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Optional

from core.utils import parse_iso_date, to_naive_datetime

STATUS_NONE = "none"
STATUS_CRITICAL = "critical"
STATUS_WARNING = "warning"
STATUS_GOOD = "good"

DAYS_PER_MONTH = 30.5
CRITICAL_MONTHS = 12.0
WARNING_MONTHS = 18.0


def months_until(expiration_date: Any, reference_now: datetime) -> Optional[float]:
    exp = to_naive_datetime(expiration_date)
    now = to_naive_datetime(reference_now)
    if exp is None or now is None:
        return None
    return (exp - now) / timedelta(days=DAYS_PER_MONTH)


def classify_expiration(expiration_date: Any, reference_now: datetime) -> str:
    """
    Bucket a batch by time left before expiry:
      <= 12 months  -> critical (already expired counts here too)
      <= 18 months  -> warning
      >  18 months  -> good
    Missing or unparseable dates -> none.
    """
    months = months_until(expiration_date, reference_now)
    if months is None:
        return STATUS_NONE
    if months <= CRITICAL_MONTHS:
        return STATUS_CRITICAL
    if months <= WARNING_MONTHS:
        return STATUS_WARNING
    return STATUS_GOOD


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}" if n == 1 else f"{n} {unit}s"


def expiration_display_text(expiration_date: Any, reference_now: datetime) -> str:
    exp = parse_iso_date(expiration_date)
    now = parse_iso_date(reference_now)
    if exp is None or now is None:
        return "No expiration date"

    days = (exp - now).days
    if days < 0:
        return f"Expired {_plural(-days, 'day')} ago"
    if days == 0:
        return "Expires today!"
    if days <= 30:
        return f"Expires in {_plural(days, 'day')}"
    if days <= 365:
        return f"Expires in {_plural(days // 30, 'month')}"

    years = days // 365
    months = (days % 365) // 30
    text = f"Expires in {_plural(years, 'year')}"
    if months:
        text += f" and {_plural(months, 'month')}"
    return text
