from __future__ import annotations

from typing import Iterable, Mapping, Optional

DEFAULT_TIER = "default"


def resolve_client_tier(email: Optional[str], tiers: Iterable[str]) -> str:
    """
    Pricing tier for a signed-in client: the email's local part when it names a
    known tier ("vets@clinic.ph" -> "vets"), otherwise the default tier.
    Resolve once at sign-in and keep the result in the session.
    """
    if not email or "@" not in str(email):
        return DEFAULT_TIER
    local = str(email).split("@", 1)[0].strip().lower()
    known = {str(t).strip().lower() for t in tiers}
    return local if local in known else DEFAULT_TIER


def price_for(product: Mapping, client_tier: Optional[str]) -> float:
    tier_prices = product.get("tier_prices") or {}
    if client_tier and client_tier in tier_prices:
        return float(tier_prices[client_tier])
    return float(product.get("selling_price") or 0)
