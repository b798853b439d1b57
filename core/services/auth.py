from __future__ import annotations

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from core import gateway
from core.errors import ValidationError

logger = logging.getLogger(__name__)

ROLES = ("admin", "manager", "agent", "client")

# Landing page per role (paths are relative to app.py).
ROLE_HOME = {
    "admin": "pages/1_📦_Products.py",
    "manager": "pages/4_📊_Reports.py",
    "agent": "pages/2_🛒_Sales.py",
    "client": "pages/6_🛍️_Storefront.py",
}


def create_user(conn, email: str, password: str, role: str) -> None:
    email = str(email or "").strip().lower()
    if "@" not in email:
        raise ValidationError("A valid email address is required.")
    if not password:
        raise ValidationError("Password is required.")
    if role not in ROLES:
        raise ValidationError(f"Unknown role: {role}")
    gateway.upsert_user(conn, email=email, password_hash=generate_password_hash(password), role=role)


def authenticate(conn, email: str, password: str) -> str:
    """Check the credentials and return the user's role."""
    user = gateway.get_user(conn, email)
    if user is None or not check_password_hash(str(user["password_hash"]), password or ""):
        logger.warning("Failed sign-in for %r", email)
        raise ValidationError("Invalid email or password.")
    logger.info("Signed in %r as %s", user["email"], user["role"])
    return str(user["role"])


def home_page_for_role(role: str) -> str:
    try:
        return ROLE_HOME[role]
    except KeyError:
        raise ValidationError(f"Unknown role: {role}") from None
