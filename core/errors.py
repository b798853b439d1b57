from __future__ import annotations

from typing import Optional


class GatewayError(Exception):
    """Any failure reported by the data store (sqlite error, missing row, conflict)."""

    def __init__(self, message: str, *, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class StockConflictError(GatewayError):
    """The stock value changed between read and write."""


class ValidationError(ValueError):
    """Bad input detected before anything reaches the data store."""
