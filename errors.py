"""
Error taxonomy for the transaction ledger.

Validation and not-found errors are resolved inside the service layer and
returned as structured results. Store errors abort the current request only.
Cache errors never leave the cache layer.
"""

from typing import Dict, Optional


class LedgerError(Exception):
    """Base class for all ledger errors."""

    message = "Ledger error"

    def __init__(self, message: Optional[str] = None, errors: Optional[Dict[str, str]] = None):
        self.message = message or self.message
        self.errors = errors or {}
        super().__init__(self.message)


class ValidationError(LedgerError):
    """Caller-supplied data failed a schema or business rule."""

    message = "Invalid transaction fields"


class NotFoundError(LedgerError):
    """Target transaction(s) do not exist or are not owned by the caller."""

    message = "Transaction not found"


class StoreError(LedgerError):
    """The durable store failed (I/O, constraint or timeout)."""

    message = "Internal Server Error"


class CacheError(LedgerError):
    """The cache backend is unavailable or timed out."""

    message = "Cache unavailable"
