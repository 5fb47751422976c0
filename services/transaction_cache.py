"""
Owner-scoped, cache-aside storage of transaction lists.

Each owner's full ordered list is cached as one JSON blob with a fixed TTL.
The cache is never patched in place: writers invalidate, readers repopulate.
Backend failures are logged and degrade to a miss.
"""

import logging
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from cache_engine import get_cache_backend
from config import get_settings
from errors import CacheError
from models import TransactionRead

logger = logging.getLogger(__name__)

_TRANSACTION_LIST = TypeAdapter(List[TransactionRead])


class TransactionCache:
    """Cache of each owner's ordered transaction list."""

    KEY_PREFIX = "transactions"

    def __init__(self, backend=None, ttl_seconds: Optional[int] = None):
        self.backend = backend if backend is not None else get_cache_backend()
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else get_settings().cache_ttl_seconds

    @classmethod
    def key_for(cls, owner_id: str) -> str:
        return f"{cls.KEY_PREFIX}:{owner_id}"

    def get(self, owner_id: str) -> Optional[List[TransactionRead]]:
        """Return the cached list, or None on miss or cache failure."""
        key = self.key_for(owner_id)
        try:
            raw = self.backend.get(key)
        except CacheError as e:
            logger.warning(f"Cache read failed for {key}, treating as miss: {e}")
            return None

        if raw is None:
            return None

        try:
            return _TRANSACTION_LIST.validate_json(raw)
        except PydanticValidationError as e:
            logger.warning(f"Discarding undecodable cache entry {key}: {e}")
            return None

    def set(self, owner_id: str, transactions: List[TransactionRead]) -> None:
        """Store the full ordered list for an owner."""
        key = self.key_for(owner_id)
        try:
            self.backend.setex(key, self.ttl_seconds, _TRANSACTION_LIST.dump_json(transactions).decode())
        except CacheError as e:
            logger.warning(f"Cache write failed for {key}: {e}")

    def invalidate(self, owner_id: str) -> None:
        """Remove the owner's cached list."""
        key = self.key_for(owner_id)
        try:
            self.backend.delete(key)
        except CacheError as e:
            logger.warning(f"Cache invalidation failed for {key}: {e}")
