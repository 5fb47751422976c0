"""
Cache backend management for the transaction ledger.
This module mirrors db_engine.py: one lazily created, process-wide backend.
Uses Redis when CACHE_URL is configured, otherwise an in-process TTL cache.
"""

import logging
import threading
import time
from typing import Callable, Dict, Optional, Tuple

import redis
from redis.exceptions import RedisError

from config import get_settings
from errors import CacheError

logger = logging.getLogger(__name__)

# Global backend instance
_backend: Optional[object] = None


class MemoryCacheBackend:
    """Thread-safe in-process cache with per-key expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[str, Tuple[float, str]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        with self._lock:
            self._entries[key] = (self._clock() + ttl_seconds, value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)


class RedisCacheBackend:
    """
    Redis-backed cache shared between processes.
    Socket timeouts keep every call bounded; failures surface as CacheError.
    """

    def __init__(self, url: str, timeout_seconds: float, client: Optional[redis.Redis] = None):
        self._client = client if client is not None else redis.Redis.from_url(
            url,
            socket_timeout=timeout_seconds,
            socket_connect_timeout=timeout_seconds,
            decode_responses=True,
        )

    def get(self, key: str) -> Optional[str]:
        try:
            return self._client.get(key)
        except RedisError as e:
            raise CacheError(f"redis GET {key} failed: {e}") from e
        except UnicodeDecodeError as e:
            # decode_responses=True raises here for a value that is not UTF-8
            raise CacheError(f"redis GET {key} returned undecodable bytes: {e}") from e

    def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        try:
            self._client.setex(key, ttl_seconds, value)
        except RedisError as e:
            raise CacheError(f"redis SETEX {key} failed: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._client.delete(key)
        except RedisError as e:
            raise CacheError(f"redis DEL {key} failed: {e}") from e


def get_cache_backend():
    """Get or create the cache backend selected by settings."""
    global _backend
    if _backend is None:
        settings = get_settings()
        if settings.is_redis_configured:
            _backend = RedisCacheBackend(settings.cache_url, settings.cache_timeout_seconds)
            logger.info("Using Redis cache backend")
        else:
            _backend = MemoryCacheBackend()
            logger.info("Using in-process memory cache backend")
    return _backend


def reset_cache_backend():
    """Drop the current backend so the next call rebuilds it from settings."""
    global _backend
    _backend = None
