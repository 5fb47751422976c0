from decimal import Decimal

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from cache_engine import MemoryCacheBackend, RedisCacheBackend, get_cache_backend
from config import reload_settings
from errors import CacheError
from services import TransactionCache
from tests.conftest import OTHER_OWNER, OWNER, make_read


class FakeClock:

    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class UnavailableBackend:
    """Backend whose every call fails like an unreachable server."""

    def get(self, key):
        raise CacheError(f"GET {key} timed out")

    def setex(self, key, ttl_seconds, value):
        raise CacheError(f"SETEX {key} timed out")

    def delete(self, key):
        raise CacheError(f"DEL {key} timed out")


class BrokenRedis:

    def get(self, key):
        raise RedisConnectionError("Connection refused")

    def setex(self, key, ttl, value):
        raise RedisConnectionError("Connection refused")

    def delete(self, key):
        raise RedisConnectionError("Connection refused")


def test_miss_then_hit(cache):
    assert cache.get(OWNER) is None
    items = [make_read("a", 10, amount="-50.00"), make_read("b", 5, amount="100.00")]
    cache.set(OWNER, items)
    cached = cache.get(OWNER)
    assert [item.id for item in cached] == [item.id for item in items]
    assert cached[0].amount == Decimal("-50.00")
    assert isinstance(cached[0].amount, Decimal)


def test_entries_are_owner_scoped(cache):
    cache.set(OWNER, [make_read("a", 10)])
    assert cache.get(OTHER_OWNER) is None
    assert TransactionCache.key_for(OWNER) == f"transactions:{OWNER}"


def test_invalidate_removes_entry(cache):
    cache.set(OWNER, [make_read("a", 10)])
    cache.invalidate(OWNER)
    assert cache.get(OWNER) is None


def test_empty_list_is_a_hit(cache):
    cache.set(OWNER, [])
    assert cache.get(OWNER) == []


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = TransactionCache(MemoryCacheBackend(clock=clock), ttl_seconds=600)
    cache.set(OWNER, [make_read("a", 10)])
    clock.now += 599
    assert cache.get(OWNER) is not None
    clock.now += 1
    assert cache.get(OWNER) is None


def test_unavailable_backend_degrades_to_miss():
    cache = TransactionCache(UnavailableBackend(), ttl_seconds=60)
    cache.set(OWNER, [make_read("a", 10)])
    assert cache.get(OWNER) is None
    cache.invalidate(OWNER)


def test_undecodable_entry_is_a_miss(cache):
    cache.backend.setex(TransactionCache.key_for(OWNER), 60, "{not json")
    assert cache.get(OWNER) is None


def test_redis_errors_become_cache_errors():
    backend = RedisCacheBackend("redis://localhost:6379/0", 0.1, client=BrokenRedis())
    with pytest.raises(CacheError):
        backend.get("k")
    with pytest.raises(CacheError):
        backend.setex("k", 60, "v")
    with pytest.raises(CacheError):
        backend.delete("k")

    cache = TransactionCache(backend, ttl_seconds=60)
    assert cache.get(OWNER) is None
    cache.invalidate(OWNER)


class NonUtf8Redis:

    def get(self, key):
        return b"\xff\xfe".decode("utf-8")


def test_non_utf8_redis_value_is_a_miss():
    backend = RedisCacheBackend("redis://localhost:6379/0", 0.1, client=NonUtf8Redis())
    with pytest.raises(CacheError):
        backend.get("k")

    cache = TransactionCache(backend, ttl_seconds=60)
    assert cache.get(OWNER) is None


def test_memory_backend_is_the_default():
    assert isinstance(get_cache_backend(), MemoryCacheBackend)
    assert get_cache_backend() is get_cache_backend()


def test_redis_backend_selected_when_configured(monkeypatch):
    monkeypatch.setenv("CACHE_URL", "redis://localhost:6399/0")
    reload_settings()
    assert isinstance(get_cache_backend(), RedisCacheBackend)
