"""Pytest fixtures for test isolation.

Each test gets its own SQLite file and a fresh in-process cache. The engine
and cache backend are module-level singletons, so they are reset around every
test after the settings have been pointed at the temporary directory.
"""

import datetime as dt
import uuid
from decimal import Decimal

import pytest

from cache_engine import MemoryCacheBackend, reset_cache_backend
from config import reload_settings
from db_engine import init_db, reset_engine
from models import TransactionRead
from repositories import TransactionRepository
from services import TransactionCache, TransactionService

OWNER = "owner-1"
OTHER_OWNER = "owner-2"


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path, monkeypatch):
    """Point settings at a per-test database and drop cached singletons."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'ledger.db'}")
    monkeypatch.delenv("CACHE_URL", raising=False)
    reload_settings()
    reset_engine()
    reset_cache_backend()
    yield
    reset_engine()
    reset_cache_backend()


@pytest.fixture
def database():
    init_db()


@pytest.fixture
def cache():
    return TransactionCache(MemoryCacheBackend(), ttl_seconds=600)


@pytest.fixture
def service(database, cache):
    return TransactionService(TransactionRepository, cache)


def make_read(label, day, amount="1.00", month=1):
    """Build a read-model transaction dated 2024-<month>-<day>."""
    return TransactionRead(
        id=uuid.uuid4(),
        amount=Decimal(amount),
        description=label,
        date=dt.date(2024, month, day),
    )
