"""
Database engine and session management for the transaction ledger.
Uses SQLModel over SQLAlchemy; SQLite is the default backend.
Every store call is bounded by db_timeout_seconds: lock waits on SQLite,
connect and statement timeouts on server databases. SQLite also runs in
Write-Ahead Logging (WAL) mode.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional
import logging
import math

from sqlalchemy.engine import make_url
from sqlmodel import SQLModel, Session, create_engine

from config import get_settings

logger = logging.getLogger(__name__)

# Global engine instance
_engine: Optional[object] = None


def _timeout_connect_args(database_url: str, timeout_seconds: float) -> Dict[str, Any]:
    """Driver arguments that bound connecting and statement execution."""
    backend = make_url(database_url).get_backend_name()
    timeout_ms = int(timeout_seconds * 1000)
    whole_seconds = max(1, math.ceil(timeout_seconds))

    if backend == "sqlite":
        return {
            "check_same_thread": False,  # Allow use across threads
            "timeout": timeout_seconds,
        }
    if backend == "postgresql":
        return {
            "connect_timeout": whole_seconds,
            "options": f"-c statement_timeout={timeout_ms} -c lock_timeout={timeout_ms}",
        }
    if backend in ("mysql", "mariadb"):
        return {
            "connect_timeout": whole_seconds,
            "read_timeout": whole_seconds,
            "write_timeout": whole_seconds,
        }

    logger.warning(f"No driver timeouts known for {backend}; only the pool wait is bounded")
    return {}


def get_engine():
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        settings = get_settings()
        engine_args = {
            "echo": settings.db_echo,
            "connect_args": _timeout_connect_args(settings.database_url, settings.db_timeout_seconds),
        }
        if not settings.is_sqlite:
            engine_args["pool_timeout"] = settings.db_timeout_seconds
            engine_args["pool_pre_ping"] = True
        _engine = create_engine(settings.database_url, **engine_args)
        if settings.is_sqlite:
            _enable_wal_mode(settings.db_timeout_seconds)
    return _engine


def _enable_wal_mode(timeout_seconds: float):
    """Enable SQLite WAL mode for improved concurrent read/write performance."""
    if _engine is None:
        return

    try:
        with _engine.connect() as conn:
            conn.exec_driver_sql("PRAGMA journal_mode=WAL")
            conn.exec_driver_sql(f"PRAGMA busy_timeout={int(timeout_seconds * 1000)}")
            logger.info("SQLite WAL mode enabled for concurrent access")
    except Exception as e:
        logger.warning(f"Could not enable WAL mode: {e}")


def reset_engine():
    """Dispose of the current engine so the next call rebuilds it from settings."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None


def init_db():
    """Initialize the database and create all tables."""
    from models import Transaction  # noqa: F401  (registers the table)

    engine = get_engine()
    SQLModel.metadata.create_all(engine)
    logger.info("Database initialized")


def get_session():
    """Get a new database session."""
    return Session(get_engine())


@contextmanager
def session_scope(session: Optional[Session] = None) -> Iterator[Session]:
    """
    Run a unit of work atomically.

    Commits when the block exits cleanly and rolls back on any error. When an
    existing session is passed in, the caller owns its lifetime and it is not
    closed here.
    """
    owned = session is None
    sess = session if session is not None else get_session()
    try:
        yield sess
        sess.commit()
    except Exception:
        sess.rollback()
        raise
    finally:
        if owned:
            sess.close()
