"""DuckDB connection and transaction management."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import duckdb
from loguru import logger

from app.errors import Conflict
from app.models import ALL_DDL
from settings import DB_PATH

_local = threading.local()
_db_path = DB_PATH
_init_lock = threading.Lock()
_initialized: set[str] = set()


def configure(path: str) -> None:
    """Point new connections at another database file (tests, CLI overrides)."""
    global _db_path
    close_db()
    _db_path = path
    logger.debug("DB path set to {}", path)


def db_exists() -> bool:
    """Check if database file exists."""
    return Path(_db_path).exists()


def init_tables(conn: duckdb.DuckDBPyConnection) -> None:
    """Initialize all tables from DDL statements (idempotent - uses IF NOT EXISTS)."""
    for ddl in ALL_DDL:
        conn.execute(ddl)
    logger.info("DB tables initialized")


def _ensure_tables(conn: duckdb.DuckDBPyConnection) -> None:
    with _init_lock:
        if _db_path in _initialized:
            return
        if not db_exists():
            logger.warning("DB not found: {}. Creating empty DB.", _db_path)
        init_tables(conn)
        _initialized.add(_db_path)


def get_db() -> duckdb.DuckDBPyConnection:
    """Get thread-local connection."""
    conn = getattr(_local, "conn", None)
    if conn is None or getattr(_local, "path", None) != _db_path:
        conn = duckdb.connect(_db_path)
        _ensure_tables(conn)
        _local.conn = conn
        _local.path = _db_path
        _local.depth = 0
        logger.debug("DB connected: {} ({})", _db_path, threading.current_thread().name)
    return conn


def close_db() -> None:
    """Close thread-local connection."""
    if getattr(_local, "conn", None) is not None:
        _local.conn.close()
        _local.conn = None
        logger.debug("DB connection closed")


@contextmanager
def transaction() -> Iterator[duckdb.DuckDBPyConnection]:
    """Run the block in one transaction on this thread's connection.

    Nested blocks join the outer transaction. Write-write conflicts detected by
    DuckDB are rolled back and raised as ``Conflict``.
    """
    conn = get_db()
    if _local.depth:
        _local.depth += 1
        try:
            yield conn
        finally:
            _local.depth -= 1
        return

    conn.begin()
    _local.depth = 1
    try:
        try:
            yield conn
        except BaseException:
            conn.rollback()
            raise
        conn.commit()
    except (duckdb.TransactionException, duckdb.ConstraintException) as e:
        logger.warning("Transaction rolled back on concurrent write: {}", e)
        raise Conflict("Concurrent modification, retry the operation", reason=str(e)) from e
    finally:
        _local.depth = 0
