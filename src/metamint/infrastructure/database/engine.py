"""Database engine setup for SQLite with WAL mode.

The local cache lives in a single SQLite file (default
``.metamint/cache.db``). WAL mode lets a reader see the last committed
snapshot while a writer is mid-transaction.

SQLAlchemy Core (not ORM) is used because one key-value table needs no
session management or identity maps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from metamint.infrastructure.database.schema import metadata


def create_db_engine(db_path: Path, *, timeout: float | None = None) -> Engine:
    """Create a SQLite engine with WAL mode enabled.

    *timeout* bounds how long a write waits on a locked database.
    """
    connect_args: dict[str, Any] = {}
    if timeout is not None:
        connect_args["timeout"] = timeout
    engine = create_engine(f"sqlite:///{db_path}", echo=False, connect_args=connect_args)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(db_path: Path, *, timeout: float | None = None) -> Engine:
    """Create the parent directory and all tables at *db_path*.

    Idempotent — safe to call on an existing cache file.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path, timeout=timeout)
    metadata.create_all(engine)
    return engine
