"""Durable key-value snapshot store for schema descriptors.

Survives process restarts. The pipeline uses one logical key
(``"metadata"`` by default). Writes commit before :meth:`LocalCache.set`
returns and any database failure is raised as :class:`CacheError`; a
write is never dropped silently.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError

from metamint.domain.errors import CacheError
from metamint.domain.schema import SchemaDescriptor
from metamint.infrastructure.database.engine import init_database
from metamint.infrastructure.database.schema import snapshots

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

DEFAULT_KEY = "metadata"


def serialize(descriptor: SchemaDescriptor) -> str:
    """JSON text stored for *descriptor*; field order is preserved."""
    return descriptor.model_dump_json(by_alias=True)


def deserialize(raw: str) -> SchemaDescriptor:
    return SchemaDescriptor.model_validate_json(raw)


class LocalCache:
    """SQLite-backed snapshot store.

    Created once per session and closed with it.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def open(cls, db_path: Path, *, timeout: float | None = None) -> LocalCache:
        """Open (creating if needed) the cache database at *db_path*."""
        try:
            engine = init_database(db_path, timeout=timeout)
        except (SQLAlchemyError, OSError) as exc:
            raise CacheError(f"Cannot open cache at {db_path}", cause=exc) from exc
        return cls(engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    def set(self, key: str, descriptor: SchemaDescriptor) -> None:
        """Store *descriptor* under *key*, replacing any previous value."""
        value = serialize(descriptor)
        modified = datetime.now(UTC).isoformat()
        stmt = insert(snapshots).values(key=key, value=value, modified=modified)
        stmt = stmt.on_conflict_do_update(
            index_elements=[snapshots.c.key],
            set_={"value": value, "modified": modified},
        )
        try:
            with self._engine.begin() as conn:
                conn.execute(stmt)
        except SQLAlchemyError as exc:
            raise CacheError(f"Failed to write snapshot {key!r}", cause=exc) from exc
        logger.debug("Cached snapshot %s (%d bytes)", key, len(value))

    def get(self, key: str) -> SchemaDescriptor | None:
        """Return the snapshot stored under *key*, or None."""
        try:
            with self._engine.connect() as conn:
                raw = conn.execute(
                    select(snapshots.c.value).where(snapshots.c.key == key)
                ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise CacheError(f"Failed to read snapshot {key!r}", cause=exc) from exc
        if raw is None:
            return None
        try:
            return deserialize(raw)
        except ValidationError as exc:
            raise CacheError(f"Corrupt snapshot under {key!r}", cause=exc) from exc

    def delete(self, key: str) -> None:
        try:
            with self._engine.begin() as conn:
                conn.execute(delete(snapshots).where(snapshots.c.key == key))
        except SQLAlchemyError as exc:
            raise CacheError(f"Failed to delete snapshot {key!r}", cause=exc) from exc

    def close(self) -> None:
        self._engine.dispose()
