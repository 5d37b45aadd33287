"""SQLite engine and snapshot table via SQLAlchemy Core."""

from metamint.infrastructure.database.engine import create_db_engine, init_database
from metamint.infrastructure.database.schema import metadata, snapshots

__all__ = [
    "create_db_engine",
    "init_database",
    "metadata",
    "snapshots",
]
