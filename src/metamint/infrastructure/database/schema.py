"""SQLAlchemy Core table definitions for the local snapshot store."""

from __future__ import annotations

from sqlalchemy import Column, MetaData, Table, Text

metadata = MetaData()

snapshots = Table(
    "snapshots",
    metadata,
    Column("key", Text, primary_key=True),
    Column("value", Text, nullable=False),  # JSON-serialized SchemaDescriptor
    Column("modified", Text, nullable=False),
)
