"""SQLAlchemy Core table definitions for the local ledger database."""

from __future__ import annotations

from sqlalchemy import Column, Integer, LargeBinary, MetaData, Table, Text

metadata = MetaData()

world_state = Table(
    "world_state",
    metadata,
    Column("key", Text, primary_key=True),
    Column("value", LargeBinary, nullable=False),
    Column("txid", Text, nullable=False),
    Column("modified", Text, nullable=False),
)

chaincode_events = Table(
    "chaincode_events",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("txid", Text, nullable=False),
    Column("function", Text, nullable=False),
    Column("name", Text, nullable=False),
    Column("payload", Text, nullable=False),  # JSON
    Column("created", Text, nullable=False),
)
