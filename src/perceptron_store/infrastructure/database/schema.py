"""SQLAlchemy Core table definitions for the weight graph.

One node table shared by all three layers, and one edge table per
layer class. Edge tables are indexed on ``from_id`` and ``to_id``
independently so lookups work from either direction, and carry a unique
``(from_id, to_id)`` index that upserts conflict on.
"""

from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Column,
    Double,
    Index,
    Integer,
    MetaData,
    SmallInteger,
    Table,
    Text,
)

from perceptron_store.domain.types import LayerClass

metadata = MetaData()

# SQLite only auto-assigns INTEGER PRIMARY KEY columns.
_Id = BigInteger().with_variant(Integer, "sqlite")

nodes = Table(
    "nodes",
    metadata,
    Column("id", _Id, primary_key=True, autoincrement=True),
    Column("layer", SmallInteger, nullable=False),  # Layer ordinal
    Column("key", Text, nullable=False),
    # AUTOINCREMENT keeps ids monotonic: a dropped max id is never reissued.
    sqlite_autoincrement=True,
)

Index("ix_nodes_key_layer", nodes.c.key, nodes.c.layer, unique=True)


def _edge_table(name: str) -> Table:
    table = Table(
        name,
        metadata,
        Column("id", _Id, primary_key=True, autoincrement=True),
        Column("from_id", BigInteger, nullable=False),
        Column("to_id", BigInteger, nullable=False),
        Column("strength", Double, nullable=False),
        sqlite_autoincrement=True,
    )
    Index(f"ix_{name}_from", table.c.from_id)
    Index(f"ix_{name}_to", table.c.to_id)
    Index(f"ix_{name}_pair", table.c.from_id, table.c.to_id, unique=True)
    return table


input_hidden = _edge_table(LayerClass.INPUT_TO_HIDDEN.value)
hidden_output = _edge_table(LayerClass.HIDDEN_TO_OUTPUT.value)

edge_tables: dict[LayerClass, Table] = {
    LayerClass.INPUT_TO_HIDDEN: input_hidden,
    LayerClass.HIDDEN_TO_OUTPUT: hidden_output,
}
