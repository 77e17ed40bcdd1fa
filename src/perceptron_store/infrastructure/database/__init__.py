"""Database engine, schema, pool, and schema manager via SQLAlchemy Core."""

from perceptron_store.infrastructure.database.engine import create_store_engine
from perceptron_store.infrastructure.database.manager import SchemaManager
from perceptron_store.infrastructure.database.pool import ConnectionPool
from perceptron_store.infrastructure.database.schema import (
    edge_tables,
    hidden_output,
    input_hidden,
    metadata,
    nodes,
)

__all__ = [
    "ConnectionPool",
    "SchemaManager",
    "create_store_engine",
    "edge_tables",
    "hidden_output",
    "input_hidden",
    "metadata",
    "nodes",
]
