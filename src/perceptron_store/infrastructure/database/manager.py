"""SchemaManager — idempotent creation and full reset of the store tables."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import inspect

from perceptron_store.infrastructure.database.schema import metadata

if TYPE_CHECKING:
    from perceptron_store.infrastructure.database.pool import ConnectionPool

logger = logging.getLogger(__name__)


class SchemaManager:
    """Creates, inspects and resets the node and edge tables."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def ensure_schema(self) -> None:
        """Create any missing tables and indexes.

        Idempotent — existing tables and their rows are left untouched,
        so this is safe to call on every startup.
        """
        with self._pool.acquire() as conn:
            metadata.create_all(conn, checkfirst=True)
        logger.debug("Schema ensured: %s", ", ".join(sorted(metadata.tables)))

    def reset(self) -> None:
        """Drop and recreate every table, destroying all nodes and edges.

        For tests and bootstrap only. Callers holding cached node ids
        (see :class:`NodeRegistry`) must clear them afterwards.
        """
        with self._pool.acquire() as conn:
            metadata.drop_all(conn, checkfirst=True)
            metadata.create_all(conn)
        logger.warning("Store reset: all nodes and edges dropped")

    def existing_tables(self) -> set[str]:
        """Names of store tables currently present in the database."""
        with self._pool.acquire() as conn:
            present = set(inspect(conn).get_table_names())
        return present & set(metadata.tables)
