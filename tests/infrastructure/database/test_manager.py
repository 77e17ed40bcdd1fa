"""Tests for SchemaManager."""

from collections.abc import Callable

from sqlalchemy import Table, insert

from perceptron_store.config.settings import StoreSettings
from perceptron_store.infrastructure.database.manager import SchemaManager
from perceptron_store.infrastructure.database.pool import ConnectionPool
from perceptron_store.infrastructure.database.schema import input_hidden, nodes

RowCount = Callable[[ConnectionPool, Table], int]


class TestEnsureSchema:
    def test_creates_tables(self, settings: StoreSettings) -> None:
        with ConnectionPool(settings) as p:
            manager = SchemaManager(p)
            assert manager.existing_tables() == set()
            manager.ensure_schema()
            assert manager.existing_tables() == {"nodes", "input_hidden", "hidden_output"}

    def test_idempotent_and_preserves_rows(self, pool: ConnectionPool, row_count: RowCount) -> None:
        with pool.acquire() as conn:
            conn.execute(insert(nodes).values(key="buy", layer=0))
        SchemaManager(pool).ensure_schema()
        SchemaManager(pool).ensure_schema()
        assert row_count(pool, nodes) == 1


class TestReset:
    def test_drops_all_rows(self, pool: ConnectionPool, row_count: RowCount) -> None:
        with pool.acquire() as conn:
            conn.execute(insert(nodes).values(key="buy", layer=0))
            conn.execute(insert(input_hidden).values(from_id=1, to_id=2, strength=0.5))
        SchemaManager(pool).reset()
        assert row_count(pool, nodes) == 0
        assert row_count(pool, input_hidden) == 0

    def test_tables_usable_after_reset(self, pool: ConnectionPool, row_count: RowCount) -> None:
        manager = SchemaManager(pool)
        manager.reset()
        assert manager.existing_tables() == {"nodes", "input_hidden", "hidden_output"}
        with pool.acquire() as conn:
            conn.execute(insert(nodes).values(key="again", layer=2))
        assert row_count(pool, nodes) == 1
