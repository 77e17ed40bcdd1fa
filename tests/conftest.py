"""Shared pytest fixtures for perceptron_store tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy import Table, func, select

from perceptron_store.config.settings import StoreSettings
from perceptron_store.infrastructure.database.manager import SchemaManager
from perceptron_store.infrastructure.database.pool import ConnectionPool
from perceptron_store.infrastructure.store import PerceptronStore

type SettingsFactory = Callable[..., StoreSettings]


@pytest.fixture(autouse=True)
def _no_ambient_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer env vars from leaking into test settings."""
    monkeypatch.delenv("PERCEPTRON_STORE_CONFIG", raising=False)


@pytest.fixture
def make_settings(tmp_path: Path) -> SettingsFactory:
    """Build settings for the temp SQLite file, with section overrides.

    Usage::

        make_settings(database={"pool_size": 1}, cache={"input_capacity": 0})
    """

    def _make(**overrides: Any) -> StoreSettings:
        database = {"path": tmp_path / "store.db", **overrides.pop("database", {})}
        return StoreSettings.load(root=tmp_path, database=database, **overrides)

    return _make


@pytest.fixture
def settings(make_settings: SettingsFactory) -> StoreSettings:
    """Default settings pointing at a fresh SQLite file."""
    return make_settings()


@pytest.fixture
def pool(settings: StoreSettings) -> Iterator[ConnectionPool]:
    """Connection pool with the schema already created."""
    p = ConnectionPool(settings)
    SchemaManager(p).ensure_schema()
    try:
        yield p
    finally:
        p.close()


@pytest.fixture
def store(settings: StoreSettings) -> Iterator[PerceptronStore]:
    """Fully initialized store on a temp database."""
    s = PerceptronStore.open(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def row_count() -> Callable[[ConnectionPool, Table], int]:
    """Count rows of *table* through *pool*."""

    def _count(pool: ConnectionPool, table: Table) -> int:
        with pool.acquire() as conn:
            return int(conn.execute(select(func.count()).select_from(table)).scalar_one())

    return _count
