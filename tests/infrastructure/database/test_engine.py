"""Tests for database engine setup."""

from pathlib import Path

import pytest
from sqlalchemy import text
from sqlalchemy.pool import QueuePool

from perceptron_store.config.models import DatabaseConfig
from perceptron_store.domain.errors import ConfigError
from perceptron_store.infrastructure.database.engine import create_store_engine


class TestCreateStoreEngine:
    def test_wal_mode_enabled(self, tmp_path: Path) -> None:
        engine = create_store_engine(DatabaseConfig(path=tmp_path / "w.db"))
        try:
            with engine.connect() as conn:
                assert conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"
        finally:
            engine.dispose()

    def test_pool_is_bounded(self, tmp_path: Path) -> None:
        config = DatabaseConfig(path=tmp_path / "b.db", pool_size=3, max_overflow=1)
        engine = create_store_engine(config)
        assert isinstance(engine.pool, QueuePool)
        assert engine.pool.size() == 3
        engine.dispose()

    def test_relative_path_uses_root(self, tmp_path: Path) -> None:
        engine = create_store_engine(DatabaseConfig(path=Path("nested/r.db")), root=tmp_path)
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            assert (tmp_path / "nested" / "r.db").exists()
        finally:
            engine.dispose()

    @pytest.mark.parametrize("url", ["sqlite://", "sqlite:///:memory:"])
    def test_in_memory_sqlite_rejected(self, url: str) -> None:
        with pytest.raises(ConfigError, match="In-memory"):
            create_store_engine(DatabaseConfig(url=url))
