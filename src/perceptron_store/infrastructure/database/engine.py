"""Database engine setup.

SQLAlchemy Core (not ORM) is used: the store's unit of work is a single
statement or a short read-then-write, and callers address rows by
integer id, so an identity map would only duplicate the node registry's
own cache.

Any SQLAlchemy URL works. With the default SQLite file backend, WAL mode
lets readers proceed during a write, and the driver's busy timeout makes
concurrent writers queue instead of failing immediately.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import QueuePool

from perceptron_store.config.models import DatabaseConfig
from perceptron_store.domain.errors import ConfigError


def _is_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


def create_store_engine(config: DatabaseConfig, *, root: Path | None = None) -> Engine:
    """Create a pooled engine bounded by *config*'s pool settings.

    Raises:
        ConfigError: If the URL names an in-memory SQLite database, which
            cannot be shared between pooled connections.
    """
    url = config.resolved_url(root)
    if _is_memory_sqlite(url):
        msg = f"In-memory SQLite cannot back a connection pool: {url!r}"
        raise ConfigError(msg)

    kwargs: dict[str, Any] = {
        "echo": config.echo,
        "poolclass": QueuePool,
        "pool_size": config.pool_size,
        "max_overflow": config.max_overflow,
        "pool_timeout": config.pool_timeout,
        "pool_pre_ping": True,
    }
    is_sqlite = make_url(url).get_backend_name() == "sqlite"
    if is_sqlite:
        kwargs["connect_args"] = {
            "timeout": config.busy_timeout,
            "check_same_thread": False,
        }
        db_file = make_url(url).database
        if db_file:
            Path(db_file).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(url, **kwargs)

    if is_sqlite:

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    return engine
