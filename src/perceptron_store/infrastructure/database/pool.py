"""ConnectionPool — bounded, scoped access to database sessions.

Wraps a pooled SQLAlchemy engine. :meth:`ConnectionPool.acquire` is the
normal entry point: it checks out one connection, runs the body in a
single transaction (commit on success, rollback on error) and always
returns the connection to the pool.

SQLAlchemy errors are translated at this boundary:

- pool checkout timeout → :class:`ResourceExhausted`
- ``OperationalError`` / ``DisconnectionError`` → :class:`StoreUnavailable`

Everything else (notably ``IntegrityError``) propagates unchanged so
repositories can react to it.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Self

from sqlalchemy.exc import DisconnectionError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from perceptron_store.domain.errors import ResourceExhausted, StoreClosed, StoreUnavailable
from perceptron_store.infrastructure.database.engine import create_store_engine

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from perceptron_store.config.settings import StoreSettings

logger = logging.getLogger(__name__)


@contextmanager
def _translate_errors() -> Iterator[None]:
    try:
        yield
    except PoolTimeoutError as exc:
        raise ResourceExhausted(str(exc)) from exc
    except (OperationalError, DisconnectionError) as exc:
        raise StoreUnavailable(str(exc)) from exc


class ConnectionPool:
    """Bounded pool of database sessions.

    Create once at process start from explicit settings and close at
    shutdown, either with :meth:`close` or by using the pool as a
    context manager.

    Usage::

        with ConnectionPool(settings) as pool:
            with pool.acquire() as conn:
                conn.execute(...)
    """

    def __init__(self, settings: StoreSettings) -> None:
        self._settings = settings
        self._engine: Engine = create_store_engine(settings.database, root=settings.root)
        self._closed = False
        logger.debug(
            "Connection pool created for %s (size=%d, overflow=%d)",
            self._engine.url.render_as_string(hide_password=True),
            settings.database.pool_size,
            settings.database.max_overflow,
        )

    @property
    def settings(self) -> StoreSettings:
        return self._settings

    @property
    def engine(self) -> Engine:
        self._check_open()
        return self._engine

    @property
    def closed(self) -> bool:
        return self._closed

    def status(self) -> str:
        """Human-readable checkout status from the underlying pool."""
        return self._engine.pool.status()

    def checkout(self) -> Connection:
        """Check out a connection, waiting up to ``pool_timeout``.

        The caller owns the connection and must hand it back with
        :meth:`release`. Prefer :meth:`acquire`.
        """
        self._check_open()
        with _translate_errors():
            return self._engine.connect()

    def release(self, conn: Connection) -> None:
        """Return *conn* to the pool. Any open transaction is rolled back."""
        conn.close()

    @contextmanager
    def acquire(self) -> Iterator[Connection]:
        """Yield a connection inside one transaction, releasing it on exit."""
        conn = self.checkout()
        try:
            with _translate_errors(), conn.begin():
                yield conn
        finally:
            self.release(conn)

    def close(self) -> None:
        """Dispose every pooled connection. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._engine.dispose()
        logger.debug("Connection pool disposed")

    def _check_open(self) -> None:
        if self._closed:
            msg = "Connection pool is closed"
            raise StoreClosed(msg)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
