"""EdgeStore — edge strengths between layers, with per-class defaults.

An edge row exists only once a strength has been written for its pair;
reads of unwritten pairs return the layer class's default.

INVARIANT: at most one row per ``(from_id, to_id)`` in each edge table.
The unique pair index enforces it across processes. On SQLite and
PostgreSQL writes are a single ``INSERT ... ON CONFLICT`` statement;
other backends update first and insert only when no row matched,
retrying once as an update if a concurrent writer inserted the pair.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from itertools import batched
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError

from perceptron_store.domain.types import LayerClass
from perceptron_store.infrastructure.database.schema import edge_tables

if TYPE_CHECKING:
    from sqlalchemy import Column, Connection, Table

    from perceptron_store.config.models import WeightsConfig
    from perceptron_store.infrastructure.database.pool import ConnectionPool

# Ids bound per IN (...) list. Two lists per statement stay below
# SQLite's historical 999 bound-variable limit.
_IN_CHUNK = 400

_UPSERT_INSERTS: dict[str, Callable[[Table], Any]] = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class EdgeStore:
    """Get/set edge strengths by ``(from_id, to_id, layer_class)``."""

    def __init__(self, pool: ConnectionPool, weights: WeightsConfig) -> None:
        self._pool = pool
        self._defaults: dict[LayerClass, float] = {
            LayerClass.INPUT_TO_HIDDEN: weights.input_to_hidden_default,
            LayerClass.HIDDEN_TO_OUTPUT: weights.hidden_to_output_default,
        }

    def default_strength(self, layer_class: LayerClass) -> float:
        """Strength reported for a pair with no edge row."""
        return self._defaults[layer_class]

    def get_strength(self, from_id: int, to_id: int, layer_class: LayerClass) -> float:
        table = edge_tables[layer_class]
        stmt = select(table.c.strength).where(table.c.from_id == from_id, table.c.to_id == to_id)
        with self._pool.acquire() as conn:
            strength = conn.execute(stmt).scalar_one_or_none()
        if strength is None:
            return self._defaults[layer_class]
        return float(strength)

    def get_strengths(
        self,
        from_ids: Iterable[int],
        to_ids: Iterable[int],
        layer_class: LayerClass,
    ) -> dict[tuple[int, int], float]:
        """Strengths for every ``(from, to)`` in the cross product.

        Pairs without a row carry the layer class default, exactly as
        :meth:`get_strength` would report them. Large id sets are read
        in chunks within one transaction.
        """
        sources = sorted(set(from_ids))
        targets = sorted(set(to_ids))
        default = self._defaults[layer_class]
        result = {(f, t): default for f in sources for t in targets}
        if not result:
            return result

        table = edge_tables[layer_class]
        with self._pool.acquire() as conn:
            for source_chunk in batched(sources, _IN_CHUNK):
                for target_chunk in batched(targets, _IN_CHUNK):
                    stmt = select(table.c.from_id, table.c.to_id, table.c.strength).where(
                        table.c.from_id.in_(source_chunk), table.c.to_id.in_(target_chunk)
                    )
                    for row in conn.execute(stmt):
                        result[(int(row.from_id), int(row.to_id))] = float(row.strength)
        return result

    def set_strength(
        self,
        from_id: int,
        to_id: int,
        layer_class: LayerClass,
        value: float,
    ) -> None:
        """Write *value* for the pair, updating in place or inserting a row."""
        table = edge_tables[layer_class]
        row = {"from_id": from_id, "to_id": to_id, "strength": float(value)}
        with self._pool.acquire() as conn:
            dialect_insert = _UPSERT_INSERTS.get(conn.dialect.name)
            if dialect_insert is not None:
                stmt = dialect_insert(table).values(**row)
                conn.execute(
                    stmt.on_conflict_do_update(
                        index_elements=[table.c.from_id, table.c.to_id],
                        set_={"strength": stmt.excluded.strength},
                    )
                )
                return

        try:
            self._update_or_insert(table, row)
        except IntegrityError:
            # A concurrent writer inserted the pair first; it now updates.
            self._update_or_insert(table, row)

    def ensure_strength(
        self,
        from_id: int,
        to_id: int,
        layer_class: LayerClass,
        value: float,
    ) -> bool:
        """Insert *value* only if the pair has no row yet.

        An existing strength is never touched. Returns True when a row
        was inserted.
        """
        table = edge_tables[layer_class]
        row = {"from_id": from_id, "to_id": to_id, "strength": float(value)}
        with self._pool.acquire() as conn:
            dialect_insert = _UPSERT_INSERTS.get(conn.dialect.name)
            if dialect_insert is not None:
                stmt = dialect_insert(table).values(**row).on_conflict_do_nothing(
                    index_elements=[table.c.from_id, table.c.to_id]
                )
                return conn.execute(stmt).rowcount == 1
            if _pair_exists(conn, table, from_id, to_id):
                return False

        try:
            with self._pool.acquire() as conn:
                conn.execute(insert(table).values(**row))
        except IntegrityError:
            return False
        return True

    def hidden_ids_from_inputs(self, input_ids: Iterable[int]) -> set[int]:
        """Every hidden id reached by an INPUT→HIDDEN edge from *input_ids*."""
        table = edge_tables[LayerClass.INPUT_TO_HIDDEN]
        return self._neighbours(table.c.to_id, table.c.from_id, input_ids)

    def hidden_ids_to_outputs(self, output_ids: Iterable[int]) -> set[int]:
        """Every hidden id with a HIDDEN→OUTPUT edge into *output_ids*."""
        table = edge_tables[LayerClass.HIDDEN_TO_OUTPUT]
        return self._neighbours(table.c.from_id, table.c.to_id, output_ids)

    def _neighbours(
        self, wanted: Column[int], match: Column[int], ids: Iterable[int]
    ) -> set[int]:
        keys = sorted(set(ids))
        if not keys:
            return set()
        found: set[int] = set()
        with self._pool.acquire() as conn:
            for chunk in batched(keys, _IN_CHUNK):
                stmt = select(wanted).distinct().where(match.in_(chunk))
                found.update(int(v) for v in conn.execute(stmt).scalars())
        return found

    def _update_or_insert(self, table: Table, row: dict[str, Any]) -> None:
        with self._pool.acquire() as conn:
            updated = conn.execute(
                update(table)
                .where(table.c.from_id == row["from_id"], table.c.to_id == row["to_id"])
                .values(strength=row["strength"])
            ).rowcount
            if not updated:
                conn.execute(insert(table).values(**row))


def _pair_exists(conn: Connection, table: Table, from_id: int, to_id: int) -> bool:
    stmt = select(table.c.id).where(table.c.from_id == from_id, table.c.to_id == to_id)
    return conn.execute(stmt).first() is not None
