"""NodeRegistry — stable integer ids for ``(token, layer)`` pairs.

INPUT and OUTPUT tokens recur across nearly every query, so their ids go
through a per-layer :class:`IdentityCache`. HIDDEN keys are composites
of a whole input presentation and rarely repeat; they always hit the
database.

INVARIANT: at most one node exists per ``(key, layer)``. The unique
index enforces it; a writer that loses a creation race gets an
``IntegrityError``, which is converted into a re-read of the winner's
row and never surfaces to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from itertools import batched
from typing import TYPE_CHECKING

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError

from perceptron_store.domain.errors import ConstraintViolation
from perceptron_store.domain.types import CreatePolicy, Layer
from perceptron_store.infrastructure.cache import CacheStats, IdentityCache
from perceptron_store.infrastructure.database.schema import nodes

if TYPE_CHECKING:
    from perceptron_store.config.models import CacheConfig
    from perceptron_store.infrastructure.database.pool import ConnectionPool

logger = logging.getLogger(__name__)

# Ids bound per IN (...) list, below SQLite's historical 999 limit.
_IN_CHUNK = 400


class NodeRegistry:
    """Resolves tokens to node ids, creating nodes on demand."""

    def __init__(self, pool: ConnectionPool, cache: CacheConfig) -> None:
        self._pool = pool
        self._caches: dict[Layer, IdentityCache] = {
            Layer.INPUT: IdentityCache(cache.input_capacity),
            Layer.OUTPUT: IdentityCache(cache.output_capacity),
        }

    def resolve(
        self,
        token: str,
        layer: Layer,
        policy: CreatePolicy = CreatePolicy.CREATE_IF_ABSENT,
    ) -> int | None:
        """Return the id of the node for *token* in *layer*.

        Returns None only when the node does not exist and *policy* is
        ``LOOKUP_ONLY``.
        """
        cache = self._caches[layer] if layer.cacheable else None
        if cache is not None:
            cached = cache.get(token)
            if cached is not None:
                return cached

        node_id = self._lookup(token, layer)
        if node_id is None:
            if policy is CreatePolicy.LOOKUP_ONLY:
                return None
            node_id = self._create(token, layer)

        if cache is not None:
            cache.put(token, node_id)
        return node_id

    def list_targets(self) -> list[str]:
        """All OUTPUT-layer keys, in creation order."""
        stmt = select(nodes.c.key).where(nodes.c.layer == int(Layer.OUTPUT)).order_by(nodes.c.id)
        with self._pool.acquire() as conn:
            return list(conn.execute(stmt).scalars())

    def keys_for(self, node_ids: Iterable[int]) -> dict[int, tuple[str, Layer]]:
        """Map each existing id in *node_ids* to its ``(key, layer)``."""
        ids = sorted(set(node_ids))
        found: dict[int, tuple[str, Layer]] = {}
        if not ids:
            return found
        with self._pool.acquire() as conn:
            for chunk in batched(ids, _IN_CHUNK):
                stmt = select(nodes.c.id, nodes.c.key, nodes.c.layer).where(nodes.c.id.in_(chunk))
                for row in conn.execute(stmt):
                    found[int(row.id)] = (row.key, Layer(row.layer))
        return found

    def cache_stats(self) -> dict[Layer, CacheStats]:
        return {layer: cache.stats() for layer, cache in self._caches.items()}

    def clear_cache(self) -> None:
        """Forget every cached id. Required after the store is reset."""
        for cache in self._caches.values():
            cache.clear()

    # ------------------------------------------------------------------
    # Database access
    # ------------------------------------------------------------------

    def _lookup(self, token: str, layer: Layer) -> int | None:
        stmt = select(nodes.c.id).where(nodes.c.key == token, nodes.c.layer == int(layer))
        with self._pool.acquire() as conn:
            node_id = conn.execute(stmt).scalar_one_or_none()
        return None if node_id is None else int(node_id)

    def _insert(self, token: str, layer: Layer) -> int:
        try:
            with self._pool.acquire() as conn:
                result = conn.execute(insert(nodes).values(key=token, layer=int(layer)))
                node_id = result.inserted_primary_key[0]
        except IntegrityError as exc:
            msg = f"Node ({token!r}, {layer.name}) already exists"
            raise ConstraintViolation(msg) from exc
        logger.debug(
            "Created %s node %d", layer.name, node_id, extra={"token": token, "layer": layer.name}
        )
        return int(node_id)

    def _create(self, token: str, layer: Layer) -> int:
        try:
            return self._insert(token, layer)
        except ConstraintViolation:
            logger.debug("Lost creation race for %s node %r; re-reading", layer.name, token)
            node_id = self._lookup(token, layer)
            if node_id is None:
                raise
            return node_id
