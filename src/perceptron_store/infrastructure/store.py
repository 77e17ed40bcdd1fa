"""PerceptronStore — the facade the training and inference code talks to.

Owns one :class:`ConnectionPool` and wires the schema manager, node
registry, edge store, materializer and selector over it. Create it once
per process with :meth:`PerceptronStore.open` and close it at shutdown
(or use it as a context manager); closing disposes the pool and detaches
the log handler installed when ``[logging] enabled`` is set.

Consumer contract: :meth:`resolve`, :meth:`materialize`,
:meth:`get_strength`, :meth:`set_strength`, :meth:`relevant_hidden_ids`,
:meth:`list_targets`. Operational contract: :meth:`ensure_schema`,
:meth:`reset`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Self

from perceptron_store.config.logging import install_handler, remove_handler
from perceptron_store.config.settings import StoreSettings
from perceptron_store.domain.types import CreatePolicy, Layer, LayerClass
from perceptron_store.infrastructure.database.manager import SchemaManager
from perceptron_store.infrastructure.database.pool import ConnectionPool
from perceptron_store.infrastructure.graph.engine import SubgraphView
from perceptron_store.infrastructure.repositories.edges import EdgeStore
from perceptron_store.infrastructure.repositories.nodes import NodeRegistry
from perceptron_store.services.materializer import HiddenNodeMaterializer, MaterializeOutcome
from perceptron_store.services.selector import SubgraphSelector

if TYPE_CHECKING:
    from types import TracebackType

    import networkx as nx

logger = logging.getLogger(__name__)


class PerceptronStore:
    """Persistent weight graph for one network."""

    def __init__(self, settings: StoreSettings) -> None:
        self._settings = settings
        self._pool = ConnectionPool(settings)
        self._log_handler = install_handler(settings.logging)
        self.schema = SchemaManager(self._pool)
        self.nodes = NodeRegistry(self._pool, settings.cache)
        self.edges = EdgeStore(self._pool, settings.weights)
        self.materializer = HiddenNodeMaterializer(self.nodes, self.edges, settings.weights)
        self.selector = SubgraphSelector(self.nodes, self.edges)
        self._view = SubgraphView(self.nodes, self.edges)

    @classmethod
    def open(cls, settings: StoreSettings | None = None) -> PerceptronStore:
        """Create a store and make sure its tables exist."""
        store = cls(settings or StoreSettings.load())
        try:
            store.ensure_schema()
        except Exception:
            store.close()
            raise
        return store

    @property
    def settings(self) -> StoreSettings:
        return self._settings

    @property
    def pool(self) -> ConnectionPool:
        return self._pool

    # --- Operational ---

    def ensure_schema(self) -> None:
        self.schema.ensure_schema()

    def reset(self) -> None:
        """Drop all nodes and edges, then forget every cached id."""
        self.schema.reset()
        self.nodes.clear_cache()

    def close(self) -> None:
        self._pool.close()
        if self._log_handler is not None:
            remove_handler(self._log_handler)
            self._log_handler = None

    # --- Consumer ---

    def resolve(
        self,
        token: str,
        layer: Layer,
        policy: CreatePolicy = CreatePolicy.CREATE_IF_ABSENT,
    ) -> int | None:
        return self.nodes.resolve(token, layer, policy)

    def list_targets(self) -> list[str]:
        return self.nodes.list_targets()

    def get_strength(self, from_id: int, to_id: int, layer_class: LayerClass) -> float:
        return self.edges.get_strength(from_id, to_id, layer_class)

    def set_strength(
        self,
        from_id: int,
        to_id: int,
        layer_class: LayerClass,
        value: float,
    ) -> None:
        self.edges.set_strength(from_id, to_id, layer_class, value)

    def materialize(
        self,
        input_tokens: Sequence[str],
        target_tokens: Iterable[str],
    ) -> MaterializeOutcome:
        return self.materializer.materialize(input_tokens, target_tokens)

    def relevant_hidden_ids(
        self,
        input_tokens: Iterable[str],
        target_tokens: Iterable[str],
    ) -> set[int]:
        return self.selector.relevant_hidden_ids(input_tokens, target_tokens)

    def subgraph(self, input_tokens: Sequence[str], target_tokens: Sequence[str]) -> nx.DiGraph:
        """Weighted DiGraph of the known inputs, relevant hidden nodes and targets."""
        input_ids = self.selector.known_ids(input_tokens, Layer.INPUT)
        output_ids = self.selector.known_ids(target_tokens, Layer.OUTPUT)
        hidden_ids = self.relevant_hidden_ids(input_tokens, target_tokens)
        return self._view.build(input_ids.values(), hidden_ids, output_ids.values())

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
