"""HiddenNodeMaterializer — lazily create hidden nodes and their initial edges.

A hidden node is created the first time an exact, ordered presentation
of input tokens is seen. It is wired with:

- INPUT→HIDDEN edges of ``1 / len(input_tokens)`` from every input token
- HIDDEN→OUTPUT edges of ``initial_fan_out`` to every target token

Presenting the same ordered inputs again inserts only the edges the
presentation implies that have no row yet, which completes a node left
half-wired by an interrupted call. Existing strengths are never touched.
Edge writes are upserts, so if two callers race to create the same
hidden node both wire it with identical values.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from pydantic import BaseModel

from perceptron_store.domain.keys import composite_key
from perceptron_store.domain.types import CreatePolicy, Layer, LayerClass

if TYPE_CHECKING:
    from perceptron_store.config.models import WeightsConfig
    from perceptron_store.infrastructure.repositories.edges import EdgeStore
    from perceptron_store.infrastructure.repositories.nodes import NodeRegistry

logger = logging.getLogger(__name__)


class MaterializeOutcome(BaseModel):
    """Result of :meth:`HiddenNodeMaterializer.materialize`.

    Attributes:
        hidden_id: Id of the hidden node for the input presentation.
        created: False when the node already existed.
        edges_added: Edge rows inserted by this call.
    """

    model_config = {"frozen": True}

    hidden_id: int
    created: bool
    edges_added: int = 0


class HiddenNodeMaterializer:
    def __init__(self, registry: NodeRegistry, edges: EdgeStore, weights: WeightsConfig) -> None:
        self._registry = registry
        self._edges = edges
        self._delimiter = weights.key_delimiter
        self._fan_out = weights.initial_fan_out

    def materialize(
        self,
        input_tokens: Sequence[str],
        target_tokens: Iterable[str],
    ) -> MaterializeOutcome:
        """Ensure a hidden node exists for *input_tokens* (order-sensitive).

        Raises:
            ValueError: If *input_tokens* is empty.
        """
        if not input_tokens:
            msg = "Cannot materialize a hidden node for an empty input sequence"
            raise ValueError(msg)

        key = composite_key(input_tokens, self._delimiter)
        existing = self._registry.resolve(key, Layer.HIDDEN, CreatePolicy.LOOKUP_ONLY)
        if existing is not None:
            wiring = self._wiring(existing, input_tokens, target_tokens)
            added = sum(self._edges.ensure_strength(*edge) for edge in wiring)
            if added:
                logger.info(
                    "Added %d missing edge(s) to hidden node %d for %r", added, existing, key
                )
            return MaterializeOutcome(hidden_id=existing, created=False, edges_added=added)

        hidden_id = self._registry.resolve(key, Layer.HIDDEN, CreatePolicy.CREATE_IF_ABSENT)
        assert hidden_id is not None

        wiring = self._wiring(hidden_id, input_tokens, target_tokens)
        for edge in wiring:
            self._edges.set_strength(*edge)

        logger.debug("Materialized hidden node %d for %r", hidden_id, key)
        return MaterializeOutcome(hidden_id=hidden_id, created=True, edges_added=len(wiring))

    def _wiring(
        self,
        hidden_id: int,
        input_tokens: Sequence[str],
        target_tokens: Iterable[str],
    ) -> list[tuple[int, int, LayerClass, float]]:
        """Initial ``(from, to, layer_class, strength)`` edges of a hidden node."""
        fan_in = 1.0 / len(input_tokens)
        edges: list[tuple[int, int, LayerClass, float]] = []
        # Duplicate inputs are written once but still count towards fan-in.
        for token in dict.fromkeys(input_tokens):
            input_id = self._registry.resolve(token, Layer.INPUT)
            assert input_id is not None
            edges.append((input_id, hidden_id, LayerClass.INPUT_TO_HIDDEN, fan_in))

        # dict.fromkeys: de-duplicate targets, keep first-seen order
        for token in dict.fromkeys(target_tokens):
            output_id = self._registry.resolve(token, Layer.OUTPUT)
            assert output_id is not None
            edges.append((hidden_id, output_id, LayerClass.HIDDEN_TO_OUTPUT, self._fan_out))
        return edges
