"""SubgraphSelector — the hidden nodes worth visiting for one query."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from perceptron_store.domain.types import CreatePolicy, Layer

if TYPE_CHECKING:
    from perceptron_store.infrastructure.repositories.edges import EdgeStore
    from perceptron_store.infrastructure.repositories.nodes import NodeRegistry


class SubgraphSelector:
    """Collects hidden ids adjacent to a query's input and target tokens.

    Every matching edge counts: an input token wired into several hidden
    nodes contributes all of them. Unknown tokens are skipped, and
    selection never creates nodes.
    """

    def __init__(self, registry: NodeRegistry, edges: EdgeStore) -> None:
        self._registry = registry
        self._edges = edges

    def known_ids(self, tokens: Iterable[str], layer: Layer) -> dict[str, int]:
        """Ids of the tokens in *layer* that already have nodes."""
        found: dict[str, int] = {}
        for token in tokens:
            node_id = self._registry.resolve(token, layer, CreatePolicy.LOOKUP_ONLY)
            if node_id is not None:
                found[token] = node_id
        return found

    def relevant_hidden_ids(
        self,
        input_tokens: Iterable[str],
        target_tokens: Iterable[str],
    ) -> set[int]:
        input_ids = self.known_ids(input_tokens, Layer.INPUT).values()
        output_ids = self.known_ids(target_tokens, Layer.OUTPUT).values()
        return self._edges.hidden_ids_from_inputs(input_ids) | self._edges.hidden_ids_to_outputs(
            output_ids
        )
