"""SubgraphView — NetworkX picture of the weights one query touches.

Built per call from the edge store, no cross-call cache. Edges are dense
over the given ids: a pair without a stored row appears with its layer
class default weight, which is exactly what a forward pass would read.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import networkx as nx

from perceptron_store.domain.types import LayerClass

if TYPE_CHECKING:
    from perceptron_store.infrastructure.repositories.edges import EdgeStore
    from perceptron_store.infrastructure.repositories.nodes import NodeRegistry

type _Graph = nx.DiGraph


class SubgraphView:
    """Builds input → hidden → output DiGraphs keyed by node id."""

    def __init__(self, registry: NodeRegistry, edges: EdgeStore) -> None:
        self._registry = registry
        self._edges = edges

    def build(
        self,
        input_ids: Iterable[int],
        hidden_ids: Iterable[int],
        output_ids: Iterable[int],
    ) -> _Graph:
        """Return a DiGraph over the given ids.

        Node attributes: ``key`` and ``layer`` (:class:`Layer`).
        Edge attributes: ``weight`` and ``layer_class`` (:class:`LayerClass`).
        """
        inputs = set(input_ids)
        hidden = set(hidden_ids)
        outputs = set(output_ids)

        g: _Graph = nx.DiGraph()
        for node_id, (key, layer) in self._registry.keys_for(inputs | hidden | outputs).items():
            g.add_node(node_id, key=key, layer=layer)

        layers = (
            (inputs, hidden, LayerClass.INPUT_TO_HIDDEN),
            (hidden, outputs, LayerClass.HIDDEN_TO_OUTPUT),
        )
        for sources, targets, layer_class in layers:
            weights = self._edges.get_strengths(sources, targets, layer_class)
            for (src, dst), weight in weights.items():
                g.add_edge(src, dst, weight=weight, layer_class=layer_class)
        return g
