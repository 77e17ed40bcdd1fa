"""Tests for SubgraphSelector."""

from perceptron_store.domain.types import CreatePolicy, Layer
from perceptron_store.infrastructure.store import PerceptronStore


class TestRelevantHiddenIds:
    def test_collects_every_hidden_node_per_input(self, store: PerceptronStore) -> None:
        h1 = store.materialize(["buy", "now"], ["spam"]).hidden_id
        h2 = store.materialize(["buy", "cheap"], ["spam"]).hidden_id
        h3 = store.materialize(["hello"], ["ham"]).hidden_id
        assert store.relevant_hidden_ids(["buy"], []) == {h1, h2}
        assert h3 not in store.relevant_hidden_ids(["buy"], [])

    def test_collects_every_hidden_node_per_target(self, store: PerceptronStore) -> None:
        h1 = store.materialize(["x"], ["spam"]).hidden_id
        h2 = store.materialize(["y"], ["spam"]).hidden_id
        store.materialize(["z"], ["ham"])
        assert store.relevant_hidden_ids([], ["spam"]) == {h1, h2}

    def test_union_of_inputs_and_targets(self, store: PerceptronStore) -> None:
        h1 = store.materialize(["buy"], ["spam"]).hidden_id
        h2 = store.materialize(["hello"], ["ham"]).hidden_id
        assert store.relevant_hidden_ids(["buy"], ["ham"]) == {h1, h2}

    def test_unknown_tokens_contribute_nothing(self, store: PerceptronStore) -> None:
        assert store.relevant_hidden_ids(["never"], ["seen"]) == set()

    def test_selection_creates_no_nodes(self, store: PerceptronStore) -> None:
        store.relevant_hidden_ids(["never"], ["seen"])
        assert store.resolve("never", Layer.INPUT, CreatePolicy.LOOKUP_ONLY) is None
        assert store.list_targets() == []

    def test_known_ids_skips_unknown(self, store: PerceptronStore) -> None:
        buy = store.resolve("buy", Layer.INPUT)
        assert store.selector.known_ids(["buy", "nope"], Layer.INPUT) == {"buy": buy}
