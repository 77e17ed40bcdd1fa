"""Tests for the PerceptronStore facade."""

import pytest

from perceptron_store.config.settings import StoreSettings
from perceptron_store.domain.errors import StoreClosed
from perceptron_store.domain.types import CreatePolicy, Layer, LayerClass
from perceptron_store.infrastructure.store import PerceptronStore


class TestLifecycle:
    def test_open_creates_schema(self, settings: StoreSettings) -> None:
        with PerceptronStore.open(settings) as store:
            assert store.schema.existing_tables() == {"nodes", "input_hidden", "hidden_output"}

    def test_close_disposes_pool(self, settings: StoreSettings) -> None:
        store = PerceptronStore.open(settings)
        store.close()
        assert store.pool.closed
        with pytest.raises(StoreClosed):
            store.resolve("buy", Layer.INPUT)

    def test_ids_survive_restart(self, settings: StoreSettings) -> None:
        with PerceptronStore.open(settings) as store:
            buy = store.resolve("buy", Layer.INPUT)
            spam = store.resolve("spam", Layer.OUTPUT)
            hidden = store.materialize(["buy"], ["spam"]).hidden_id
        with PerceptronStore.open(settings) as reopened:
            assert reopened.resolve("buy", Layer.INPUT, CreatePolicy.LOOKUP_ONLY) == buy
            assert reopened.resolve("spam", Layer.OUTPUT, CreatePolicy.LOOKUP_ONLY) == spam
            assert reopened.get_strength(buy, hidden, LayerClass.INPUT_TO_HIDDEN) == 1.0
            assert reopened.list_targets() == ["spam"]

    def test_each_store_owns_its_pool(self, settings: StoreSettings) -> None:
        first = PerceptronStore.open(settings)
        with PerceptronStore.open(settings) as second:
            assert first.pool is not second.pool
            first.close()
            assert first.pool.closed
            assert not second.pool.closed
            assert second.resolve("buy", Layer.INPUT) is not None


class TestReset:
    def test_reset_drops_graph_and_cache(self, store: PerceptronStore) -> None:
        store.materialize(["buy"], ["spam"])
        store.reset()
        assert store.resolve("buy", Layer.INPUT, CreatePolicy.LOOKUP_ONLY) is None
        assert store.list_targets() == []
        assert all(stats.size == 0 for stats in store.nodes.cache_stats().values())

    def test_usable_after_reset(self, store: PerceptronStore) -> None:
        store.materialize(["buy"], ["spam"])
        store.reset()
        outcome = store.materialize(["buy"], ["spam"])
        assert outcome.created


class TestConsumerContract:
    def test_set_then_get(self, store: PerceptronStore) -> None:
        a = store.resolve("a", Layer.INPUT)
        h = store.resolve(":a", Layer.HIDDEN)
        assert a is not None and h is not None
        assert store.get_strength(a, h, LayerClass.INPUT_TO_HIDDEN) == -0.2
        store.set_strength(a, h, LayerClass.INPUT_TO_HIDDEN, 0.5)
        assert store.get_strength(a, h, LayerClass.INPUT_TO_HIDDEN) == 0.5
