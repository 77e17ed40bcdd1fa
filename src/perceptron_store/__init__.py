"""Persistent node/edge store for an online-trained associative network.

The public entry point is :class:`PerceptronStore`; the layer enums and
error types are re-exported for consumers.
"""

from perceptron_store.domain.errors import (
    ConfigError,
    ConstraintViolation,
    PerceptronStoreError,
    ResourceExhausted,
    StoreClosed,
    StoreUnavailable,
)
from perceptron_store.domain.types import CreatePolicy, Layer, LayerClass
from perceptron_store.infrastructure.store import PerceptronStore

__all__ = [
    "ConfigError",
    "ConstraintViolation",
    "CreatePolicy",
    "Layer",
    "LayerClass",
    "PerceptronStore",
    "PerceptronStoreError",
    "ResourceExhausted",
    "StoreClosed",
    "StoreUnavailable",
]
