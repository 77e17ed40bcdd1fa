"""Repositories over the node and edge tables."""

from perceptron_store.infrastructure.repositories.edges import EdgeStore
from perceptron_store.infrastructure.repositories.nodes import NodeRegistry

__all__ = ["EdgeStore", "NodeRegistry"]
