"""Service layer — hidden-node materialization and subgraph selection.

Services compose the node registry and edge store.
They must never talk to the database directly.
"""
