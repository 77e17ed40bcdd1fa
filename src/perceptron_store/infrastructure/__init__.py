"""Infrastructure layer — database, identity cache, repositories, graph view.

This layer depends on stdlib and third-party libs (SQLAlchemy, NetworkX)
plus the domain layer. It must never import from services.
The store facade in :mod:`perceptron_store.infrastructure.store` is the
one exception: it wires services over the repositories.
"""
