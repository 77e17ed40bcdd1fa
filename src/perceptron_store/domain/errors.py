"""Error taxonomy for the store.

``NotFound`` is deliberately absent: a ``LOOKUP_ONLY`` miss is an
expected outcome and is reported as ``None``.
"""

from __future__ import annotations


class PerceptronStoreError(Exception):
    """Base class for all errors raised by this package."""


class StoreUnavailable(PerceptronStoreError):
    """The persistent store could not be reached or a session failed."""


class ResourceExhausted(PerceptronStoreError):
    """No session became available within the pool's wait timeout."""


class ConstraintViolation(PerceptronStoreError):
    """A uniqueness constraint rejected an insert.

    The node registry converts this into a re-lookup; it only escapes
    when the conflicting row cannot be found afterwards.
    """


class StoreClosed(PerceptronStoreError):
    """The connection pool was used after it was closed."""


class ConfigError(PerceptronStoreError):
    """The configuration file could not be parsed."""
