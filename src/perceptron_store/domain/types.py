"""Layer and policy enums.

Node layers are persisted as small integers (their ordinal), so the
values of :class:`Layer` are part of the on-disk format and must never
be renumbered.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Layer(IntEnum):
    """Network layer a node belongs to."""

    INPUT = 0
    HIDDEN = 1
    OUTPUT = 2

    @property
    def cacheable(self) -> bool:
        """Whether token ids for this layer go through the identity cache."""
        return self is not Layer.HIDDEN


class LayerClass(StrEnum):
    """Edge layer classes. The value is the backing table name."""

    INPUT_TO_HIDDEN = "input_hidden"
    HIDDEN_TO_OUTPUT = "hidden_output"


class CreatePolicy(StrEnum):
    """What :meth:`NodeRegistry.resolve` does when a node is absent."""

    CREATE_IF_ABSENT = "create_if_absent"
    LOOKUP_ONLY = "lookup_only"
