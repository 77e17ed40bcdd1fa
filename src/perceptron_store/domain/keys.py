"""Composite keys for hidden-layer nodes.

A hidden node stands for one exact presentation of input tokens. Its key
is the tokens joined in the order given, each prefixed by the delimiter,
so ``["buy", "now"]`` becomes ``":buy:now"``.

INVARIANT: keys are order-sensitive. ``["a", "b"]`` and ``["b", "a"]``
name two different hidden nodes. Do not sort here without changing the
network's semantics for every existing store.
"""

from __future__ import annotations

from collections.abc import Sequence

DEFAULT_DELIMITER = ":"


def composite_key(tokens: Sequence[str], delimiter: str = DEFAULT_DELIMITER) -> str:
    """Build the hidden-node key for *tokens*.

    Examples:
        >>> composite_key(["buy", "now"])
        ':buy:now'
        >>> composite_key(["now", "buy"])
        ':now:buy'
    """
    return "".join(f"{delimiter}{token}" for token in tokens)
