"""Constraints on the set of keys in a mapping."""

from __future__ import annotations

from collections.abc import Hashable

from validknobs_core import Context, Kind, Node, Violation

from .base import ValueConstraint


class OneOfKeys(ValueConstraint):
    """Every key of a mapping must be one of the allowed keys.

    A single violation lists every unexpected key (as strings), in the
    mapping's iteration order.
    """

    kinds = (Kind.MAP,)

    def __init__(self, *keys: Hashable):
        if not keys:
            raise ValueError("OneOfKeys must be given at least 1 allowed key")
        self.keys = frozenset(keys)

    def check(self, ctx: Context, node: Node) -> list[Violation]:
        unexpected = [str(key) for key in node.value if key not in self.keys]
        if unexpected:
            return [ctx.violation("key must be one of the allowed keys", {"unexpected": unexpected})]
        return []


__all__ = ["OneOfKeys"]
