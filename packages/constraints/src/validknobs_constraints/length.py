"""Length constraints for strings, bytes, collections and queues."""

from __future__ import annotations

from validknobs_core import SIZED_KINDS, Context, Kind, Node, Violation

from .base import ValueConstraint

LENGTH_KINDS: tuple[Kind, ...] = tuple(sorted(SIZED_KINDS, key=lambda k: k.value))


class _LengthConstraint(ValueConstraint):
    kinds = LENGTH_KINDS

    def __init__(self, length: int):
        if length < 0:
            raise ValueError(f"{type(self).__name__} length must not be negative, got {length}")
        self.length = length


class Length(_LengthConstraint):
    """The value must have exactly ``length`` items (characters for strings)."""

    def check(self, ctx: Context, node: Node) -> list[Violation]:
        actual = node.length()
        if actual != self.length:
            return [ctx.violation("exact length not met", {"actual": actual, "expected": self.length})]
        return []


class MinLength(_LengthConstraint):
    """The value must have at least ``length`` items.

    An empty value is skipped rather than failing, so ``MinLength(1)`` on its
    own never fires; use ``Required()`` for that.
    """

    def check(self, ctx: Context, node: Node) -> list[Violation]:
        actual = node.length()
        if actual < self.length:
            return [ctx.violation("minimum length not met", {"actual": actual, "minimum": self.length})]
        return []


class MaxLength(_LengthConstraint):
    """The value must have at most ``length`` items."""

    def check(self, ctx: Context, node: Node) -> list[Violation]:
        actual = node.length()
        if actual > self.length:
            return [ctx.violation("maximum length exceeded", {"actual": actual, "maximum": self.length})]
        return []


__all__ = ["LENGTH_KINDS", "Length", "MaxLength", "MinLength"]
