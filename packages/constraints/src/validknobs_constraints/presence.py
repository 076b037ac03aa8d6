"""Constraints on whether a value is present at all.

These are the only leaf constraints that act on empty values.
"""

from __future__ import annotations

from validknobs_core import Constraint, Context, Violation, is_empty, is_nillable


class Required(Constraint):
    """The value must not be empty (``None``, ``""``, ``0``, ``[]``, ...)."""

    def violations(self, ctx: Context) -> list[Violation]:
        if is_empty(ctx.current().node):
            return [ctx.violation("a value is required")]
        return []


class Empty(Constraint):
    """The value must be empty; the opposite of :class:`Required`."""

    def violations(self, ctx: Context) -> list[Violation]:
        if not is_empty(ctx.current().node):
            return [ctx.violation("a value must not be provided")]
        return []


class Nil(Constraint):
    """A value of a nillable type must be ``None``.

    Unlike :class:`Empty`, an empty list still violates this. Values whose
    declared type can't hold ``None`` (a plain ``int`` field) are ignored.
    """

    def violations(self, ctx: Context) -> list[Violation]:
        node = ctx.current().node
        if is_nillable(node) and not node.is_nil():
            return [ctx.violation("value must be nil")]
        return []


class NotNil(Constraint):
    """A value of a nillable type must not be ``None``.

    Unlike :class:`Required`, an empty list satisfies this.
    """

    def violations(self, ctx: Context) -> list[Violation]:
        node = ctx.current().node
        if is_nillable(node) and node.is_nil():
            return [ctx.violation("value must not be nil")]
        return []


__all__ = ["Empty", "Nil", "NotNil", "Required"]
