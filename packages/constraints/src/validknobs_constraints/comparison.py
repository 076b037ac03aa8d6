"""Equality, membership and numeric range constraints."""

from __future__ import annotations

from typing import Any

from validknobs_core import Context, Kind, Node, Violation

from .base import ValueConstraint

NUMBER_KINDS = (Kind.INT, Kind.FLOAT)


class Equals(ValueConstraint):
    """The value must equal an expected value."""

    def __init__(self, expected: Any):
        self.expected = expected

    def check(self, ctx: Context, node: Node) -> list[Violation]:
        if node.value != self.expected:
            return [ctx.violation("value must equal expected value", {"expected": self.expected})]
        return []


class NotEquals(ValueConstraint):
    """The value must not equal a given value."""

    def __init__(self, expected: Any):
        self.expected = expected

    def check(self, ctx: Context, node: Node) -> list[Violation]:
        if node.value == self.expected:
            return [ctx.violation("value must not equal expected value", {"expected": self.expected})]
        return []


class OneOf(ValueConstraint):
    """The value must equal one of the allowed values."""

    def __init__(self, *allowed: Any):
        """Initialize with the allowed values.

        Args:
            *allowed: At least two allowed values; use :class:`Equals` for one

        Raises:
            ValueError: If fewer than two values are given
        """
        if len(allowed) < 2:
            raise ValueError("OneOf must be given at least 2 allowed values")
        self.allowed = list(allowed)

    def check(self, ctx: Context, node: Node) -> list[Violation]:
        if node.value not in self.allowed:
            return [ctx.violation("value must be one of the allowed values", {"allowed": self.allowed})]
        return []


class NoneOf(ValueConstraint):
    """The value must not equal any of the disallowed values."""

    def __init__(self, *disallowed: Any):
        """Initialize with the disallowed values.

        Args:
            *disallowed: At least two disallowed values; use :class:`NotEquals` for one

        Raises:
            ValueError: If fewer than two values are given
        """
        if len(disallowed) < 2:
            raise ValueError("NoneOf must be given at least 2 disallowed values")
        self.disallowed = list(disallowed)

    def check(self, ctx: Context, node: Node) -> list[Violation]:
        if node.value in self.disallowed:
            return [
                ctx.violation("value must not be one of the disallowed values", {
                    "disallowed": self.disallowed,
                })
            ]
        return []


class Min(ValueConstraint):
    """A number must be at least ``minimum``.

    Zero counts as empty, so ``Min(5)`` accepts ``0``; add ``Required()`` to
    reject it.
    """

    kinds = NUMBER_KINDS

    def __init__(self, minimum: float):
        self.minimum = minimum

    def check(self, ctx: Context, node: Node) -> list[Violation]:
        if node.value < self.minimum:
            return [
                ctx.violation("minimum value not met", {
                    "actual": node.value,
                    "minimum": self.minimum,
                })
            ]
        return []


class Max(ValueConstraint):
    """A number must be at most ``maximum``."""

    kinds = NUMBER_KINDS

    def __init__(self, maximum: float):
        self.maximum = maximum

    def check(self, ctx: Context, node: Node) -> list[Violation]:
        if node.value > self.maximum:
            return [
                ctx.violation("maximum value exceeded", {
                    "actual": node.value,
                    "maximum": self.maximum,
                })
            ]
        return []


__all__ = ["Equals", "Max", "Min", "NoneOf", "NotEquals", "OneOf"]
