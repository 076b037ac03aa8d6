"""Base class and helpers for leaf constraints."""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Callable

from validknobs_core import (
    Constraint,
    Context,
    Kind,
    Node,
    Violation,
    is_empty,
    should_be,
    unwrap_value,
)

ValueCheck = Callable[[Context, Node], list[Violation]]


class ValueConstraint(Constraint):
    """Base for constraints that check a single, non-empty value.

    Subclasses set ``kinds`` to the kinds they accept and implement
    :meth:`check`. The current value is unwrapped first; empty values are
    skipped, which makes every leaf constraint optional unless combined with
    ``Required``. A value of a kind not in ``kinds`` raises or is reported,
    according to the context's ``strict_types`` setting.
    """

    kinds: tuple[Kind, ...] = ()

    def violations(self, ctx: Context) -> list[Violation]:
        node = unwrap_value(ctx.current().node)
        if is_empty(node):
            return []

        if self.kinds:
            violations = should_be(ctx, node.type, *self.kinds)
            if violations:
                return violations

        return self.check(ctx, node)

    @abstractmethod
    def check(self, ctx: Context, node: Node) -> list[Violation]:
        """Check a non-empty value of an accepted kind.

        Args:
            ctx: Context positioned at the value
            node: The unwrapped value

        Returns:
            List of violations, empty if the value is valid
        """
        pass


class ValueFunc(ValueConstraint):
    """Turns a ``(ctx, node)`` function into an optional, kind-guarded constraint.

    Example:
        ```python
        def even(ctx: Context, node: Node) -> list[Violation]:
            if node.value % 2:
                return [ctx.violation("value must be even")]
            return []

        Fields(count=ValueFunc(even, Kind.INT))
        ```
    """

    def __init__(self, func: ValueCheck, *kinds: Kind):
        self.func = func
        self.kinds = kinds

    def check(self, ctx: Context, node: Node) -> list[Violation]:
        return list(self.func(ctx, node) or [])


class KindOf(ValueConstraint):
    """Only checks that a non-empty value is one of the given kinds."""

    def __init__(self, *kinds: Kind):
        if not kinds:
            raise ValueError("KindOf requires at least one allowed kind")
        self.kinds = kinds

    def check(self, ctx: Context, node: Node) -> list[Violation]:
        return []


__all__ = ["KindOf", "ValueCheck", "ValueConstraint", "ValueFunc"]
