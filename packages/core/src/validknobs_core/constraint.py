"""The constraint abstraction every validator is built from."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from .context import Context
from .exceptions import ConstraintDefinitionError
from .violation import Violation

if TYPE_CHECKING:
    from .composite import Constraints


ViolationsFunc = Callable[[Context], list[Violation]]


class Constraint(ABC):
    """Base class for all constraints.

    A constraint inspects a context and returns zero or more violations. It
    never returns ``None``; "no violations" is an empty list.
    """

    @abstractmethod
    def violations(self, ctx: Context) -> list[Violation]:
        """Validate the current value of a context.

        Args:
            ctx: Context positioned at the value to check

        Returns:
            List of violations, empty if the value is valid
        """
        pass

    def __call__(self, ctx: Context) -> list[Violation]:
        return self.violations(ctx)

    def __and__(self, other: Constraint | ViolationsFunc) -> Constraints:
        """Combine with AND: both constraints run and their violations are joined."""
        from .composite import Constraints

        if isinstance(self, Constraints):
            return Constraints(*self.constraints, other)
        if isinstance(other, Constraints):
            return Constraints(self, *other.constraints)
        return Constraints(self, other)


class ConstraintFunc(Constraint):
    """Adapts a plain ``(Context) -> list[Violation]`` function into a Constraint."""

    def __init__(self, func: ViolationsFunc):
        """Initialize with the function to run.

        Args:
            func: Function returning the violations for a context
        """
        self.func = func

    def violations(self, ctx: Context) -> list[Violation]:
        return list(self.func(ctx) or [])

    def __repr__(self) -> str:
        return f"ConstraintFunc({getattr(self.func, '__name__', repr(self.func))})"


def constraint(func: ViolationsFunc) -> ConstraintFunc:
    """Decorator turning a function into a :class:`ConstraintFunc`.

    Example:
        ```python
        @constraint
        def lowercase(ctx: Context) -> list[Violation]:
            value = ctx.current().node.value
            if isinstance(value, str) and value != value.lower():
                return [ctx.violation("value must be lowercase")]
            return []
        ```
    """
    return ConstraintFunc(func)


def as_constraint(obj: Any) -> Constraint:
    """Return ``obj`` as a Constraint, wrapping plain callables.

    Raises:
        ConstraintDefinitionError: If ``obj`` is neither a Constraint nor callable
    """
    if isinstance(obj, Constraint):
        return obj
    if callable(obj):
        return ConstraintFunc(obj)
    raise ConstraintDefinitionError(
        f"Expected a Constraint or a callable, got {type(obj).__name__}",
        context={"type": type(obj).__name__},
    )


__all__ = ["Constraint", "ConstraintFunc", "ViolationsFunc", "as_constraint", "constraint"]
