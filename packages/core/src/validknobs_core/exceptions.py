"""Exceptions raised by the validation engine.

These are all fatal: they abort a validation run instead of being collected
as violations, and they are built on the common exception framework from
validknobs_common.
"""

from __future__ import annotations

from collections.abc import Sequence

from validknobs_common import (
    NotFoundError,
    OperationError,
    ValidknobsError,
)


class ConstraintDefinitionError(ValidknobsError):
    """Raised when a constraint tree is put together incorrectly."""

    pass


class KindMismatchError(ConstraintDefinitionError):
    """Raised when a node's kind is not one a constraint accepts."""

    def __init__(self, allowed: Sequence[str], actual: str):
        self.allowed = list(allowed)
        self.actual = actual
        super().__init__(
            f"Kind '{actual}' is not one of the allowed kinds: {', '.join(self.allowed)}",
            context={"allowed": self.allowed, "actual": actual},
        )


class FieldNotFoundError(NotFoundError):
    """Raised when a named field does not exist on a record type."""

    def __init__(self, field: str, type_name: str):
        self.field = field
        self.type_name = type_name
        super().__init__(
            f"Field '{field}' not found on type '{type_name}'",
            context={"field": field, "type": type_name},
        )


class EmptyContextError(OperationError):
    """Raised when a context with no values is asked for its current value."""

    pass


class InvalidValueError(ValidknobsError):
    """Raised when the root of a validation run cannot be introspected."""

    pass


__all__ = [
    "ConstraintDefinitionError",
    "KindMismatchError",
    "FieldNotFoundError",
    "EmptyContextError",
    "InvalidValueError",
]
