"""Wrapper that replaces a constraint's violations with a custom one."""

from __future__ import annotations

from typing import Any

from validknobs_core import Constraint, ConstraintLike, Context, Violation, as_constraint


class Details(Constraint):
    """Report a single custom violation whenever the wrapped constraint fails.

    Example:
        ```python
        Details(
            Regexp(r"^[A-Z]{3}$"),
            "currency must be an ISO 4217 code",
            example="EUR",
        )
        ```
    """

    def __init__(self, constraint: ConstraintLike, message: str, **details: Any):
        self.constraint = as_constraint(constraint)
        self.message = message
        self.details = details

    def violations(self, ctx: Context) -> list[Violation]:
        if not self.constraint.violations(ctx):
            return []
        return [ctx.violation(self.message, self.details)]


__all__ = ["Details"]
