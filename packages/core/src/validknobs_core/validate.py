"""Entry points that run a constraint tree against a value."""

from __future__ import annotations

import logging
from typing import Any

from .composite import ConstraintLike, Constraints
from .context import Context, new_context
from .exceptions import InvalidValueError
from .settings import ValidationSettings
from .violation import Violation

logger = logging.getLogger(__name__)


def validate(
    value: Any,
    *constraints: ConstraintLike,
    declared_type: Any = None,
    settings: ValidationSettings | None = None,
) -> list[Violation]:
    """Validate a value against the given constraints.

    Args:
        value: Value to validate
        *constraints: Constraints to apply to the root value
        declared_type: Type to treat ``value`` as (needed for a ``None`` root)
        settings: Struct tag and strictness; defaults to ``ValidationSettings()``

    Returns:
        Violations sorted by path; empty if the value is valid

    Raises:
        InvalidValueError: If ``value`` is ``None`` and no type was declared
        KindMismatchError: On a shape mismatch with strict types enabled

    Example:
        ```python
        violations = validate(user, Fields({
            "Name": Required(),
            "Age": Min(18),
        }))
        for v in violations:
            print(v.path, v.message)
        ```
    """
    return validate_context(
        new_context(value, declared_type=declared_type, settings=settings),
        *constraints,
    )


def validate_context(ctx: Context, *constraints: ConstraintLike) -> list[Violation]:
    """Validate the current value of a prepared context.

    Raises:
        EmptyContextError: If the context holds no values
        InvalidValueError: If the root value is an untyped ``None``
    """
    root = ctx.current().node
    if not root.is_valid():
        raise InvalidValueError(
            "Cannot validate None without a declared type",
            context={"path": ctx.path},
        )

    combined = Constraints(*constraints)
    logger.debug(
        f"Validating {getattr(root.type, '__name__', root.type)} "
        f"with {len(combined)} constraint(s)"
    )

    violations = sorted(combined.violations(ctx), key=lambda v: v.path)

    logger.debug(f"Validation finished with {len(violations)} violation(s)")
    return violations


__all__ = ["validate", "validate_context"]
