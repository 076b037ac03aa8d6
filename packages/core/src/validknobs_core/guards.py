"""Kind guards implementing the strict/permissive type policy."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .exceptions import KindMismatchError
from .introspection import Kind, Node, kind_of, unwrap_type

if TYPE_CHECKING:
    from .context import Context
    from .violation import Violation

logger = logging.getLogger(__name__)

KIND_MISMATCH_MESSAGE = "value must be one of the allowed kinds"


def must_be(tp: Any, *kinds: Kind) -> None:
    """Require ``tp`` to be of one of the given kinds.

    Args:
        tp: Type to check (usually already unwrapped)
        *kinds: Allowed kinds

    Raises:
        ValueError: If no kinds are given
        KindMismatchError: If the type's kind is not allowed
    """
    if not kinds:
        raise ValueError("must_be requires at least one allowed kind")

    actual = kind_of(tp)
    if actual not in kinds:
        raise KindMismatchError([k.value for k in kinds], actual.value)


def should_be(ctx: Context, tp: Any, *kinds: Kind) -> list[Violation]:
    """Check ``tp`` against the allowed kinds, honouring ``ctx.strict_types``.

    With strict types this is :func:`must_be`. Otherwise a mismatch comes back
    as a single violation listing the allowed kinds, so that validation of
    loosely-typed input can carry on.

    Args:
        ctx: Context the check is made in
        tp: Type to check (usually already unwrapped)
        *kinds: Allowed kinds

    Returns:
        An empty list if the kind is allowed, else one violation

    Raises:
        ValueError: If no kinds are given
        KindMismatchError: On a mismatch when ``ctx.strict_types`` is set
    """
    if ctx.strict_types:
        must_be(tp, *kinds)
        return []

    if not kinds:
        raise ValueError("should_be requires at least one allowed kind")

    actual = kind_of(tp)
    if actual in kinds:
        return []

    logger.debug(f"Kind mismatch at {ctx.path}: {actual.value} not in {[k.value for k in kinds]}")
    return [
        ctx.violation(KIND_MISMATCH_MESSAGE, {
            "allowed": [k.value for k in kinds],
            "actual": actual.value,
        })
    ]


def guard_shape(ctx: Context, node: Node, *kinds: Kind) -> list[Violation]:
    """Apply :func:`should_be` to the type a node was declared with.

    Composite constraints call this before skipping absent values, so a
    constraint applied to the wrong kind of value fails whether or not the
    value happens to be empty. A ``None`` whose type is unknown (or ``Any``)
    has no shape to check and passes.
    """
    tp = unwrap_type(node.type)
    if node.is_nil() and kind_of(tp) in (Kind.INVALID, Kind.ANY):
        return []
    return should_be(ctx, tp, *kinds)


__all__ = ["KIND_MISMATCH_MESSAGE", "guard_shape", "must_be", "should_be"]
