"""Immutable traversal context and path model.

A :class:`Context` is the stack of named values from the validation root to
the value currently being inspected, plus the settings for the run. Every
"mutator" returns a new context, so sibling branches of a descent (element 0
and element 1 of a list, say) can never interfere with each other.
"""

from __future__ import annotations

import dataclasses
import functools
from dataclasses import dataclass
from typing import Any

from .exceptions import EmptyContextError, FieldNotFoundError
from .guards import must_be
from .introspection import Kind, Node, record_class, unwrap_value
from .settings import DEFAULT_STRUCT_TAG, ValidationSettings
from .violation import PathKind, Violation


@dataclass(frozen=True)
class Value:
    """One named step on the path from the root to the current value.

    Attributes:
        name: Path segment for this step (empty for the root)
        node: The value found at this step
    """

    name: str
    node: Node


@dataclass(frozen=True)
class Context:
    """Validation state handed to every constraint.

    Attributes:
        stack: Values from the root to the current position
        path_kind: Whether the current position is a key or a value
        struct_tag: Metadata key used to look up field display names
        strict_types: Whether shape mismatches are fatal or reported as violations
    """

    stack: tuple[Value, ...] = ()
    path_kind: PathKind = PathKind.VALUE
    struct_tag: str = DEFAULT_STRUCT_TAG
    strict_types: bool = True

    def current(self) -> Value:
        """Return the value at the current position.

        Raises:
            EmptyContextError: If the context has no values
        """
        if not self.stack:
            raise EmptyContextError(
                "Context has no values; create contexts with new_context()",
                context={"operation": "current"},
            )
        return self.stack[-1]

    def with_value(self, name: str, node: Node | Any) -> Context:
        """Return a new context with a value pushed onto the stack.

        Args:
            name: Path segment for the new value
            node: Node for the new value; anything else is wrapped in a Node
        """
        if not isinstance(node, Node):
            node = Node(node)
        return dataclasses.replace(self, stack=(*self.stack, Value(name, node)))

    def with_path_kind(self, path_kind: PathKind) -> Context:
        return dataclasses.replace(self, path_kind=path_kind)

    def with_struct_tag(self, struct_tag: str) -> Context:
        return dataclasses.replace(self, struct_tag=struct_tag)

    def with_strict_types(self, strict_types: bool) -> Context:
        return dataclasses.replace(self, strict_types=strict_types)

    @property
    def path(self) -> str:
        """Dotted path of the current position; ``"."`` at the root."""
        return "." + ".".join(value.name for value in self.stack[1:])

    def violation(self, message: str, details: dict[str, Any] | None = None) -> Violation:
        """Build a violation for the current position.

        Args:
            message: Human-readable description
            details: Optional structured details

        Returns:
            Violation carrying this context's path and path kind
        """
        return Violation(
            path=self.path,
            path_kind=self.path_kind,
            message=message,
            details=dict(details) if details else {},
        )


def new_context(
    value: Any,
    *,
    declared_type: Any = None,
    settings: ValidationSettings | None = None,
) -> Context:
    """Create the root context for validating ``value``.

    Args:
        value: Value to validate
        declared_type: Type to treat ``value`` as, e.g. ``Optional[User]`` to
            validate a ``None`` that stands for a missing user
        settings: Struct tag and strictness; defaults to ``ValidationSettings()``

    Returns:
        Context with a single, unnamed root value
    """
    settings = settings or ValidationSettings()
    return Context(
        stack=(Value("", Node(value, declared_type)),),
        struct_tag=settings.struct_tag,
        strict_types=settings.strict_types,
    )


@functools.lru_cache(maxsize=256)
def _fields_by_name(cls: type) -> dict[str, dataclasses.Field]:
    return {f.name: f for f in dataclasses.fields(cls)}


def field_name(ctx: Context, field: str) -> str:
    """Resolve the display name of a field on the current record.

    The name comes from the field's metadata under ``ctx.struct_tag`` (only the
    part before the first comma, so ``"email,omitempty"`` gives ``email``). An
    empty tag or ``"-"`` means no override, and the attribute name is used.

    Args:
        ctx: Context whose current value is a dataclass instance or type
        field: Attribute name of the field

    Returns:
        The field's display name

    Raises:
        KindMismatchError: If the current value is not a record
        FieldNotFoundError: If the record has no such field
    """
    node = unwrap_value(ctx.current().node)
    cls = record_class(node.type)
    must_be(cls, Kind.STRUCT)

    fields = _fields_by_name(cls)
    if field not in fields:
        raise FieldNotFoundError(field, cls.__name__)

    tag = fields[field].metadata.get(ctx.struct_tag)
    if isinstance(tag, str):
        name = tag.split(",", 1)[0].strip()
        if name and name != "-":
            return name

    return field


__all__ = ["Context", "Value", "field_name", "new_context"]
