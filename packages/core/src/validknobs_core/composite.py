"""Composite constraints: sequencing, structural descent, deferral and conditions.

Descending variants follow the same steps: guard the declared shape of the
current value, skip it if absent, push one child context per element, field
or key, then run the child constraints against each child context and join
the results.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from .constraint import Constraint, ViolationsFunc, as_constraint
from .context import Context, field_name
from .exceptions import ConstraintDefinitionError
from .guards import guard_shape
from .introspection import (
    Kind,
    Node,
    element_type,
    field_node,
    is_empty,
    key_type,
    unwrap_value,
    value_type,
)
from .violation import PathKind, Violation

ConstraintLike = Constraint | ViolationsFunc

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.VAR_POSITIONAL,
)


def _flatten(constraints: Iterable[Any]) -> list[Constraint]:
    flat: list[Constraint] = []
    for c in constraints:
        if isinstance(c, (list, tuple)):
            flat.extend(_flatten(c))
        else:
            flat.append(as_constraint(c))
    return flat


def _run_all(constraints: Iterable[Constraint], ctx: Context) -> list[Violation]:
    violations: list[Violation] = []
    for c in constraints:
        violations.extend(c.violations(ctx))
    return violations


def _key_name(key: Any) -> str:
    return str(key)


def _ordered(items: Iterable[Any]) -> list[Any]:
    try:
        return sorted(items)
    except TypeError:
        return sorted(items, key=repr)


def _accepts_argument(func: Callable[..., Any]) -> bool:
    try:
        params = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        return False
    return any(p.kind in _POSITIONAL for p in params)


class Constraints(Constraint):
    """Runs every constraint against the same context and joins their violations.

    Lists and tuples of constraints are flattened, and plain functions are
    accepted as constraints.
    """

    def __init__(self, *constraints: ConstraintLike | Iterable[ConstraintLike]):
        self.constraints = _flatten(constraints)

    def violations(self, ctx: Context) -> list[Violation]:
        return _run_all(self.constraints, ctx)

    def __len__(self) -> int:
        return len(self.constraints)


class Elements(Constraint):
    """Validates every element of a list, tuple or set, or every value of a mapping.

    Sequence elements are named ``[0]``, ``[1]``, ...; mapping values are named
    by their key. Sets have no order of their own, so their items are sorted
    (by ``repr`` when they don't compare) before being numbered the same way.
    Empty or ``None`` collections are skipped.
    """

    def __init__(self, *constraints: ConstraintLike | Iterable[ConstraintLike]):
        self.constraints = _flatten(constraints)

    def violations(self, ctx: Context) -> list[Violation]:
        node = unwrap_value(ctx.current().node)
        violations = guard_shape(ctx, node, Kind.LIST, Kind.TUPLE, Kind.SET, Kind.MAP)
        if violations or is_empty(node):
            return violations

        for child in self._children(ctx, node):
            violations.extend(_run_all(self.constraints, child))
        return violations

    @staticmethod
    def _children(ctx: Context, node: Node) -> Iterator[Context]:
        if node.kind is Kind.MAP:
            item_type = value_type(node.type)
            for key, item in node.value.items():
                yield ctx.with_value(_key_name(key), Node(item, item_type))
            return

        items = _ordered(node.value) if node.kind is Kind.SET else node.value
        for i, item in enumerate(items):
            yield ctx.with_value(f"[{i}]", Node(item, element_type(node.type, i)))


class Fields(Constraint):
    """Validates named fields of a dataclass instance.

    Child paths use each field's display name (see
    :func:`~validknobs_core.context.field_name`). A ``None`` record is skipped.

    Example:
        ```python
        Fields({
            "Name": Required(),
            "Tags": Elements(MinLength(2)),
        })
        Fields(name=Required(), age=Min(0))
        ```
    """

    def __init__(
        self,
        constraints: Mapping[str, ConstraintLike] | None = None,
        /,
        **named: ConstraintLike,
    ):
        merged = dict(constraints or {})
        merged.update(named)
        self.constraints = {name: as_constraint(c) for name, c in merged.items()}

    def violations(self, ctx: Context) -> list[Violation]:
        node = unwrap_value(ctx.current().node)
        violations = guard_shape(ctx, node, Kind.STRUCT)
        if violations or node.is_nil():
            return violations

        for name, c in self.constraints.items():
            child = ctx.with_value(field_name(ctx, name), field_node(node, name))
            violations.extend(c.violations(child))
        return violations


class Keys(Constraint):
    """Validates every key of a mapping.

    Child contexts hold the key itself and have their path kind set to
    ``PathKind.KEY``. Empty or ``None`` mappings are skipped.
    """

    def __init__(self, *constraints: ConstraintLike | Iterable[ConstraintLike]):
        self.constraints = _flatten(constraints)

    def violations(self, ctx: Context) -> list[Violation]:
        node = unwrap_value(ctx.current().node)
        violations = guard_shape(ctx, node, Kind.MAP)
        if violations or is_empty(node):
            return violations

        declared = key_type(node.type)
        for key in node.value:
            child = ctx.with_value(_key_name(key), Node(key, declared)).with_path_kind(PathKind.KEY)
            violations.extend(_run_all(self.constraints, child))
        return violations


class Map(Constraint):
    """Validates the values stored under specific keys of a mapping.

    Use :class:`Elements` to apply the same constraints to every value, and
    :class:`Keys` to validate the keys themselves. A key missing from the
    mapping is validated as ``None``, so presence constraints still fire.
    """

    def __init__(self, constraints: Mapping[Any, ConstraintLike]):
        self.constraints = {key: as_constraint(c) for key, c in constraints.items()}

    def violations(self, ctx: Context) -> list[Violation]:
        node = unwrap_value(ctx.current().node)
        violations = guard_shape(ctx, node, Kind.MAP)
        if violations or node.is_nil():
            return violations

        declared = value_type(node.type)
        for key, c in self.constraints.items():
            child = ctx.with_value(_key_name(key), Node(node.value.get(key), declared))
            violations.extend(c.violations(child))
        return violations


class Lazy(Constraint):
    """Builds its constraint at validation time.

    The factory is called on every run and never at construction, which is
    what allows constraint trees to refer to themselves (a record with a field
    of its own type).

    Example:
        ```python
        def node_constraints() -> Constraint:
            return Fields({
                "Value": Required(),
                "Next": Lazy(node_constraints),
            })
        ```
    """

    def __init__(self, factory: Callable[[], ConstraintLike]):
        self.factory = factory

    def violations(self, ctx: Context) -> list[Violation]:
        return as_constraint(self.factory()).violations(ctx)


class LazyDynamic(Constraint):
    """Builds its constraint at validation time from the record being validated.

    The factory receives the current (unwrapped) record instance and returns
    the constraint to run against it. This lets rules depend on the record's
    own contents, e.g. a maximum that depends on another field.

    ``expected_type`` states which type the factory is written for. It can be
    the record's declared type (``Optional[Booking]``), its unwrapped type or
    a base class of the instance. Validating anything else is a programmer
    error and raises :class:`ConstraintDefinitionError`. ``None`` records
    are skipped.
    """

    def __init__(
        self,
        factory: Callable[[Any], ConstraintLike],
        expected_type: Any = None,
    ):
        self.factory = factory
        self.expected_type = expected_type

    def violations(self, ctx: Context) -> list[Violation]:
        wrapped = ctx.current().node
        node = unwrap_value(wrapped)
        violations = guard_shape(ctx, node, Kind.STRUCT)
        if violations or node.is_nil():
            return violations

        if self.expected_type is not None and not self._accepts(wrapped, node):
            raise ConstraintDefinitionError(
                f"LazyDynamic factory expects {self.expected_type!r}, got {node.type!r}",
                context={"expected": repr(self.expected_type), "actual": repr(node.type)},
            )

        result = self.factory(node.value)
        try:
            built = as_constraint(result)
        except ConstraintDefinitionError as e:
            raise ConstraintDefinitionError(
                f"LazyDynamic factory must return a Constraint, got {type(result).__name__}",
                context={"type": type(result).__name__},
            ) from e

        return built.violations(ctx)

    def _accepts(self, wrapped: Node, node: Node) -> bool:
        expected = self.expected_type
        if expected == wrapped.type or expected == node.type:
            return True
        if isinstance(expected, type):
            return isinstance(node.value, expected)
        return False


class When(Constraint):
    """Runs its constraints only if a predicate fixed at construction is true.

    Use :class:`WhenFn` when the condition has to be evaluated during
    validation.
    """

    def __init__(self, predicate: bool, *constraints: ConstraintLike | Iterable[ConstraintLike]):
        self.predicate = predicate
        self.constraints = _flatten(constraints)

    def violations(self, ctx: Context) -> list[Violation]:
        if not self.predicate:
            return []
        return _run_all(self.constraints, ctx)


class WhenFn(Constraint):
    """Runs its constraints only if a predicate function returns true.

    The predicate is called once per run. It usually takes no arguments; a
    predicate that accepts a positional argument is passed the current
    :class:`Context` instead, so it can look at the value being validated.

    Example:
        ```python
        WhenFn(lambda: feature_enabled("postcodes"), Required())
        WhenFn(lambda ctx: ctx.current().node.value != "", MinLength(3))
        ```
    """

    def __init__(
        self,
        predicate: Callable[[], bool] | Callable[[Context], bool],
        *constraints: ConstraintLike | Iterable[ConstraintLike],
    ):
        self.predicate = predicate
        self.takes_context = _accepts_argument(predicate)
        self.constraints = _flatten(constraints)

    def violations(self, ctx: Context) -> list[Violation]:
        matched = self.predicate(ctx) if self.takes_context else self.predicate()
        if not matched:
            return []
        return _run_all(self.constraints, ctx)


__all__ = [
    "Constraints",
    "Elements",
    "Fields",
    "Keys",
    "Map",
    "Lazy",
    "LazyDynamic",
    "When",
    "WhenFn",
]
