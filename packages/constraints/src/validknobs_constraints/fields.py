"""Constraints on how many of a record's fields are populated.

Each of these takes attribute names of a dataclass, counts the ones holding
non-empty values and reports the fields by their display names (see
:func:`validknobs_core.field_name`). ``None`` records are skipped.
"""

from __future__ import annotations

from abc import abstractmethod

from validknobs_core import (
    Constraint,
    Context,
    Kind,
    Violation,
    field_name,
    field_node,
    guard_shape,
    is_empty,
    unwrap_value,
)


class _FieldSetConstraint(Constraint):
    def __init__(self, *fields: str):
        self.fields = list(fields)

    def violations(self, ctx: Context) -> list[Violation]:
        node = unwrap_value(ctx.current().node)
        violations = guard_shape(ctx, node, Kind.STRUCT)
        if violations or node.is_nil():
            return violations

        names: list[str] = []
        populated: list[str] = []
        for field in self.fields:
            name = field_name(ctx, field)
            names.append(name)
            if not is_empty(field_node(node, field)):
                populated.append(name)

        return self.evaluate(ctx, names, populated)

    @abstractmethod
    def evaluate(self, ctx: Context, names: list[str], populated: list[str]) -> list[Violation]:
        pass


class _FieldCountConstraint(_FieldSetConstraint):
    def __init__(self, n: int, *fields: str):
        label = type(self).__name__
        if n < 1:
            raise ValueError(f"value of n given to {label} must be at least 1")
        if n >= len(fields):
            raise ValueError(f"value of n given to {label} must be less than the number of fields")
        super().__init__(*fields)
        self.n = n


class AtLeastNRequired(_FieldCountConstraint):
    """At least ``n`` of the given fields must be populated."""

    def evaluate(self, ctx: Context, names: list[str], populated: list[str]) -> list[Violation]:
        if len(populated) < self.n:
            return [
                ctx.violation("minimum number of required fields not met", {
                    "minimum": self.n,
                    "fields": names,
                })
            ]
        return []


class AtMostNRequired(_FieldCountConstraint):
    """At most ``n`` of the given fields may be populated."""

    def evaluate(self, ctx: Context, names: list[str], populated: list[str]) -> list[Violation]:
        if len(populated) > self.n:
            return [
                ctx.violation("maximum number of required fields exceeded", {
                    "actual": len(populated),
                    "maximum": self.n,
                    "fields": names,
                })
            ]
        return []


class ExactlyNRequired(_FieldCountConstraint):
    """Exactly ``n`` of the given fields must be populated."""

    def evaluate(self, ctx: Context, names: list[str], populated: list[str]) -> list[Violation]:
        if len(populated) != self.n:
            return [
                ctx.violation("exact number of required fields not met", {
                    "actual": len(populated),
                    "expected": self.n,
                    "fields": names,
                })
            ]
        return []


class MutuallyExclusive(_FieldSetConstraint):
    """At most one of the given fields may be populated.

    The violation lists the fields that were populated.
    """

    def __init__(self, *fields: str):
        if len(fields) < 2:
            raise ValueError("MutuallyExclusive must be given at least 2 fields")
        super().__init__(*fields)

    def evaluate(self, ctx: Context, names: list[str], populated: list[str]) -> list[Violation]:
        if len(populated) > 1:
            return [ctx.violation("fields are mutually exclusive", {"fields": populated})]
        return []


class MutuallyInclusive(_FieldSetConstraint):
    """Either none or all of the given fields must be populated."""

    def __init__(self, *fields: str):
        if len(fields) < 2:
            raise ValueError("MutuallyInclusive must be given at least 2 fields")
        super().__init__(*fields)

    def evaluate(self, ctx: Context, names: list[str], populated: list[str]) -> list[Violation]:
        if 0 < len(populated) < len(names):
            return [ctx.violation("fields are mutually inclusive", {"fields": names})]
        return []


__all__ = [
    "AtLeastNRequired",
    "AtMostNRequired",
    "ExactlyNRequired",
    "MutuallyExclusive",
    "MutuallyInclusive",
]
