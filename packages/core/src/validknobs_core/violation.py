"""Violation type reported by constraints."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from validknobs_common import SerializationError, deserialize_list, serialize_list


class PathKind(str, Enum):
    """Whether a violation concerns a collection key or a value.

    A map key and the value stored under it share the same path string, so
    the path kind tells them apart.
    """

    VALUE = "value"
    KEY = "key"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Violation:
    """A single constraint violation.

    Attributes:
        path: Dotted path from the root to the offending value, e.g. ``.Items.[0]``
        path_kind: Whether ``path`` points at a key or a value
        message: Human-readable description of the problem
        details: Structured information about the violation (allowed values,
            limits, actual sizes, ...)
    """

    path: str
    path_kind: PathKind = PathKind.VALUE
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        return {
            "path": self.path,
            "path_kind": self.path_kind.value,
            "message": self.message,
            "details": dict(self.details),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Violation:
        """Rebuild a violation from :meth:`to_dict` output.

        Raises:
            SerializationError: If required keys are missing or the path kind is unknown
        """
        missing = [key for key in ("path", "message") if key not in data]
        if missing:
            raise SerializationError(
                f"Violation data is missing keys: {', '.join(missing)}",
                context={"missing": missing},
            )

        try:
            path_kind = PathKind(data.get("path_kind", PathKind.VALUE.value))
        except ValueError as e:
            raise SerializationError(
                f"Unknown path kind: {data.get('path_kind')!r}",
                context={"path_kind": data.get("path_kind")},
            ) from e

        return cls(
            path=data["path"],
            path_kind=path_kind,
            message=data["message"],
            details=dict(data.get("details") or {}),
        )


def serialize_violations(violations: Iterable[Violation]) -> list[dict[str, Any]]:
    """Convert violations to a list of JSON-ready dictionaries."""
    return serialize_list(violations)


def deserialize_violations(data: Iterable[dict[str, Any]]) -> list[Violation]:
    """Rebuild violations from the output of :func:`serialize_violations`.

    Raises:
        SerializationError: If an entry is malformed; the error context names
            its ``index``
    """
    return deserialize_list(Violation, data)


__all__ = ["PathKind", "Violation", "deserialize_violations", "serialize_violations"]
