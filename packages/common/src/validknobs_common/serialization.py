"""Serialization protocols and utilities for validknobs packages.

Objects that leave the library (violations in particular) are converted to
plain dictionaries so that callers can hand them to any JSON encoder or wire
format of their choosing, and rebuilt from those dictionaries on the way back.

Example:
    ```python
    from validknobs_common.serialization import deserialize_list, serialize_list
    from validknobs_core import Violation, validate

    payload = json.dumps(serialize_list(validate(subject, constraints)))
    restored = deserialize_list(Violation, json.loads(payload))
    ```
"""

from collections.abc import Iterable
from typing import Any, Dict, Protocol, Type, TypeVar, runtime_checkable

from validknobs_common.exceptions import SerializationError

T = TypeVar("T")


@runtime_checkable
class Serializable(Protocol):
    """Anything with a ``to_dict()`` method and a ``from_dict()`` classmethod.

    ``isinstance()`` checks against this protocol only look for the two
    attributes; their signatures are not verified.
    """

    def to_dict(self) -> Dict[str, Any]:
        ...

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        ...


def serialize(obj: Any) -> Dict[str, Any]:
    """Convert an object to a dictionary through its ``to_dict()`` method.

    Raises:
        SerializationError: If the object has no ``to_dict()``, if it fails,
            or if it returns something other than a dict
    """
    name = type(obj).__name__
    to_dict = getattr(obj, "to_dict", None)
    if to_dict is None:
        raise SerializationError(
            f"{name} is not serializable (no to_dict method)",
            context={"type": name},
        )

    try:
        result = to_dict()
    except Exception as e:
        raise SerializationError(
            f"{name}.to_dict() failed: {e}",
            context={"type": name, "error": str(e)},
        ) from e

    if not isinstance(result, dict):
        raise SerializationError(
            f"{name}.to_dict() must return a dict, not {type(result).__name__}",
            context={"type": name, "result_type": type(result).__name__},
        )
    return result


def deserialize(cls: Type[T], data: Dict[str, Any]) -> T:
    """Rebuild an instance of ``cls`` through its ``from_dict()`` classmethod.

    A :class:`SerializationError` raised by ``from_dict()`` itself is passed
    through untouched; any other failure is wrapped in one.

    Raises:
        SerializationError: If ``cls`` is not :class:`Serializable`, if
            ``data`` is not a dict, or if rebuilding fails
    """
    name = getattr(cls, "__name__", repr(cls))
    if not (isinstance(cls, type) and issubclass(cls, Serializable)):
        raise SerializationError(
            f"{name} is not deserializable (needs to_dict and from_dict)",
            context={"class": name},
        )
    if not isinstance(data, dict):
        raise SerializationError(
            f"{name} data must be a dict, not {type(data).__name__}",
            context={"class": name, "data_type": type(data).__name__},
        )

    try:
        return cls.from_dict(data)  # type: ignore[attr-defined, no-any-return]
    except SerializationError:
        raise
    except Exception as e:
        raise SerializationError(
            f"{name}.from_dict() failed: {e}",
            context={"class": name, "error": str(e), "data": data},
        ) from e


def serialize_list(items: Iterable[Any]) -> list[Dict[str, Any]]:
    """Serialize every item of an iterable, keeping their order."""
    return [serialize(item) for item in items]


def deserialize_list(cls: Type[T], data_list: Iterable[Dict[str, Any]]) -> list[T]:
    """Deserialize every dictionary of an iterable into ``cls``.

    Raises:
        SerializationError: For the first entry that cannot be rebuilt. Its
            position is added to the error context as ``index``.
    """
    items: list[T] = []
    for index, data in enumerate(data_list):
        try:
            items.append(deserialize(cls, data))
        except SerializationError as e:
            e.context.setdefault("index", index)
            raise
    return items


__all__ = [
    "Serializable",
    "serialize",
    "deserialize",
    "serialize_list",
    "deserialize_list",
]
