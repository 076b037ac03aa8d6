"""Type introspection primitives shared by composite and leaf constraints.

Python values carry their runtime type, with the exception of ``None``. To
reason about "a missing value of a known type" (a ``None`` held in an
``Optional[list[str]]`` field, say) every value under inspection is wrapped in
a :class:`Node` that pairs it with the type it was declared with, when that
type is known.
"""

from __future__ import annotations

import asyncio
import dataclasses
import datetime
import functools
import logging
import numbers
import queue
import typing
from collections.abc import Callable, Mapping, Sequence, Set
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from types import NoneType, UnionType
from typing import Any, TypeVar

from .exceptions import FieldNotFoundError

logger = logging.getLogger(__name__)


class Kind(str, Enum):
    """The shape of a value, as far as constraints are concerned."""

    INVALID = "invalid"
    ANY = "any"
    OPTIONAL = "optional"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    COMPLEX = "complex"
    STRING = "string"
    BYTES = "bytes"
    LIST = "list"
    TUPLE = "tuple"
    SET = "set"
    MAP = "map"
    STRUCT = "struct"
    CHANNEL = "channel"
    CALLABLE = "callable"
    TIME = "time"
    OBJECT = "object"

    def __str__(self) -> str:
        return self.value


NILLABLE_KINDS = frozenset({
    Kind.INVALID,
    Kind.ANY,
    Kind.OPTIONAL,
    Kind.LIST,
    Kind.TUPLE,
    Kind.SET,
    Kind.MAP,
    Kind.CHANNEL,
    Kind.CALLABLE,
})

SIZED_KINDS = frozenset({
    Kind.STRING,
    Kind.BYTES,
    Kind.LIST,
    Kind.TUPLE,
    Kind.SET,
    Kind.MAP,
    Kind.CHANNEL,
})

NUMERIC_KINDS = frozenset({Kind.INT, Kind.FLOAT, Kind.COMPLEX})

_WRAPPER_ORIGINS = (typing.Annotated, typing.ClassVar, typing.Final)
_QUEUE_TYPES = (queue.Queue, queue.SimpleQueue, asyncio.Queue)


def _is_union(tp: Any) -> bool:
    origin = typing.get_origin(tp)
    return origin is typing.Union or origin is UnionType


def _strip(tp: Any) -> Any:
    """Remove one wrapping layer from a type, or return it unchanged."""
    if typing.get_origin(tp) in _WRAPPER_ORIGINS:
        return typing.get_args(tp)[0]

    if _is_union(tp):
        args = typing.get_args(tp)
        present = tuple(arg for arg in args if arg is not NoneType)
        if len(present) == len(args):
            return tp
        if len(present) == 1:
            return present[0]
        return typing.Union[present]

    supertype = getattr(tp, "__supertype__", None)
    if supertype is not None:
        return supertype

    return tp


def unwrap_type(tp: Any) -> Any:
    """Strip ``Optional``, ``Annotated``, ``ClassVar``, ``Final`` and ``NewType`` layers.

    Args:
        tp: A class or typing construct

    Returns:
        The innermost type. Unions that don't include ``None`` are returned
        as they are, since there is no single type underneath them.
    """
    while True:
        inner = _strip(tp)
        if inner is tp:
            return tp
        tp = inner


def kind_of(tp: Any) -> Kind:
    """Classify a type (not a value) into a :class:`Kind`."""
    if tp is None or tp is NoneType:
        return Kind.INVALID

    if _is_union(tp):
        return Kind.OPTIONAL if NoneType in typing.get_args(tp) else Kind.ANY

    origin = typing.get_origin(tp)
    if origin in _WRAPPER_ORIGINS or getattr(tp, "__supertype__", None) is not None:
        return kind_of(_strip(tp))

    if tp is Any or tp is object or isinstance(tp, TypeVar) or origin is typing.Literal:
        return Kind.ANY

    cls = origin if origin is not None else tp
    if not isinstance(cls, type):
        return Kind.ANY

    return _kind_of_class(cls)


@functools.lru_cache(maxsize=512)
def _kind_of_class(cls: type) -> Kind:
    # Order matters: str is a Sequence, bool is Integral, datetime is a date.
    if dataclasses.is_dataclass(cls):
        return Kind.STRUCT
    if issubclass(cls, bool):
        return Kind.BOOL
    if issubclass(cls, numbers.Integral):
        return Kind.INT
    if issubclass(cls, (Decimal, numbers.Real)):
        return Kind.FLOAT
    if issubclass(cls, numbers.Complex):
        return Kind.COMPLEX
    if issubclass(cls, str):
        return Kind.STRING
    if issubclass(cls, (bytes, bytearray, memoryview)):
        return Kind.BYTES
    if issubclass(cls, (datetime.date, datetime.time)):
        return Kind.TIME
    if issubclass(cls, Mapping):
        return Kind.MAP
    if issubclass(cls, tuple):
        return Kind.TUPLE
    if issubclass(cls, Set):
        return Kind.SET
    if issubclass(cls, Sequence):
        return Kind.LIST
    if issubclass(cls, _QUEUE_TYPES):
        return Kind.CHANNEL
    if issubclass(cls, Callable):  # type: ignore[arg-type]
        return Kind.CALLABLE
    return Kind.OBJECT


@dataclass(frozen=True)
class Node:
    """A value under inspection, paired with the type it was declared as.

    Attributes:
        value: The runtime value (may be ``None``)
        declared_type: The annotation the value was found under, if known.
            When unset the runtime type of ``value`` is used instead.
    """

    value: Any
    declared_type: Any = None

    @property
    def type(self) -> Any:
        """The declared type, or the runtime type when nothing was declared."""
        if self.declared_type is not None:
            return self.declared_type
        if self.value is None:
            return None
        return type(self.value)

    @property
    def kind(self) -> Kind:
        return kind_of(self.type)

    def is_valid(self) -> bool:
        """False only for an untyped ``None``, which cannot be introspected."""
        return self.type is not None

    def is_nil(self) -> bool:
        return self.value is None

    def length(self) -> int:
        """Number of items held by a sized value (queues report their size)."""
        if isinstance(self.value, _QUEUE_TYPES):
            return self.value.qsize()
        return len(self.value)


def is_empty(node: Node) -> bool:
    """Check whether a node holds no meaningful value.

    A node is empty if it is invalid or ``None``, if it holds the zero value of
    its type (``False``, ``0``, ``0.0``), if it is a sized value of length 0,
    or if it is a dataclass instance whose fields are all empty. The record
    check is shallow: a field holding another record counts as populated, so
    records that refer to each other are safe to inspect. This is the
    definition of absence that makes constraints optional by default.

    Args:
        node: Node to check

    Returns:
        True if the node is empty
    """
    if not node.is_valid() or node.value is None:
        return True

    value = node.value
    kind = kind_of(type(value))

    if kind is Kind.BOOL:
        return not value
    if kind in NUMERIC_KINDS:
        return bool(value == 0)
    if kind in SIZED_KINDS:
        return node.length() == 0
    if kind is Kind.STRUCT:
        return all(_is_empty_field(getattr(value, f.name)) for f in dataclasses.fields(value))
    if kind is Kind.OBJECT and hasattr(value, "__len__"):
        return len(value) == 0

    return False


def _is_empty_field(value: Any) -> bool:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return False
    return is_empty(Node(value))


def is_nillable(node: Node) -> bool:
    """Check whether the node's type is one that can meaningfully hold ``None``.

    The declared type is used as-is (not unwrapped), so an ``Optional[int]``
    node is nillable while an ``int`` node is not.
    """
    return node.kind in NILLABLE_KINDS


def unwrap_value(node: Node) -> Node:
    """Resolve a node to its concrete underlying type.

    ``None`` values are returned unchanged, keeping their wrapped declared
    type, so nil chains can be inspected without errors. For non-``None``
    values the declared type is unwrapped, and replaced by the runtime type
    when it only says "anything" (``Any``, ``object``, a plain ``Union``).

    Args:
        node: Node to unwrap

    Returns:
        The unwrapped node; unwrapping it again returns an equal node
    """
    if node.value is None:
        return node

    tp = unwrap_type(node.type)
    if kind_of(tp) is Kind.ANY:
        tp = type(node.value)

    if tp is node.declared_type:
        return node
    return Node(node.value, tp)


def element_type(tp: Any, index: int = 0) -> Any:
    """Declared type of the element at ``index`` of a sequence type, if known."""
    tp = unwrap_type(tp)
    args = typing.get_args(tp)
    if not args:
        return None

    origin = typing.get_origin(tp)
    if isinstance(origin, type) and issubclass(origin, tuple):
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        return args[index] if index < len(args) else None

    return args[0]


def key_type(tp: Any) -> Any:
    """Declared key type of a mapping type, if known."""
    args = typing.get_args(unwrap_type(tp))
    return args[0] if len(args) == 2 else None


def value_type(tp: Any) -> Any:
    """Declared value type of a mapping type, if known."""
    args = typing.get_args(unwrap_type(tp))
    return args[1] if len(args) == 2 else None


def record_class(tp: Any) -> Any:
    """The dataclass behind a (possibly parameterised) record type."""
    tp = unwrap_type(tp)
    return typing.get_origin(tp) or tp


@functools.lru_cache(maxsize=256)
def field_types(cls: type) -> Mapping[str, Any]:
    """Resolved annotations of every field on a dataclass.

    String annotations (``from __future__ import annotations``) are resolved
    with ``typing.get_type_hints``. Fields whose annotations can't be resolved
    fall back to "unknown", in which case the runtime type of the field value
    is used.
    """
    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as e:
        logger.debug(f"Could not resolve type hints for {cls.__name__}: {e}")
        hints = {}

    return {
        f.name: hints.get(f.name, None if isinstance(f.type, str) else f.type)
        for f in dataclasses.fields(cls)
    }


def field_node(node: Node, name: str) -> Node:
    """Build the node for a named field of a record node.

    Raises:
        FieldNotFoundError: If the record type has no such field
    """
    cls = record_class(node.type)
    types = field_types(cls)
    if name not in types:
        raise FieldNotFoundError(name, getattr(cls, "__name__", str(cls)))

    if node.value is None:
        return Node(None, types[name])
    return Node(getattr(node.value, name), types[name])


__all__ = [
    "Kind",
    "Node",
    "NILLABLE_KINDS",
    "SIZED_KINDS",
    "NUMERIC_KINDS",
    "kind_of",
    "is_empty",
    "is_nillable",
    "unwrap_type",
    "unwrap_value",
    "element_type",
    "key_type",
    "value_type",
    "record_class",
    "field_types",
    "field_node",
]
