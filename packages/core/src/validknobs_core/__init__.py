"""Validation engine for nested Python values.

Walks dataclass records, lists, tuples and mappings with a composable tree of
constraints and returns a flat list of path-annotated violations.

Example:
    ```python
    from dataclasses import dataclass, field

    from validknobs_core import Elements, Fields, validate
    from validknobs_constraints import MinLength, Required

    @dataclass
    class Order:
        reference: str = field(metadata={"validation": "ref"})
        lines: list[str] = field(default_factory=list)

    violations = validate(Order(""), Fields(
        reference=Required(),
        lines=Elements(MinLength(3)),
    ))
    # [Violation(path='.ref', message='a value is required', ...)]
    ```
"""

from .composite import (
    ConstraintLike,
    Constraints,
    Elements,
    Fields,
    Keys,
    Lazy,
    LazyDynamic,
    Map,
    When,
    WhenFn,
)
from .constraint import Constraint, ConstraintFunc, ViolationsFunc, as_constraint, constraint
from .context import Context, Value, field_name, new_context
from .exceptions import (
    ConstraintDefinitionError,
    EmptyContextError,
    FieldNotFoundError,
    InvalidValueError,
    KindMismatchError,
)
from .guards import KIND_MISMATCH_MESSAGE, guard_shape, must_be, should_be
from .introspection import (
    NILLABLE_KINDS,
    NUMERIC_KINDS,
    SIZED_KINDS,
    Kind,
    Node,
    element_type,
    field_node,
    field_types,
    is_empty,
    is_nillable,
    key_type,
    kind_of,
    record_class,
    unwrap_type,
    unwrap_value,
    value_type,
)
from .settings import DEFAULT_STRUCT_TAG, ENV_PREFIX, ValidationSettings
from .validate import validate, validate_context
from .violation import PathKind, Violation, deserialize_violations, serialize_violations

__version__ = "1.0.0"

__all__ = [
    "__version__",
    # Entry points
    "validate",
    "validate_context",
    # Constraint abstraction
    "Constraint",
    "ConstraintFunc",
    "ConstraintLike",
    "ViolationsFunc",
    "as_constraint",
    "constraint",
    # Composites
    "Constraints",
    "Elements",
    "Fields",
    "Keys",
    "Map",
    "Lazy",
    "LazyDynamic",
    "When",
    "WhenFn",
    # Context and violations
    "Context",
    "Value",
    "new_context",
    "field_name",
    "PathKind",
    "Violation",
    "deserialize_violations",
    "serialize_violations",
    # Guards
    "KIND_MISMATCH_MESSAGE",
    "guard_shape",
    "must_be",
    "should_be",
    # Introspection
    "Kind",
    "Node",
    "NILLABLE_KINDS",
    "NUMERIC_KINDS",
    "SIZED_KINDS",
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
    # Settings
    "DEFAULT_STRUCT_TAG",
    "ENV_PREFIX",
    "ValidationSettings",
    # Errors
    "ConstraintDefinitionError",
    "KindMismatchError",
    "FieldNotFoundError",
    "EmptyContextError",
    "InvalidValueError",
]
