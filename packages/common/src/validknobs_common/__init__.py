"""Common utilities and base classes for validknobs packages.

This package provides shared functionality used across all validknobs packages:

- **Exceptions**: Unified exception hierarchy with context support
- **Serialization**: Protocols and utilities for to_dict/from_dict patterns

Example:
    ```python
    from validknobs_common import ValidknobsError, serialize_list

    try:
        violations = validate(subject, constraints)
    except ValidknobsError as e:
        print(e.context)

    payload = serialize_list(violations)
    ```
"""

from validknobs_common.exceptions import (
    ConfigurationError,
    NotFoundError,
    OperationError,
    SerializationError,
    ValidknobsError,
)
from validknobs_common.serialization import (
    Serializable,
    deserialize,
    deserialize_list,
    serialize,
    serialize_list,
)

__version__ = "1.0.0"

__all__ = [
    # Version
    "__version__",
    # Exceptions
    "ValidknobsError",
    "ConfigurationError",
    "NotFoundError",
    "OperationError",
    "SerializationError",
    # Serialization
    "Serializable",
    "serialize",
    "deserialize",
    "serialize_list",
    "deserialize_list",
]
