"""Common exception hierarchy for all validknobs packages.

Every validknobs error is fatal: it signals a defect in how a validator was
put together (a malformed constraint, a missing field, a bad setting), never
a property of the data being validated. Data problems are reported as
violations and are never raised.

The hierarchy supports:
- Simple error messages for straightforward cases
- Context dictionaries for rich error information
- Details dictionaries as an alias of the context
- Package-specific extensions

Example:
    ```python
    from validknobs_common.exceptions import ConfigurationError, NotFoundError

    # Simple exception
    raise ConfigurationError("struct_tag must be a string")

    # Context-rich exception
    raise NotFoundError(
        "Field not found",
        context={"field": "Email", "type": "User"}
    )

    # Catch any validknobs error
    try:
        validate(subject, constraints)
    except ValidknobsError as e:
        logger.error(f"Error: {e}")
        if e.context:
            logger.error(f"Context: {e.context}")
    ```
"""

from typing import Any, Dict


class ValidknobsError(Exception):
    """Base exception for all validknobs packages.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context (field names, kinds, etc.)
        details: Alternative to context (both are supported)

    Example:
        ```python
        error = ValidknobsError(
            "Constraint is malformed",
            context={"constraint": "LazyDynamic"}
        )
        str(error)
        # 'Constraint is malformed'
        error.context
        # {'constraint': 'LazyDynamic'}
        ```
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        """Initialize the exception with optional context.

        Args:
            message: Error message
            context: Optional context dictionary
            details: Optional details dictionary (takes precedence over context)
        """
        super().__init__(message)
        self.context = details or context or {}
        self.details = self.context


class ConfigurationError(ValidknobsError):
    """Raised when configuration is invalid or missing.

    Common scenarios include:
    - Unknown setting names
    - Setting values of the wrong type
    - Settings file not found or in an unsupported format

    Example:
        ```python
        raise ConfigurationError(
            "Unknown setting",
            context={"key": "strict", "available": ["struct_tag", "strict_types"]}
        )
        ```
    """

    pass


class NotFoundError(ValidknobsError):
    """Raised when a requested item is not found.

    Use this exception when looking up items by name or key and they
    don't exist, such as a record field that was named in a constraint
    but is not declared on the record type.

    Example:
        ```python
        raise NotFoundError(
            "Field not found",
            context={"field": "Nickname", "type": "User"}
        )
        ```
    """

    pass


class OperationError(ValidknobsError):
    """Raised when an operation cannot proceed.

    Use this exception for failures that don't fit other categories, such
    as asking an empty traversal context for its current position.

    Example:
        ```python
        raise OperationError(
            "Context has no values",
            context={"operation": "current"}
        )
        ```
    """

    pass


class SerializationError(ValidknobsError):
    """Raised when serialization or deserialization fails.

    Common scenarios include:
    - Objects without a to_dict() method
    - to_dict() returning something other than a dict
    - Missing keys when rebuilding an object with from_dict()

    Example:
        ```python
        raise SerializationError(
            "Cannot deserialize violation",
            context={"missing": "path"}
        )
        ```
    """

    pass


__all__ = [
    "ValidknobsError",
    "ConfigurationError",
    "NotFoundError",
    "OperationError",
    "SerializationError",
]
