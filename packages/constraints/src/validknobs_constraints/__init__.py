"""Leaf constraints for the validknobs validation engine.

Every constraint here except the presence checks (``Required``, ``Empty``,
``Nil``, ``NotNil``) is optional: it ignores empty values, so it only applies
once a value has been provided.

Example:
    ```python
    from validknobs_core import Elements, Fields, validate
    from validknobs_constraints import MaxLength, Min, Regexp, Required

    violations = validate(user, Fields({
        "Name": Required() & MaxLength(64),
        "Age": Min(18),
        "Emails": Elements(Regexp(r"^[^@]+@[^@]+$")),
    }))
    ```
"""

from .base import KindOf, ValueCheck, ValueConstraint, ValueFunc
from .comparison import Equals, Max, Min, NoneOf, NotEquals, OneOf
from .details import Details
from .fields import (
    AtLeastNRequired,
    AtMostNRequired,
    ExactlyNRequired,
    MutuallyExclusive,
    MutuallyInclusive,
)
from .keys import OneOfKeys
from .length import LENGTH_KINDS, Length, MaxLength, MinLength
from .pattern import Regexp
from .presence import Empty, Nil, NotNil, Required
from .temporal import TimeAfter, TimeBefore

__version__ = "1.0.0"

__all__ = [
    "__version__",
    # Base
    "ValueConstraint",
    "ValueCheck",
    "ValueFunc",
    "KindOf",
    # Presence
    "Required",
    "Empty",
    "Nil",
    "NotNil",
    # Comparison
    "Equals",
    "NotEquals",
    "OneOf",
    "NoneOf",
    "Min",
    "Max",
    # Length
    "LENGTH_KINDS",
    "Length",
    "MinLength",
    "MaxLength",
    # Pattern and time
    "Regexp",
    "TimeAfter",
    "TimeBefore",
    # Keys and fields
    "OneOfKeys",
    "AtLeastNRequired",
    "AtMostNRequired",
    "ExactlyNRequired",
    "MutuallyExclusive",
    "MutuallyInclusive",
    # Wrappers
    "Details",
]
