"""Regular expression constraint."""

from __future__ import annotations

import re
from re import Pattern as RegexPattern

from validknobs_core import Context, Kind, Node, Violation

from .base import ValueConstraint


class Regexp(ValueConstraint):
    """A string must match a regular expression.

    Matching uses ``re.search``, so the pattern may match anywhere in the
    string; anchor it with ``^`` and ``$`` to match the whole value.
    """

    kinds = (Kind.STRING,)

    def __init__(self, pattern: str | RegexPattern[str], flags: int = 0):
        """Initialize with a pattern.

        Args:
            pattern: Regex string or a compiled pattern
            flags: Flags used when compiling a string pattern

        Raises:
            re.error: If the pattern is not a valid regular expression
        """
        self.pattern = pattern if isinstance(pattern, RegexPattern) else re.compile(pattern, flags)

    def check(self, ctx: Context, node: Node) -> list[Violation]:
        if not self.pattern.search(node.value):
            return [ctx.violation("value must match regular expression", {"regexp": self.pattern.pattern})]
        return []


__all__ = ["Regexp"]
