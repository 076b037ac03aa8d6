"""Constraints on dates and times."""

from __future__ import annotations

import datetime
from typing import Union

from validknobs_core import ConstraintDefinitionError, Context, Kind, Node, Violation

from .base import ValueConstraint

Moment = Union[datetime.datetime, datetime.date, datetime.time]


class _TimeConstraint(ValueConstraint):
    kinds = (Kind.TIME,)
    message = ""

    def __init__(self, moment: Moment):
        self.moment = moment

    def check(self, ctx: Context, node: Node) -> list[Violation]:
        try:
            ok = self.compare(node.value)
        except TypeError as e:
            # naive vs aware datetimes, or date vs datetime
            raise ConstraintDefinitionError(
                f"Cannot compare {type(node.value).__name__} with {type(self.moment).__name__}: {e}",
                context={"path": ctx.path, "moment": self.moment.isoformat()},
            ) from e

        if not ok:
            return [ctx.violation(self.message, {"time": self.moment.isoformat()})]
        return []

    def compare(self, value: Moment) -> bool:
        raise NotImplementedError


class TimeAfter(_TimeConstraint):
    """The value must be strictly after the given moment."""

    message = "value must be after time"

    def compare(self, value: Moment) -> bool:
        return value > self.moment


class TimeBefore(_TimeConstraint):
    """The value must be strictly before the given moment."""

    message = "value must be before time"

    def compare(self, value: Moment) -> bool:
        return value < self.moment


__all__ = ["TimeAfter", "TimeBefore"]
