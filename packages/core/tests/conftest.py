"""Pytest configuration for validknobs_core tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from validknobs_core import Constraint, Context, Violation  # noqa: E402


class CountingConstraint(Constraint):
    """Records every context it is called with and optionally reports a violation."""

    def __init__(self, message: str | None = None):
        self.message = message
        self.contexts: list[Context] = []

    @property
    def calls(self) -> int:
        return len(self.contexts)

    @property
    def paths(self) -> list[str]:
        return [ctx.path for ctx in self.contexts]

    def violations(self, ctx: Context) -> list[Violation]:
        self.contexts.append(ctx)
        if self.message is None:
            return []
        return [ctx.violation(self.message)]


@pytest.fixture
def counter():
    """A constraint that counts calls and never fails."""
    return CountingConstraint()


@pytest.fixture
def failing_counter():
    """A constraint that counts calls and always reports a violation."""
    return CountingConstraint("always fails")


@pytest.fixture
def make_counter():
    """Factory for extra counting constraints within one test."""
    def _make(message: str | None = None) -> CountingConstraint:
        return CountingConstraint(message)
    return _make


@pytest.fixture
def clear_env(monkeypatch):
    """Remove validknobs settings variables from the environment."""
    for name in ("VALIDKNOBS_STRUCT_TAG", "VALIDKNOBS_STRICT_TYPES"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def temp_dir(tmp_path):
    """Directory for settings files written by a test."""
    return tmp_path
