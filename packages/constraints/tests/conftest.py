"""Pytest configuration for validknobs_constraints tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from validknobs_core import ValidationSettings, new_context  # noqa: E402


@pytest.fixture
def permissive():
    """Settings that report kind mismatches as violations."""
    return ValidationSettings(strict_types=False)


@pytest.fixture
def check():
    """Run a constraint against a fresh root context for a value."""
    def _check(constraint, value, declared_type=None, settings=None):
        ctx = new_context(value, declared_type=declared_type, settings=settings)
        return constraint.violations(ctx)
    return _check
