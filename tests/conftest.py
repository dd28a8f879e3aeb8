"""
Shared pytest fixtures for the fuzzynum test suites.

This module provides:
- Fixtures for numeric contexts
- Utilities for testing Pydantic validation
- Helpers for inspecting fuzz on results
"""

import pytest
from typing import Any, Type
from pydantic import BaseModel, ValidationError

from fuzzynum.math import Context, Number


@pytest.fixture
def context() -> Context:
    """Context with the library defaults."""
    return Context()


@pytest.fixture
def strict_context() -> Context:
    """Context that demands high confidence before declaring overlap."""
    return Context(confidence=0.99)


@pytest.fixture
def assert_validation_error():
    """Helper to assert that a ValidationError is raised with expected details."""
    def _assert_validation(
        model_class: Type[BaseModel],
        data: dict[str, Any],
        expected_field: str | None = None,
    ) -> ValidationError:
        """
        Assert that creating a model raises ValidationError.

        Args:
            model_class: The Pydantic model class
            data: Invalid data to pass to model
            expected_field: Expected field name in error (optional)

        Returns:
            The ValidationError that was raised
        """
        with pytest.raises(ValidationError) as exc_info:
            model_class(**data)

        error = exc_info.value
        if expected_field:
            field_errors = [e for e in error.errors() if e['loc'][0] == expected_field]
            assert len(field_errors) > 0, f"Expected error for field '{expected_field}' not found"

        return error

    return _assert_validation


@pytest.fixture
def absolute_fuzz():
    """Absolute fuzz magnitude of a number (0.0 when it has none)."""
    def _absolute(number: Number) -> float:
        if number.fuzz is None:
            return 0.0
        return number.fuzz.absolute_magnitude(number.raw)
    return _absolute
