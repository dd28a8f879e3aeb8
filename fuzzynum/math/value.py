"""
Base MathValue class for the fuzzynum value system.

This module provides the foundation for numeric value objects with:
- Representation precedence (most specific exact form first)
- Operator overloading
- Confidence-based comparison of fuzzy values
- A single materialize() contract shared with the expression layer
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Any, Optional


class ValuePrecedence(IntEnum):
    """
    Representation precedence of exact values.

    Lower values are more specific. Canonicalization always picks the
    lowest precedence that can hold a quantity exactly.
    """

    INT = 0  # 64-bit signed integer
    BIG_INT = 1  # Arbitrary-precision integer outside the 64-bit range
    RATIONAL = 2  # Reduced fraction
    DOUBLE = 3  # IEEE double (inexact)
    INVALID = 4  # Undefined result (absorbing)


class Ordering(IntEnum):
    """Result of a three-way comparison."""

    LT = -1
    EQ = 0
    GT = 1

    def invert(self) -> Ordering:
        return Ordering(-self.value)

    @classmethod
    def of(cls, x: float | int) -> Ordering:
        """Ordering from the sign of x."""
        return cls((x > 0) - (x < 0))


class MathValue(ABC):
    """
    Base class for user-facing numeric values.

    Provides:
    - Operator overloading (all Python arithmetic operators)
    - Three-way comparison at a confidence level
    - Transcendental functions
    - String representation

    Subclasses must implement all abstract methods.

    Note: Concrete subclasses should inherit from both BaseModel and MathValue,
    e.g., `class ExactNumber(Number)` where `class Number(BaseModel, MathValue)`.
    MathValue itself is abstract and does not inherit from BaseModel to avoid
    MRO conflicts.
    """

    @abstractmethod
    def compare(self, other: Any, p: Optional[float] = None) -> Ordering:
        """
        Three-way comparison.

        Args:
            other: Value to compare against
            p: Confidence at which overlapping fuzzy values are declared equal
               (None = context default)

        Returns:
            Ordering.LT, Ordering.EQ or Ordering.GT
        """
        pass

    @abstractmethod
    def equals(self, other: Any) -> bool:
        """Strict structural equality (value, factor and fuzz descriptor)."""
        pass

    @abstractmethod
    def materialize(self) -> MathValue:
        """Evaluate to a concrete value; idempotent for values."""
        pass

    # String representations

    @abstractmethod
    def to_string(self) -> str:
        """Convert to human-readable string."""
        pass

    def __str__(self) -> str:
        """String representation (uses to_string)."""
        return self.to_string()

    def __repr__(self) -> str:
        """Debug representation."""
        return f"{self.__class__.__name__}({self.to_string()})"

    # Operator overloading (Python magic methods)

    @abstractmethod
    def __add__(self, other: Any) -> MathValue:
        """Addition: self + other"""
        pass

    @abstractmethod
    def __radd__(self, other: Any) -> MathValue:
        """Right addition: other + self"""
        pass

    @abstractmethod
    def __sub__(self, other: Any) -> MathValue:
        """Subtraction: self - other"""
        pass

    @abstractmethod
    def __rsub__(self, other: Any) -> MathValue:
        """Right subtraction: other - self"""
        pass

    @abstractmethod
    def __mul__(self, other: Any) -> MathValue:
        """Multiplication: self * other"""
        pass

    @abstractmethod
    def __rmul__(self, other: Any) -> MathValue:
        """Right multiplication: other * self"""
        pass

    @abstractmethod
    def __truediv__(self, other: Any) -> MathValue:
        """Division: self / other"""
        pass

    @abstractmethod
    def __rtruediv__(self, other: Any) -> MathValue:
        """Right division: other / self"""
        pass

    @abstractmethod
    def __pow__(self, other: Any) -> MathValue:
        """Exponentiation: self ** other"""
        pass

    @abstractmethod
    def __neg__(self) -> MathValue:
        """Unary negation: -self"""
        pass

    @abstractmethod
    def __abs__(self) -> MathValue:
        """Absolute value: abs(self)"""
        pass

    # Transcendental functions

    @abstractmethod
    def sqrt(self) -> MathValue:
        pass

    @abstractmethod
    def exp(self) -> MathValue:
        pass

    @abstractmethod
    def ln(self) -> MathValue:
        pass

    @abstractmethod
    def sin(self) -> MathValue:
        pass

    @abstractmethod
    def cos(self) -> MathValue:
        pass

    @abstractmethod
    def tan(self) -> MathValue:
        pass

    @abstractmethod
    def atan(self) -> MathValue:
        pass

    # Ordering operators (default confidence)

    def __lt__(self, other: Any) -> bool:
        return self.compare(other) is Ordering.LT

    def __le__(self, other: Any) -> bool:
        return self.compare(other) is not Ordering.GT

    def __gt__(self, other: Any) -> bool:
        return self.compare(other) is Ordering.GT

    def __ge__(self, other: Any) -> bool:
        return self.compare(other) is not Ordering.LT
