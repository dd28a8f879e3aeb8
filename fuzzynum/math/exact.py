"""
Exact value variants.

An ExactValue is exactly one of:
- IntVal: 64-bit signed integer
- BigIntVal: integer outside the 64-bit range
- RationalVal: reduced fraction
- DoubleVal: inherently inexact IEEE double
- InvalidVal: undefined result, absorbing under every operation

Every value produced by exact_value() or by arithmetic is canonical, i.e.
held in the most specific variant per ValuePrecedence.
"""

from __future__ import annotations

import fractions
import math
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field

from fuzzynum.core.errors import InvalidValueError, MalformedLiteralError
from fuzzynum.core.logging import get_logger
from .rational import Rational
from .value import Ordering, ValuePrecedence

logger = get_logger(__name__)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class ExactValue(BaseModel, ABC):
    """Base of the closed value variant."""

    model_config = ConfigDict(frozen=True)

    precedence: ClassVar[ValuePrecedence]

    @property
    def is_invalid(self) -> bool:
        return self.precedence is ValuePrecedence.INVALID

    @property
    def is_exact(self) -> bool:
        """True for Int, BigInt and Rational."""
        return self.precedence <= ValuePrecedence.RATIONAL

    @abstractmethod
    def to_float(self) -> float:
        pass

    @abstractmethod
    def to_rational(self) -> Rational:
        """Exact rational form (the binary expansion for a double)."""
        pass

    @abstractmethod
    def to_string(self) -> str:
        pass

    def __str__(self) -> str:
        return self.to_string()

    # Arithmetic

    def _combine(
        self,
        other: ExactValue,
        operation: str,
        exact_op: Callable[[Rational, Rational], Rational],
        float_op: Callable[[float, float], float],
    ) -> ExactValue:
        if self.is_invalid or other.is_invalid:
            return InvalidVal()
        try:
            if self.precedence is ValuePrecedence.DOUBLE or other.precedence is ValuePrecedence.DOUBLE:
                return canonicalize(DoubleVal(value=float_op(self.to_float(), other.to_float())))
            return exact_op(self.to_rational(), other.to_rational()).to_exact_value()
        except (ZeroDivisionError, OverflowError) as e:
            logger.debug(f"{operation} of {self} and {other} is invalid: {e}")
            return InvalidVal()

    def add(self, other: ExactValue) -> ExactValue:
        return self._combine(other, "add", Rational.add, lambda a, b: a + b)

    def subtract(self, other: ExactValue) -> ExactValue:
        return self._combine(other, "subtract", Rational.subtract, lambda a, b: a - b)

    def multiply(self, other: ExactValue) -> ExactValue:
        return self._combine(other, "multiply", Rational.multiply, lambda a, b: a * b)

    def divide(self, other: ExactValue) -> ExactValue:
        return self._combine(other, "divide", Rational.divide, lambda a, b: a / b)

    def power(self, exponent: int) -> ExactValue:
        """Integer power; 0 ** negative is Invalid."""
        return self._combine(
            IntVal(value=0), "power",
            lambda a, _: a.power(exponent),
            lambda a, _: a ** exponent,
        )

    def negate(self) -> ExactValue:
        return IntVal(value=0).subtract(self)

    def absolute(self) -> ExactValue:
        if self.is_invalid or self.signum() >= 0:
            return self
        return self.negate()

    def compare(self, other: ExactValue) -> Ordering:
        """
        Exact three-way comparison.

        Doubles are compared through their exact binary expansion.

        Raises:
            InvalidValueError: if either side is Invalid
        """
        if self.is_invalid or other.is_invalid:
            raise InvalidValueError("compare")
        return self.to_rational().compare(other.to_rational())

    def signum(self) -> int:
        if self.is_invalid:
            raise InvalidValueError("take the sign")
        return self.to_rational().signum()

    def is_zero(self) -> bool:
        return not self.is_invalid and self.to_rational().numerator == 0


class InvalidVal(ExactValue):
    """Undefined or unrepresentable result (0/0, sqrt of a negative)."""

    precedence: ClassVar[ValuePrecedence] = ValuePrecedence.INVALID

    def to_float(self) -> float:
        return math.nan

    def to_rational(self) -> Rational:
        raise InvalidValueError("convert to rational")

    def to_string(self) -> str:
        return "NaN"


class IntVal(ExactValue):
    precedence: ClassVar[ValuePrecedence] = ValuePrecedence.INT

    value: int = Field(ge=INT64_MIN, le=INT64_MAX)

    def to_float(self) -> float:
        return float(self.value)

    def to_rational(self) -> Rational:
        return Rational(self.value)

    def to_string(self) -> str:
        return str(self.value)


class BigIntVal(ExactValue):
    precedence: ClassVar[ValuePrecedence] = ValuePrecedence.BIG_INT

    value: int

    def to_float(self) -> float:
        return float(self.value)

    def to_rational(self) -> Rational:
        return Rational(self.value)

    def to_string(self) -> str:
        return str(self.value)


class RationalVal(ExactValue):
    precedence: ClassVar[ValuePrecedence] = ValuePrecedence.RATIONAL

    value: Rational

    def to_float(self) -> float:
        return self.value.to_float()

    def to_rational(self) -> Rational:
        return self.value

    def to_string(self) -> str:
        return self.value.to_string()


class DoubleVal(ExactValue):
    precedence: ClassVar[ValuePrecedence] = ValuePrecedence.DOUBLE

    value: float

    def to_float(self) -> float:
        return self.value

    def to_rational(self) -> Rational:
        if not math.isfinite(self.value):
            raise InvalidValueError("convert a non-finite double to rational")
        return Rational.from_fraction(fractions.Fraction(self.value))

    def to_string(self) -> str:
        return repr(self.value)


def _from_int(n: int) -> ExactValue:
    if INT64_MIN <= n <= INT64_MAX:
        return IntVal(value=n)
    return BigIntVal(value=n)


def canonicalize(v: ExactValue) -> ExactValue:
    """
    Most specific variant holding the same quantity.

    Doubles are never re-expanded into rationals; non-finite doubles are Invalid.
    """
    if isinstance(v, BigIntVal):
        return _from_int(v.value)
    if isinstance(v, RationalVal) and v.value.is_whole():
        return _from_int(v.value.numerator)
    if isinstance(v, DoubleVal) and not math.isfinite(v.value):
        return InvalidVal()
    return v


def exact_value(x: Any) -> ExactValue:
    """
    Canonical ExactValue from a Python number.

    Accepts int, float, fractions.Fraction, Rational or an ExactValue.

    Raises:
        MalformedLiteralError: for anything else
    """
    if isinstance(x, ExactValue):
        return canonicalize(x)
    if isinstance(x, bool):
        raise MalformedLiteralError(x, "booleans are not numbers")
    if isinstance(x, int):
        return _from_int(x)
    if isinstance(x, float):
        return canonicalize(DoubleVal(value=x))
    if isinstance(x, fractions.Fraction):
        return Rational.from_fraction(x).to_exact_value()
    if isinstance(x, Rational):
        return x.to_exact_value()
    raise MalformedLiteralError(x, f"unsupported type {type(x).__name__}")


def rational_or_none(v: ExactValue) -> Optional[Rational]:
    """Rational form of an exact (non-double, valid) value, else None."""
    return v.to_rational() if v.is_exact else None


__all__ = [
    "ExactValue",
    "InvalidVal",
    "IntVal",
    "BigIntVal",
    "RationalVal",
    "DoubleVal",
    "canonicalize",
    "exact_value",
    "rational_or_none",
]
