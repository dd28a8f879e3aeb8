"""
Rational type for exact values.

Implements a Rational that stores numerator and denominator as integers,
always reduced to lowest terms with the sign carried by the numerator.
"""

from __future__ import annotations

import fractions
from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from sympy import integer_nthroot

from fuzzynum.core.errors import DivisionByZeroError
from .value import Ordering

if TYPE_CHECKING:
    from .exact import ExactValue


def gcd(a: int, b: int) -> int:
    """Greatest Common Divisor."""
    a, b = abs(a), abs(b)
    if a < b:
        a, b = b, a
    if b == 0:
        return a
    r = a % b
    while r != 0:
        a, b = b, r
        r = a % b
    return b


def lcm(a: int, b: int) -> int:
    """Least Common Multiple."""
    return (a // gcd(a, b)) * b


def reduce_fraction(num: int, den: int) -> tuple[int, int]:
    """
    Reduce fraction to lowest terms.

    Ensures denominator is positive.
    """
    if den == 0:
        raise DivisionByZeroError(num)
    if den < 0:
        num, den = -num, -den
    g = gcd(num, den)
    return (num // g, den // g)


def continued_fraction(x: float, max_denominator: int = 10**8) -> tuple[int, int]:
    """
    Convert a real number to a fraction using continued fractions.

    Args:
        x: Real number to convert
        max_denominator: Maximum allowed denominator

    Returns:
        Tuple of (numerator, denominator)
    """
    step = x
    n = int(step)
    h0, h1, k0, k1 = 1, n, 0, 1

    # End when step is an integer or denominator exceeds max
    while step != n and k1 <= max_denominator:
        step = 1 / (step - n)
        n = int(step)

        h0, h1 = h1, n * h1 + h0
        k0, k1 = k1, n * k1 + k0

        if k1 > max_denominator:
            return (h0, k0)

    return (h1, k1)


class Rational(BaseModel):
    """
    Rational represents an exact fraction numerator/denominator.

    Examples:
        >>> Rational(1, 2)  # 1/2
        >>> Rational(6, -4)  # -3/2
        >>> Rational(5)  # 5/1
    """

    model_config = ConfigDict(frozen=True)

    numerator: int = Field(description="The numerator (carries the sign)")
    denominator: int = Field(gt=0, description="The denominator, always positive")

    def __init__(self, num: int = 0, den: int = 1, **kwargs):
        """
        Create a Rational in lowest terms.

        Raises:
            DivisionByZeroError: if den is zero
        """
        if "numerator" in kwargs or "denominator" in kwargs:
            num = kwargs.pop("numerator", num)
            den = kwargs.pop("denominator", den)
        num, den = reduce_fraction(int(num), int(den))
        super().__init__(numerator=num, denominator=den, **kwargs)

    @classmethod
    def from_fraction(cls, value: fractions.Fraction) -> Rational:
        """Build from a standard library Fraction."""
        return cls(value.numerator, value.denominator)

    @classmethod
    def approximate(cls, x: float, max_denominator: int = 10**8) -> Rational:
        """Closest rational with a bounded denominator, by continued fractions."""
        return cls(*continued_fraction(x, max_denominator))

    # Arithmetic

    def add(self, other: Rational) -> Rational:
        l = lcm(self.denominator, other.denominator)
        new_num = self.numerator * (l // self.denominator) + \
            other.numerator * (l // other.denominator)
        return Rational(new_num, l)

    def subtract(self, other: Rational) -> Rational:
        return self.add(other.negate())

    def multiply(self, other: Rational) -> Rational:
        return Rational(self.numerator * other.numerator,
                        self.denominator * other.denominator)

    def divide(self, other: Rational) -> Rational:
        """
        Raises:
            DivisionByZeroError: if other is zero
        """
        if other.numerator == 0:
            raise DivisionByZeroError(self.numerator)
        return Rational(self.numerator * other.denominator,
                        self.denominator * other.numerator)

    def power(self, exponent: int) -> Rational:
        """Integer power; a negative exponent of zero raises DivisionByZeroError."""
        if exponent >= 0:
            return Rational(self.numerator ** exponent, self.denominator ** exponent)
        if self.numerator == 0:
            raise DivisionByZeroError(0)
        return Rational(self.denominator ** (-exponent), self.numerator ** (-exponent))

    def root(self, k: int) -> Optional[Rational]:
        """
        Exact k-th root, or None when it is not rational.

        Odd roots of negative values are negative; even roots of negative
        values are None.
        """
        if k < 1:
            raise ValueError(f"root index must be positive, got {k}")
        if self.numerator < 0:
            if k % 2 == 0:
                return None
            positive = self.negate().root(k)
            return positive.negate() if positive is not None else None
        num_root, num_exact = integer_nthroot(self.numerator, k)
        if not num_exact:
            return None
        den_root, den_exact = integer_nthroot(self.denominator, k)
        if not den_exact:
            return None
        return Rational(int(num_root), int(den_root))

    def negate(self) -> Rational:
        return Rational(-self.numerator, self.denominator)

    def absolute(self) -> Rational:
        return Rational(abs(self.numerator), self.denominator)

    def signum(self) -> int:
        return (self.numerator > 0) - (self.numerator < 0)

    def is_whole(self) -> bool:
        return self.denominator == 1

    def compare(self, other: Rational) -> Ordering:
        """Cross-multiplied comparison."""
        return Ordering.of(self.numerator * other.denominator -
                           other.numerator * self.denominator)

    # Conversions

    def to_float(self) -> float:
        return self.numerator / self.denominator

    def to_fraction(self) -> fractions.Fraction:
        return fractions.Fraction(self.numerator, self.denominator)

    def to_exact_value(self) -> ExactValue:
        """Canonical exact value (whole rationals become integers)."""
        from .exact import RationalVal, canonicalize
        return canonicalize(RationalVal(value=self))

    def to_string(self) -> str:
        if self.denominator == 1:
            return str(self.numerator)
        return f"{self.numerator}/{self.denominator}"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Rational({self.numerator}, {self.denominator})"

    # Python operators

    @staticmethod
    def _coerce(other: Any) -> Optional[Rational]:
        if isinstance(other, Rational):
            return other
        if isinstance(other, bool):
            return None
        if isinstance(other, int):
            return Rational(other)
        if isinstance(other, fractions.Fraction):
            return Rational.from_fraction(other)
        return None

    def __add__(self, other: Any) -> Rational:
        other = self._coerce(other)
        return NotImplemented if other is None else self.add(other)

    def __radd__(self, other: Any) -> Rational:
        return self.__add__(other)

    def __sub__(self, other: Any) -> Rational:
        other = self._coerce(other)
        return NotImplemented if other is None else self.subtract(other)

    def __rsub__(self, other: Any) -> Rational:
        other = self._coerce(other)
        return NotImplemented if other is None else other.subtract(self)

    def __mul__(self, other: Any) -> Rational:
        other = self._coerce(other)
        return NotImplemented if other is None else self.multiply(other)

    def __rmul__(self, other: Any) -> Rational:
        return self.__mul__(other)

    def __truediv__(self, other: Any) -> Rational:
        other = self._coerce(other)
        return NotImplemented if other is None else self.divide(other)

    def __rtruediv__(self, other: Any) -> Rational:
        other = self._coerce(other)
        return NotImplemented if other is None else other.divide(self)

    def __pow__(self, exponent: Any) -> Rational:
        if isinstance(exponent, int) and not isinstance(exponent, bool):
            return self.power(exponent)
        return NotImplemented

    def __neg__(self) -> Rational:
        return self.negate()

    def __abs__(self) -> Rational:
        return self.absolute()

    def __eq__(self, other: Any) -> bool:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.numerator == other.numerator and self.denominator == other.denominator

    def __hash__(self) -> int:
        return hash((self.numerator, self.denominator))

    def __lt__(self, other: Any) -> bool:
        other = self._coerce(other)
        return NotImplemented if other is None else self.compare(other) is Ordering.LT

    def __le__(self, other: Any) -> bool:
        other = self._coerce(other)
        return NotImplemented if other is None else self.compare(other) is not Ordering.GT

    def __gt__(self, other: Any) -> bool:
        other = self._coerce(other)
        return NotImplemented if other is None else self.compare(other) is Ordering.GT

    def __ge__(self, other: Any) -> bool:
        other = self._coerce(other)
        return NotImplemented if other is None else self.compare(other) is not Ordering.LT
