"""
Number types: ExactNumber and FuzzyNumber.

A Number is an ExactValue times a symbolic Factor, optionally with Fuzz.
ExactNumber has no fuzz and never holds a double; FuzzyNumber may hold any
value variant with an optional fuzz. Arithmetic keeps results exact
whenever every input is exact and the operation closes over rationals.

Fuzz magnitudes are expressed in the units of the stored value, so the
real uncertainty is fuzz * factor.multiplier.
"""

from __future__ import annotations

import fractions
import math
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fuzzynum.core.errors import IncompatibleFactorError, InvalidValueError
from fuzzynum.core.logging import get_logger
from .context import Context, resolve_context
from .exact import DoubleVal, ExactValue, InvalidVal, exact_value
from .factor import Factor, additive_factor, multiplicative_factor, quotient_factor
from .fuzz import (
    Fuzz,
    FuzzShape,
    FuzzStyle,
    add_uncertainty,
    combine_product,
    combine_quotient,
    combine_sum,
    confidence_multiplier,
    overlaps,
)
from .rational import Rational
from .value import MathValue, Ordering

logger = get_logger(__name__)

_COERCIBLE = (int, float, fractions.Fraction, Rational, ExactValue)


def _combined_fuzz(combine, a: Number, b: Number) -> Optional[Fuzz]:
    """
    Fuzz of a binary result; float nominals are only needed when an operand has fuzz.

    Raises:
        OverflowError: if a fuzzy operand's value is beyond double range
    """
    if a.fuzz is None and b.fuzz is None:
        return None
    return combine(a.fuzz, a.raw, b.fuzz, b.raw)


def _out_of_range(operation: str, a: Number, b: Number) -> Number:
    logger.debug(
        f"Cannot {operation} {type(a).__name__} and {type(b).__name__}: "
        "fuzz nominal exceeds double range"
    )
    return Number.invalid()


class Number(BaseModel, MathValue):
    """
    Abstract number: value * factor (+/- fuzz).

    Examples:
        >>> Number.of(3) / 4  # exact 3/4
        >>> Number.pi / 2  # exact pi/2
        >>> Number.of(2).sqrt()  # fuzzy 1.4142135623730951
    """

    model_config = ConfigDict(frozen=True)

    value: ExactValue = Field(description="The stored value")
    factor: Factor = Field(default=Factor.SCALAR, description="Symbolic multiplier")

    zero: ClassVar[Number]
    one: ClassVar[Number]
    pi: ClassVar[Number]
    e: ClassVar[Number]

    def __init__(self, **data: Any):
        if type(self) is Number:
            raise TypeError("Number is abstract; use ExactNumber, FuzzyNumber or Number.of()")
        super().__init__(**data)

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, v: Any) -> ExactValue:
        return exact_value(v)

    # Construction

    @staticmethod
    def create(
        value: Any,
        factor: Factor = Factor.SCALAR,
        fuzz: Optional[Fuzz] = None,
        fuzzy: bool = False,
    ) -> Number:
        """
        Most specific Number for the given parts.

        Exact (no fuzz, non-double) values become ExactNumber unless fuzzy
        is requested; an Invalid value drops its fuzz.
        """
        value = exact_value(value)
        if value.is_invalid:
            return ExactNumber(value, factor)
        if fuzz is None and not fuzzy and value.is_exact:
            return ExactNumber(value, factor)
        return FuzzyNumber(value, factor, fuzz)

    @staticmethod
    def of(x: Any, factor: Factor = Factor.SCALAR) -> Number:
        """
        Number from a Python value.

        Numbers are returned unchanged; strings go through the literal
        parser; Python floats are taken at face value (no fuzz).
        """
        if isinstance(x, Number):
            return x
        if isinstance(x, str):
            from fuzzynum.parser import parse_number
            return parse_number(x)
        return Number.create(x, factor)

    @staticmethod
    def invalid() -> Number:
        return ExactNumber(InvalidVal())

    @staticmethod
    def _coerce(other: Any) -> Optional[Number]:
        if isinstance(other, Number):
            return other
        if isinstance(other, _COERCIBLE) and not isinstance(other, bool):
            return Number.of(other)
        return None

    # Properties

    @property
    def is_invalid(self) -> bool:
        return self.value.is_invalid

    @property
    def is_fuzzy(self) -> bool:
        """True for FuzzyNumber, even without fuzz."""
        return isinstance(self, FuzzyNumber)

    @property
    def raw(self) -> float:
        """Stored value as a float, without the factor."""
        return self.value.to_float()

    @property
    def nominal(self) -> float:
        """Real quantity as a float."""
        return self.raw * self.factor.multiplier

    def materialize(self) -> Number:
        return self

    # Factor conversion

    def scaled(self, target: Factor, context: Optional[Context] = None) -> Number:
        """
        Same quantity expressed in another factor.

        The conversion is inexact and adds relative double-precision fuzz,
        except for an exact zero.

        Raises:
            IncompatibleFactorError: if the conversion is undefined
        """
        if self.factor is target or self.is_invalid:
            return self
        m = self.factor.conversion_to(target)
        if m is None:
            raise IncompatibleFactorError(self.factor.value, target.value, "convert")
        if self.value.is_zero():
            return Number.create(self.value, target, self.fuzz, fuzzy=self.is_fuzzy)

        ctx = resolve_context(context)
        logger.debug(f"Converting {self} from {self.factor.value} to {target.value}")
        value = self.value.multiply(DoubleVal(value=m))
        if value.is_invalid:
            return Number.invalid()
        raw = value.to_float()
        fuzz = self.fuzz.scaled(m) if self.fuzz is not None else None
        if fuzz is None:
            fuzz = Fuzz.gaussian(ctx.double_precision, FuzzStyle.RELATIVE)
        else:
            fuzz = add_uncertainty(fuzz, raw, ctx.double_precision * abs(raw))
        return Number.create(value, target, fuzz, fuzzy=True)

    # Comparison

    def compare(self, other: Any, p: Optional[float] = None, context: Optional[Context] = None) -> Ordering:
        """
        Three-way comparison at confidence p.

        Values with different factors are compared in Scalar. Overlapping
        distributions compare EQ. Invalid has no ordering, even against
        itself (see equals()).

        Raises:
            InvalidValueError: if either side is Invalid
            ValueError: if p is outside (0, 1)
        """
        other = Number.of(other)
        ctx = resolve_context(context)
        p = ctx.confidence if p is None else p
        confidence_multiplier(p)
        if self.is_invalid or other.is_invalid:
            raise InvalidValueError("compare")

        a, b = self, other
        if a.factor is not b.factor:
            a, b = a.scaled(Factor.SCALAR, ctx), b.scaled(Factor.SCALAR, ctx)

        ordering = a.value.compare(b.value)
        if ordering is Ordering.EQ or (a.fuzz is None and b.fuzz is None):
            return ordering
        try:
            a_raw, b_raw = a.raw, b.raw
        except OverflowError:
            # Beyond double range the distributions cannot be evaluated; keep the exact ordering
            return ordering
        if overlaps(a.fuzz, a_raw, b.fuzz, b_raw, p, ctx.fuzz_epsilon):
            return Ordering.EQ
        return ordering

    def equals(self, other: Any) -> bool:
        """
        Structural equality of value, factor and fuzz.

        Unlike compare(), this never raises: Invalid equals Invalid, although
        an Invalid number has no ordering and compare() rejects it.
        """
        if not isinstance(other, Number):
            return False
        return (
            self.value == other.value
            and self.factor is other.factor
            and self.fuzz == other.fuzz
        )

    def signum(self, p: Optional[float] = None) -> int:
        return int(self.compare(ExactNumber(0, self.factor), p))

    def is_zero(self, p: Optional[float] = None) -> bool:
        return self.signum(p) == 0

    def __eq__(self, other: Any) -> bool:
        other_number = Number._coerce(other)
        if other_number is None:
            return NotImplemented
        return self.equals(other_number)

    def __hash__(self) -> int:
        return hash((self.value, self.factor, self.fuzz))

    # Arithmetic

    def _add(self, other: Number, negate: bool) -> Number:
        if negate:
            other = -other
        if self.is_invalid or other.is_invalid:
            return Number.invalid()
        factor = additive_factor(self.factor, other.factor, "subtract" if negate else "add")
        a, b = self.scaled(factor), other.scaled(factor)
        value = a.value.add(b.value)
        if value.is_invalid:
            return Number.invalid()
        try:
            fuzz = _combined_fuzz(combine_sum, a, b)
        except OverflowError:
            return _out_of_range("add", a, b)
        return Number.create(value, factor, fuzz, fuzzy=a.is_fuzzy or b.is_fuzzy)

    def _multiply(self, other: Number) -> Number:
        if self.is_invalid or other.is_invalid:
            return Number.invalid()
        a, b = self, other
        factor = multiplicative_factor(a.factor, b.factor)
        if factor is None:
            a, b, factor = a.scaled(Factor.SCALAR), b.scaled(Factor.SCALAR), Factor.SCALAR
        value = a.value.multiply(b.value)
        if value.is_invalid:
            return Number.invalid()
        try:
            fuzz = _combined_fuzz(combine_product, a, b)
        except OverflowError:
            return _out_of_range("multiply", a, b)
        return Number.create(value, factor, fuzz, fuzzy=a.is_fuzzy or b.is_fuzzy)

    def _divide(self, other: Number) -> Number:
        if self.is_invalid or other.is_invalid:
            return Number.invalid()
        a, b = self, other
        factor = quotient_factor(a.factor, b.factor)
        if factor is None:
            a, b, factor = a.scaled(Factor.SCALAR), b.scaled(Factor.SCALAR), Factor.SCALAR
        value = a.value.divide(b.value)
        if value.is_invalid:
            return Number.invalid()
        try:
            fuzz = _combined_fuzz(combine_quotient, a, b)
        except OverflowError:
            return _out_of_range("divide", a, b)
        return Number.create(value, factor, fuzz, fuzzy=a.is_fuzzy or b.is_fuzzy)

    def __add__(self, other: Any) -> Number:
        other = Number._coerce(other)
        return NotImplemented if other is None else self._add(other, negate=False)

    def __radd__(self, other: Any) -> Number:
        other = Number._coerce(other)
        return NotImplemented if other is None else other._add(self, negate=False)

    def __sub__(self, other: Any) -> Number:
        other = Number._coerce(other)
        return NotImplemented if other is None else self._add(other, negate=True)

    def __rsub__(self, other: Any) -> Number:
        other = Number._coerce(other)
        return NotImplemented if other is None else other._add(self, negate=True)

    def __mul__(self, other: Any) -> Number:
        other = Number._coerce(other)
        return NotImplemented if other is None else self._multiply(other)

    def __rmul__(self, other: Any) -> Number:
        other = Number._coerce(other)
        return NotImplemented if other is None else other._multiply(self)

    def __truediv__(self, other: Any) -> Number:
        other = Number._coerce(other)
        return NotImplemented if other is None else self._divide(other)

    def __rtruediv__(self, other: Any) -> Number:
        other = Number._coerce(other)
        return NotImplemented if other is None else other._divide(self)

    def __pow__(self, other: Any) -> Number:
        other = Number._coerce(other)
        if other is None:
            return NotImplemented
        from . import functions
        return functions.power(self, other)

    def __rpow__(self, other: Any) -> Number:
        other = Number._coerce(other)
        if other is None:
            return NotImplemented
        from . import functions
        return functions.power(other, self)

    def __neg__(self) -> Number:
        return Number.create(self.value.negate(), self.factor, self.fuzz, fuzzy=self.is_fuzzy)

    def __pos__(self) -> Number:
        return self

    def __abs__(self) -> Number:
        return Number.create(self.value.absolute(), self.factor, self.fuzz, fuzzy=self.is_fuzzy)

    # Transcendental functions

    def sqrt(self, context: Optional[Context] = None) -> Number:
        from . import functions
        return functions.sqrt(self, context)

    def exp(self, context: Optional[Context] = None) -> Number:
        from . import functions
        return functions.exp(self, context)

    def ln(self, context: Optional[Context] = None) -> Number:
        from . import functions
        return functions.ln(self, context)

    def sin(self, context: Optional[Context] = None) -> Number:
        from . import functions
        return functions.sin(self, context)

    def cos(self, context: Optional[Context] = None) -> Number:
        from . import functions
        return functions.cos(self, context)

    def tan(self, context: Optional[Context] = None) -> Number:
        from . import functions
        return functions.tan(self, context)

    def atan(self, context: Optional[Context] = None) -> Number:
        from . import functions
        return functions.atan(self, context)

    # String representations

    def to_string(self) -> str:
        if self.is_invalid:
            return "NaN"
        if self.fuzz is None and self.value.is_exact:
            return self._exact_string()
        return self._fuzzy_string()

    def _exact_string(self) -> str:
        r = self.value.to_rational()
        if self.factor.is_scalar:
            return r.to_string()
        symbol = self.factor.symbol
        if r.numerator == 0:
            return "0"
        num = {1: "", -1: "-"}.get(r.numerator, str(r.numerator))
        if r.denominator == 1:
            return f"{num}{symbol}"
        return f"{num}{symbol}/{r.denominator}"

    def _fuzzy_string(self) -> str:
        brackets = "[]" if self.fuzz is not None and self.fuzz.shape is FuzzShape.BOX else "()"
        try:
            raw = self.raw
        except OverflowError:
            # Exact value beyond double range, e.g. 10(1) ** 400
            style = " rel" if self.fuzz.is_relative else ""
            return f"{self._exact_string()}{brackets[0]}{self.fuzz.magnitude:g}{style}{brackets[1]}"
        symbol = self.factor.symbol
        if self.fuzz is None:
            return f"{raw!r}{symbol}"
        magnitude = self.fuzz.absolute_magnitude(raw)
        if magnitude == 0:
            return f"{raw!r}{symbol}"
        decimals = 1 - math.floor(math.log10(magnitude))
        if decimals <= 0:
            return f"{round(raw)}{brackets[0]}{round(magnitude)}{brackets[1]}{symbol}"
        digits = round(magnitude * 10 ** decimals)
        return f"{raw:.{decimals}f}{brackets[0]}{digits}{brackets[1]}{symbol}"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.to_string()})"


class ExactNumber(Number):
    """
    Number without fuzz.

    Holds an Int, BigInt, Rational or Invalid value, never a double.
    """

    def __init__(self, value: Any = 0, factor: Factor = Factor.SCALAR, **kwargs):
        super().__init__(value=value, factor=factor, **kwargs)

    @field_validator("value")
    @classmethod
    def _no_double(cls, v: ExactValue) -> ExactValue:
        if isinstance(v, DoubleVal):
            raise ValueError("ExactNumber cannot hold a double")
        return v

    @property
    def fuzz(self) -> Optional[Fuzz]:
        return None


class FuzzyNumber(Number):
    """Number with an optional fuzz; may hold any value variant."""

    fuzz: Optional[Fuzz] = Field(default=None, description="Attached error, None when unknown or zero")

    def __init__(self, value: Any = 0, factor: Factor = Factor.SCALAR, fuzz: Optional[Fuzz] = None, **kwargs):
        super().__init__(value=value, factor=factor, fuzz=fuzz, **kwargs)

    @field_validator("fuzz")
    @classmethod
    def _drop_zero_fuzz(cls, v: Optional[Fuzz]) -> Optional[Fuzz]:
        if v is not None and v.magnitude == 0:
            return None
        return v


Number.zero = ExactNumber(0)
Number.one = ExactNumber(1)
Number.pi = ExactNumber(1, Factor.PI)
Number.e = ExactNumber(1, Factor.E)
