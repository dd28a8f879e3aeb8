"""
Factor-aware transcendental functions.

Each function returns an exact result where one exists (sqrt(9/4) = 3/2,
sin(pi/6) = 1/2, exp(1) = e, atan(1) = pi/4, ...). Otherwise the value is
evaluated as a double, by a Series where a convergent one is available,
and the result is a FuzzyNumber whose fuzz combines:
- the input fuzz propagated by the delta method,
- the series truncation error,
- one unit of relative double precision for the final rounding.
"""

from __future__ import annotations

import math
from typing import Any, Optional

from fuzzynum.core.logging import get_logger
from .context import Context, resolve_context
from .exact import DoubleVal
from .factor import Factor
from .fuzz import Fuzz, FuzzStyle, add_uncertainty, propagate, sigma_of
from .number import ExactNumber, FuzzyNumber, Number
from .rational import Rational
from .series import InfiniteSeries, SeriesSum

logger = get_logger(__name__)

LN2 = math.log(2)
SQRT_HALF = math.sqrt(0.5)

HALF = Rational(1, 2)

# sin(r*pi) for r in [0, 2) wherever the result is rational
_SIN_PI = {
    Rational(0): Rational(0),
    Rational(1, 6): Rational(1, 2),
    Rational(1, 2): Rational(1),
    Rational(5, 6): Rational(1, 2),
    Rational(1): Rational(0),
    Rational(7, 6): Rational(-1, 2),
    Rational(3, 2): Rational(-1),
    Rational(11, 6): Rational(-1, 2),
}

# tan(r*pi) for r in [0, 1); None is a pole
_TAN_PI = {
    Rational(0): Rational(0),
    Rational(1, 4): Rational(1),
    Rational(1, 2): None,
    Rational(3, 4): Rational(-1),
}


# Helpers

def _mod(r: Rational, m: int) -> Rational:
    """r reduced into [0, m)."""
    q = r.numerator // (r.denominator * m)
    return r - Rational(q * m)


def _exact_rational(x: Number) -> Optional[Rational]:
    """Rational of a fuzz-free exact value, else None."""
    if x.fuzz is None and x.value.is_exact:
        return x.value.to_rational()
    return None


def _scalar(x: Number, ctx: Context) -> Number:
    return x.scaled(Factor.SCALAR, ctx)


def _raw(x: Number) -> Optional[float]:
    """x.raw, or None when the exact value is beyond double range."""
    try:
        return x.raw
    except OverflowError:
        return None


def _split(r: Rational) -> tuple[float, int]:
    """Mantissa and exponent of a positive rational, r = m * 2**k with m in [0.5, 1)."""
    shift = r.numerator.bit_length() - r.denominator.bit_length()
    m, k = math.frexp((r / Rational(2) ** shift).to_float())
    return m, k + shift


def _invalid(function: str, x: Any) -> Number:
    logger.debug(f"{function}({x}) is undefined")
    return Number.invalid()


def _evaluate(series: InfiniteSeries, scale: float, ctx: Context) -> SeriesSum:
    """Evaluate with an epsilon relative to the leading magnitude."""
    return series.evaluate(epsilon=ctx.series_epsilon * max(1.0, abs(scale)), context=ctx)


def _inexact(
    value: float,
    error: float,
    fuzz: Optional[Fuzz],
    nominal: float,
    derivative: float,
    ctx: Context,
    factor: Factor = Factor.SCALAR,
) -> Number:
    """FuzzyNumber for a double-evaluated result."""
    if not math.isfinite(value):
        return _invalid("evaluate", value)
    fuzz = propagate(fuzz, nominal, derivative)
    fuzz = add_uncertainty(fuzz, value, error + ctx.double_precision * abs(value))
    return FuzzyNumber(DoubleVal(value=value), factor, fuzz)


def _binomial(a: float, k: int) -> float:
    """Generalized binomial coefficient C(a, k)."""
    c = 1.0
    for j in range(k):
        c *= (a - j) / (j + 1)
    return c


# Roots and powers

def sqrt(x: Any, context: Optional[Context] = None) -> Number:
    """
    Square root.

    Exact when numerator and denominator are perfect squares; negative
    values are Invalid; otherwise a binomial series around the double root.
    """
    x = Number.of(x)
    ctx = resolve_context(context)
    if x.is_invalid:
        return x

    r = _exact_rational(x)
    if r is not None:
        if r.signum() < 0:
            return _invalid("sqrt", x)
        if x.factor.is_scalar:
            root = r.root(2)
            if root is not None:
                return ExactNumber(root)

    x = _scalar(x, ctx)
    raw = _raw(x)
    if raw is None or (raw == 0 and x.fuzz is None and not x.value.is_zero()):
        # Exact value outside double range; halve its binary exponent
        if x.fuzz is not None:
            return _invalid("sqrt", x)
        m, k = _split(x.value.to_rational())
        if k % 2:
            m, k = m * 2, k - 1
        try:
            s0 = math.ldexp(math.sqrt(m), k // 2)
        except OverflowError:
            return _invalid("sqrt", x)
    elif raw < 0:
        return _invalid("sqrt", x)
    elif raw == 0:
        # sqrt is not differentiable at zero; the fuzz is square-rooted instead
        fuzz = x.fuzz
        if fuzz is not None:
            fuzz = Fuzz.create(math.sqrt(fuzz.absolute_magnitude(0.0)), fuzz.shape)
        return FuzzyNumber(x.value, Factor.SCALAR, fuzz)
    else:
        s0 = math.sqrt(raw)

    if x.value.is_exact:
        # x = s0^2 (1 + d), computed exactly
        d = (x.value.to_rational() / DoubleVal(value=s0).to_rational() ** 2 - 1).to_float()
    else:
        d = raw / (s0 * s0) - 1

    series = InfiniteSeries(lambda k: s0 * _binomial(0.5, k) * d ** k)
    s = _evaluate(series, s0, ctx)
    return _inexact(s.value, s.error, x.fuzz, raw, 1 / (2 * s0), ctx)


def power(x: Any, y: Any, context: Optional[Context] = None) -> Number:
    """
    x ** y.

    Integer exponents stay exact on exact bases; rational exponents p/q are
    exact when the q-th root is. Negative bases with non-integer exponents
    are Invalid.
    """
    x, y = Number.of(x), Number.of(y)
    ctx = resolve_context(context)
    if x.is_invalid or y.is_invalid:
        return Number.invalid()

    ry = _exact_rational(y) if y.factor.is_scalar else None
    if ry is not None and ry.is_whole():
        n = ry.numerator
        if n == 1:
            return x
        if n == 0:
            return Number.one
        base = x if x.factor.is_scalar else _scalar(x, ctx)
        value = base.value.power(n)
        if value.is_invalid:
            return _invalid("power", (x, y))
        fuzz = None
        if base.fuzz is not None:
            a = _raw(base)
            if a is None:
                return _invalid("power", (x, y))
            try:
                spread = base.fuzz.absolute_magnitude(a) * abs(n * a ** (n - 1))
            except OverflowError:
                spread = math.inf
            if math.isfinite(spread):
                fuzz = Fuzz.create(spread, base.fuzz.shape)
            else:
                # Relative error of x^n is |n| times that of x
                relative = abs(n) * base.fuzz.relative_magnitude(a)
                fuzz = Fuzz.create(relative, base.fuzz.shape, FuzzStyle.RELATIVE)
        return Number.create(value, Factor.SCALAR, fuzz, fuzzy=base.is_fuzzy)

    if ry is not None:
        rx = _exact_rational(x) if x.factor.is_scalar else None
        if rx is not None:
            if rx.signum() < 0:
                return _invalid("power", (x, y))
            root = rx.root(ry.denominator)
            if root is not None:
                return Number.create(root.to_exact_value().power(ry.numerator))

    bx, by = _scalar(x, ctx), _scalar(y, ctx)
    a, b = bx.raw, by.raw
    if a < 0 and not b.is_integer():
        return _invalid("power", (x, y))
    if a == 0:
        if b > 0:
            return Number.create(0, fuzzy=bx.is_fuzzy or by.is_fuzzy)
        return _invalid("power", (x, y))
    try:
        value = a ** b
        dx = b * a ** (b - 1)
    except OverflowError:
        return _invalid("power", (x, y))

    if by.fuzz is None:
        fuzz = propagate(bx.fuzz, a, dx)
    else:
        dy = math.log(abs(a)) * value
        fuzz = Fuzz.gaussian(math.hypot(dx * sigma_of(bx.fuzz, a), dy * sigma_of(by.fuzz, b)))
    return _inexact(value, 0.0, fuzz, value, 1.0, ctx)


# Exponential and logarithm

def exp(x: Any, context: Optional[Context] = None) -> Number:
    """
    e ** x.

    exp(0) = 1 and exp(1) = e are exact; otherwise a Taylor series around
    the nearest integer.
    """
    x = Number.of(x)
    ctx = resolve_context(context)
    if x.is_invalid:
        return x

    r = _exact_rational(x)
    if r is not None:
        if r.numerator == 0:
            return Number.one
        if x.factor.is_scalar and r == 1:
            return Number.e

    x = _scalar(x, ctx)
    raw = _raw(x)
    if raw is None:
        # Huge exponents overflow, huge negative ones underflow to zero
        if x.value.signum() > 0:
            return _invalid("exp", x)
        return _inexact(0.0, 0.0, None, 0.0, 0.0, ctx)
    n = round(raw)
    if x.value.is_exact:
        rem = (x.value.to_rational() - Rational(n)).to_float()
    else:
        rem = raw - n
    try:
        scale = math.exp(n)
    except OverflowError:
        return _invalid("exp", x)

    series = InfiniteSeries(lambda k: scale * rem ** k / math.factorial(k))
    s = _evaluate(series, scale, ctx)
    return _inexact(s.value, s.error, x.fuzz, raw, s.value, ctx)


def ln(x: Any, context: Optional[Context] = None) -> Number:
    """
    Natural logarithm.

    ln(1) = 0 and ln(e) = 1 are exact, and ln(a*e) = ln(a) + 1. Non-positive
    arguments are Invalid. Otherwise x = m * 2^k with m near 1, and
    ln(m) = 2 atanh((m - 1) / (m + 1)) is summed as a series.
    """
    x = Number.of(x)
    ctx = resolve_context(context)
    if x.is_invalid:
        return x

    if x.factor is Factor.E:
        scalar = Number.create(x.value, Factor.SCALAR, x.fuzz, fuzzy=x.is_fuzzy)
        return ln(scalar, ctx) + Number.one

    r = _exact_rational(x)
    if r is not None:
        if r.signum() <= 0:
            return _invalid("ln", x)
        if x.factor.is_scalar and r == 1:
            return Number.zero

    x = _scalar(x, ctx)
    raw = _raw(x)
    if raw is None or (raw == 0 and x.value.signum() > 0):
        # Exact value outside double range; split off the binary exponent exactly
        if x.fuzz is not None or x.value.signum() <= 0:
            return _invalid("ln", x)
        m, k = _split(x.value.to_rational())
        derivative = 0.0
    elif raw <= 0:
        return _invalid("ln", x)
    else:
        m, k = math.frexp(raw)
        derivative = 1 / raw

    if m < SQRT_HALF:
        m, k = m * 2, k - 1
    z = (m - 1) / (m + 1)
    series = InfiniteSeries(lambda i: 2 * z ** (2 * i + 1) / (2 * i + 1))
    s = _evaluate(series, 1.0, ctx)
    return _inexact(k * LN2 + s.value, s.error, x.fuzz, raw, derivative, ctx)


# Trigonometry

def _pi_multiple(x: Number) -> Optional[Rational]:
    """Exact multiple of pi reduced into [0, 2), if x is one."""
    r = _exact_rational(x)
    if r is None:
        return None
    if x.factor is Factor.PI:
        return _mod(r, 2)
    if r.numerator == 0:
        return Rational(0)
    return None


def _reduced_angle(x: Number, ctx: Context) -> Optional[tuple[float, Optional[Fuzz]]]:
    """Angle in [-pi, pi] and its absolute fuzz in radians; None beyond double range."""
    try:
        if x.factor is Factor.PI and x.value.is_exact:
            r = _mod(x.value.to_rational() + 1, 2) - 1
            fuzz = x.fuzz.to_absolute(x.raw) if x.fuzz is not None else None
            if fuzz is not None:
                fuzz = fuzz.scaled(math.pi)
            return r.to_float() * math.pi, fuzz

        xs = _scalar(x, ctx)
        fuzz = xs.fuzz.to_absolute(xs.raw) if xs.fuzz is not None else None
        return math.remainder(xs.raw, 2 * math.pi), fuzz
    except OverflowError:
        return None


def _sin_series(a: float) -> InfiniteSeries:
    return InfiniteSeries(lambda k: (-1) ** k * a ** (2 * k + 1) / math.factorial(2 * k + 1))


def _cos_series(a: float) -> InfiniteSeries:
    return InfiniteSeries(lambda k: (-1) ** k * a ** (2 * k) / math.factorial(2 * k))


def sin(x: Any, context: Optional[Context] = None) -> Number:
    """Sine; exact at rational multiples of pi with a rational result."""
    x = Number.of(x)
    ctx = resolve_context(context)
    if x.is_invalid:
        return x

    r = _pi_multiple(x)
    if r is not None and r in _SIN_PI:
        return ExactNumber(_SIN_PI[r])

    reduced = _reduced_angle(x, ctx)
    if reduced is None:
        return _invalid("sin", x)
    angle, fuzz = reduced
    s = _evaluate(_sin_series(angle), 1.0, ctx)
    return _inexact(s.value, s.error, fuzz, angle, math.cos(angle), ctx)


def cos(x: Any, context: Optional[Context] = None) -> Number:
    """Cosine; exact at rational multiples of pi with a rational result."""
    x = Number.of(x)
    ctx = resolve_context(context)
    if x.is_invalid:
        return x

    r = _pi_multiple(x)
    if r is not None:
        shifted = _mod(r + HALF, 2)
        if shifted in _SIN_PI:
            return ExactNumber(_SIN_PI[shifted])

    reduced = _reduced_angle(x, ctx)
    if reduced is None:
        return _invalid("cos", x)
    angle, fuzz = reduced
    s = _evaluate(_cos_series(angle), 1.0, ctx)
    return _inexact(s.value, s.error, fuzz, angle, -math.sin(angle), ctx)


def tan(x: Any, context: Optional[Context] = None) -> Number:
    """Tangent; exact at multiples of pi/4, Invalid at the poles."""
    x = Number.of(x)
    ctx = resolve_context(context)
    if x.is_invalid:
        return x

    r = _pi_multiple(x)
    if r is not None:
        r = _mod(r, 1)
        if r in _TAN_PI:
            exact = _TAN_PI[r]
            return _invalid("tan", x) if exact is None else ExactNumber(exact)

    reduced = _reduced_angle(x, ctx)
    if reduced is None:
        return _invalid("tan", x)
    angle, fuzz = reduced
    s = _evaluate(_sin_series(angle), 1.0, ctx)
    c = _evaluate(_cos_series(angle), 1.0, ctx)
    if c.value == 0:
        return _invalid("tan", x)
    value = s.value / c.value
    error = (s.error + abs(value) * c.error) / abs(c.value)
    return _inexact(value, error, fuzz, angle, 1 / c.value ** 2, ctx)


def atan(x: Any, context: Optional[Context] = None) -> Number:
    """Arctangent; atan(0) = 0 and atan(+-1) = +-pi/4 are exact."""
    x = Number.of(x)
    ctx = resolve_context(context)
    if x.is_invalid:
        return x

    r = _exact_rational(x) if x.factor.is_scalar else None
    if r is not None:
        if r == 0:
            return Number.zero
        if r == 1:
            return ExactNumber(Rational(1, 4), Factor.PI)
        if r == -1:
            return ExactNumber(Rational(-1, 4), Factor.PI)

    xs = _scalar(x, ctx)
    raw = _raw(xs)
    if raw is None:
        # atan is flat at pi/2 this far out
        return _inexact(math.copysign(math.pi / 2, xs.value.signum()), 0.0, None, 0.0, 0.0, ctx)
    return _inexact(math.atan(raw), 0.0, xs.fuzz, raw, 1 / (1 + raw * raw), ctx)
