"""
Fuzz: explicit statistical error attached to inexact numbers.

A Fuzz is a shape (Gaussian standard deviation or Box half-width), a style
(absolute, or relative to the nominal value) and a non-negative magnitude.
A zero magnitude is never stored: Fuzz.create() returns None instead.

Propagation rules:
- Sums: Gaussian root-sum-of-squares; Box+Box gives a Box of half-width
  (a + b) / sqrt(2); a Box meeting a Gaussian is first converted to its
  Gaussian equivalent sigma = w / sqrt(3).
- Products and quotients: relative root-sum-of-squares, with the first-order
  absolute formula when a nominal value is zero.
- Functions: first-order delta method, sigma_out = |f'(x)| * sigma_in.
"""

from __future__ import annotations

import math
from enum import Enum
from statistics import NormalDist
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

BOX_CONVOLUTION = 1 / math.sqrt(2)
BOX_TO_GAUSSIAN = 1 / math.sqrt(3)


class FuzzShape(str, Enum):
    """Error distribution shape."""

    GAUSSIAN = "gaussian"  # magnitude is a standard deviation
    BOX = "box"  # magnitude is a half-width


class FuzzStyle(str, Enum):
    """Whether the magnitude is absolute or relative to the nominal value."""

    ABSOLUTE = "absolute"
    RELATIVE = "relative"


class Fuzz(BaseModel):
    """Immutable error descriptor."""

    model_config = ConfigDict(frozen=True)

    shape: FuzzShape = FuzzShape.GAUSSIAN
    style: FuzzStyle = FuzzStyle.ABSOLUTE
    magnitude: float = Field(ge=0.0)

    @field_validator("magnitude")
    @classmethod
    def _finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("fuzz magnitude must be finite")
        return v

    @classmethod
    def create(
        cls,
        magnitude: float,
        shape: FuzzShape = FuzzShape.GAUSSIAN,
        style: FuzzStyle = FuzzStyle.ABSOLUTE,
    ) -> Optional[Fuzz]:
        """Fuzz with the given magnitude, or None for zero."""
        if magnitude == 0:
            return None
        return cls(shape=shape, style=style, magnitude=magnitude)

    @classmethod
    def gaussian(cls, sigma: float, style: FuzzStyle = FuzzStyle.ABSOLUTE) -> Optional[Fuzz]:
        return cls.create(sigma, FuzzShape.GAUSSIAN, style)

    @classmethod
    def box(cls, half_width: float, style: FuzzStyle = FuzzStyle.ABSOLUTE) -> Optional[Fuzz]:
        return cls.create(half_width, FuzzShape.BOX, style)

    @property
    def is_relative(self) -> bool:
        return self.style is FuzzStyle.RELATIVE

    def absolute_magnitude(self, nominal: float) -> float:
        if self.is_relative:
            return self.magnitude * abs(nominal)
        return self.magnitude

    def relative_magnitude(self, nominal: float) -> float:
        """
        Raises:
            ValueError: for absolute fuzz around a zero nominal value
        """
        if self.is_relative:
            return self.magnitude
        if nominal == 0:
            raise ValueError("relative fuzz is undefined at zero")
        return self.magnitude / abs(nominal)

    def to_absolute(self, nominal: float) -> Optional[Fuzz]:
        if not self.is_relative:
            return self
        return Fuzz.create(self.absolute_magnitude(nominal), self.shape, FuzzStyle.ABSOLUTE)

    def to_relative(self, nominal: float) -> Optional[Fuzz]:
        if self.is_relative:
            return self
        return Fuzz.create(self.relative_magnitude(nominal), self.shape, FuzzStyle.RELATIVE)

    def gaussian_sigma(self, nominal: float) -> float:
        """Absolute standard deviation of the equivalent Gaussian."""
        sigma = self.absolute_magnitude(nominal)
        if self.shape is FuzzShape.BOX:
            sigma *= BOX_TO_GAUSSIAN
        return sigma

    def scaled(self, factor: float) -> Optional[Fuzz]:
        """Same shape and style, magnitude times |factor| (absolute only)."""
        if self.is_relative:
            return self
        return Fuzz.create(self.magnitude * abs(factor), self.shape, self.style)


def sigma_of(fuzz: Optional[Fuzz], nominal: float) -> float:
    return fuzz.gaussian_sigma(nominal) if fuzz is not None else 0.0


def combine_sum(
    a: Optional[Fuzz], a_nominal: float, b: Optional[Fuzz], b_nominal: float
) -> Optional[Fuzz]:
    """Fuzz of a +/- b."""
    if a is None and b is None:
        return None
    if b is None:
        return a.to_absolute(a_nominal)
    if a is None:
        return b.to_absolute(b_nominal)

    if a.shape is FuzzShape.BOX and b.shape is FuzzShape.BOX:
        width = (a.absolute_magnitude(a_nominal) + b.absolute_magnitude(b_nominal)) * BOX_CONVOLUTION
        return Fuzz.box(width)

    return Fuzz.gaussian(math.hypot(a.gaussian_sigma(a_nominal), b.gaussian_sigma(b_nominal)))


def combine_product(
    a: Optional[Fuzz], a_nominal: float, b: Optional[Fuzz], b_nominal: float
) -> Optional[Fuzz]:
    """Fuzz of a * b."""
    if a is None and b is None:
        return None
    result_nominal = a_nominal * b_nominal

    # One fuzzy operand: the shape survives, magnitude scales linearly
    if b is None:
        return a if a.is_relative and result_nominal != 0 else Fuzz.create(
            a.absolute_magnitude(a_nominal) * abs(b_nominal), a.shape)
    if a is None:
        return b if b.is_relative and result_nominal != 0 else Fuzz.create(
            b.absolute_magnitude(b_nominal) * abs(a_nominal), b.shape)

    if result_nominal == 0:
        return Fuzz.gaussian(math.hypot(
            b_nominal * a.gaussian_sigma(a_nominal),
            a_nominal * b.gaussian_sigma(b_nominal),
        ))

    relative = math.hypot(
        a.gaussian_sigma(a_nominal) / abs(a_nominal),
        b.gaussian_sigma(b_nominal) / abs(b_nominal),
    )
    if a.is_relative and b.is_relative:
        return Fuzz.gaussian(relative, FuzzStyle.RELATIVE)
    return Fuzz.gaussian(relative * abs(result_nominal))


def combine_quotient(
    a: Optional[Fuzz], a_nominal: float, b: Optional[Fuzz], b_nominal: float
) -> Optional[Fuzz]:
    """Fuzz of a / b (b_nominal must be nonzero)."""
    if a is None and b is None:
        return None
    result_nominal = a_nominal / b_nominal

    if b is None:
        return a if a.is_relative and result_nominal != 0 else Fuzz.create(
            a.absolute_magnitude(a_nominal) / abs(b_nominal), a.shape)

    if a_nominal == 0:
        return Fuzz.gaussian(math.hypot(
            sigma_of(a, a_nominal) / b_nominal,
            a_nominal * b.gaussian_sigma(b_nominal) / b_nominal ** 2,
        ))

    relative = math.hypot(
        sigma_of(a, a_nominal) / abs(a_nominal),
        b.gaussian_sigma(b_nominal) / abs(b_nominal),
    )
    if (a is None or a.is_relative) and b.is_relative:
        return Fuzz.gaussian(relative, FuzzStyle.RELATIVE)
    return Fuzz.gaussian(relative * abs(result_nominal))


def propagate(fuzz: Optional[Fuzz], nominal: float, derivative: float) -> Optional[Fuzz]:
    """Delta method: absolute magnitude times |f'(nominal)|, shape kept."""
    if fuzz is None:
        return None
    return Fuzz.create(fuzz.absolute_magnitude(nominal) * abs(derivative), fuzz.shape)


def add_uncertainty(fuzz: Optional[Fuzz], nominal: float, extra: float) -> Optional[Fuzz]:
    """Add an absolute error bound (e.g. series truncation) to a fuzz."""
    if extra == 0:
        return fuzz.to_absolute(nominal) if fuzz is not None else None
    if fuzz is None:
        return Fuzz.gaussian(extra)
    return Fuzz.create(fuzz.absolute_magnitude(nominal) + extra, fuzz.shape)


def confidence_multiplier(p: float) -> float:
    """
    Two-sided normal quantile for confidence p.

    p = 0.5 gives about 0.674 standard deviations.

    Raises:
        ValueError: if p is not strictly between 0 and 1
    """
    if not 0 < p < 1:
        raise ValueError(f"confidence must be in (0, 1), got {p}")
    return NormalDist().inv_cdf((1 + p) / 2)


def combined_sigma(
    a: Optional[Fuzz], a_nominal: float, b: Optional[Fuzz], b_nominal: float
) -> float:
    """Gaussian-equivalent standard deviation of a - b."""
    return math.hypot(sigma_of(a, a_nominal), sigma_of(b, b_nominal))


def overlaps(
    a: Optional[Fuzz], a_nominal: float,
    b: Optional[Fuzz], b_nominal: float,
    p: float, fuzz_epsilon: float = 0.0,
) -> bool:
    """
    Whether the two error distributions overlap at confidence p.

    A combined sigma within fuzz_epsilon of the larger magnitude counts as
    zero, so the nominal values decide.
    """
    if a_nominal == b_nominal:
        return True
    sigma = combined_sigma(a, a_nominal, b, b_nominal)
    if sigma <= fuzz_epsilon * max(abs(a_nominal), abs(b_nominal)):
        return False
    return abs(a_nominal - b_nominal) <= confidence_multiplier(p) * sigma
