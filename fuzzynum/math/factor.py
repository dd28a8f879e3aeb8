"""
Symbolic factors.

A Number's real quantity is value * multiplier, where the factor is Scalar
(1), Pi or E. Keeping pi and e symbolic lets pi/2 or 2e stay exact.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional

from fuzzynum.core.errors import IncompatibleFactorError


class Factor(str, Enum):
    SCALAR = "scalar"
    PI = "pi"
    E = "e"

    @property
    def multiplier(self) -> float:
        return _MULTIPLIERS[self]

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @property
    def is_scalar(self) -> bool:
        return self is Factor.SCALAR

    def conversion_to(self, other: Factor) -> Optional[float]:
        """
        Multiplier taking a value in this factor to one in other.

        Only conversions to and from Scalar are defined; Pi and E have no
        mutual conversion and give None.
        """
        if self is other:
            return 1.0
        if other is Factor.SCALAR:
            return self.multiplier
        if self is Factor.SCALAR:
            return 1.0 / other.multiplier
        return None


_MULTIPLIERS = {Factor.SCALAR: 1.0, Factor.PI: math.pi, Factor.E: math.e}
_SYMBOLS = {Factor.SCALAR: "", Factor.PI: "π", Factor.E: "𝑒"}


def additive_factor(left: Factor, right: Factor, operation: str = "add") -> Factor:
    """
    Factor of a sum or difference.

    Shared factors are kept; Scalar with Pi or E goes to Scalar.

    Raises:
        IncompatibleFactorError: for Pi with E
    """
    if left is right:
        return left
    if left.is_scalar or right.is_scalar:
        return Factor.SCALAR
    raise IncompatibleFactorError(left.value, right.value, operation)


def multiplicative_factor(left: Factor, right: Factor) -> Optional[Factor]:
    """
    Factor of a product when it needs no conversion.

    Scalar * F is F; any other combination returns None and is computed in
    Scalar after conversion.
    """
    if left.is_scalar:
        return right
    if right.is_scalar:
        return left
    return None


def quotient_factor(left: Factor, right: Factor) -> Optional[Factor]:
    """
    Factor of a quotient when it needs no conversion.

    F / F cancels exactly to Scalar; F / Scalar stays F; anything else
    returns None and is computed in Scalar after conversion.
    """
    if left is right:
        return Factor.SCALAR
    if right.is_scalar:
        return left
    return None
