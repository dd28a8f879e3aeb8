"""
fuzzynum.math - exact and fuzzy number types

Numeric value types with:
- Most-specific exact representation (int, big int, rational)
- Explicit error propagation (fuzz) for inexact results
- Confidence-based comparison
- Symbolic pi and e factors
"""

from .context import Context, get_current_context
from .exact import (
    BigIntVal,
    DoubleVal,
    ExactValue,
    IntVal,
    InvalidVal,
    RationalVal,
    canonicalize,
    exact_value,
)
from .factor import Factor
from .functions import atan, cos, exp, ln, power, sin, sqrt, tan
from .fuzz import Fuzz, FuzzShape, FuzzStyle, confidence_multiplier
from .number import ExactNumber, FuzzyNumber, Number
from .rational import Rational, continued_fraction, gcd, lcm, reduce_fraction
from .series import FiniteSeries, InfiniteSeries, Series, SeriesSum
from .value import MathValue, Ordering, ValuePrecedence

__all__ = [
    "MathValue",
    "Ordering",
    "ValuePrecedence",
    "Rational",
    "gcd",
    "lcm",
    "reduce_fraction",
    "continued_fraction",
    "ExactValue",
    "InvalidVal",
    "IntVal",
    "BigIntVal",
    "RationalVal",
    "DoubleVal",
    "canonicalize",
    "exact_value",
    "Fuzz",
    "FuzzShape",
    "FuzzStyle",
    "confidence_multiplier",
    "Factor",
    "Number",
    "ExactNumber",
    "FuzzyNumber",
    "Series",
    "FiniteSeries",
    "InfiniteSeries",
    "SeriesSum",
    "Context",
    "get_current_context",
    "sqrt",
    "power",
    "exp",
    "ln",
    "sin",
    "cos",
    "tan",
    "atan",
]
