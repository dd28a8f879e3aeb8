"""fuzzynum - exact and fuzzy numbers.

Main namespace package containing all fuzzynum submodules:
- fuzzynum.core: Settings, logging and exceptions
- fuzzynum.math: Exact values, fuzz, factors, Numbers, series and functions
- fuzzynum.parser: Numeric literal parsing
- fuzzynum.expression: Lazy expressions and materialization
"""

from .math import (
    Context,
    ExactNumber,
    Factor,
    Fuzz,
    FuzzShape,
    FuzzStyle,
    FuzzyNumber,
    Number,
    Ordering,
    Rational,
)
from .parser import parse_literal, parse_number
from .expression import Leaf, materialize

__version__ = "0.1.0"

__all__ = [
    "Context",
    "ExactNumber",
    "Factor",
    "Fuzz",
    "FuzzShape",
    "FuzzStyle",
    "FuzzyNumber",
    "Number",
    "Ordering",
    "Rational",
    "parse_literal",
    "parse_number",
    "Leaf",
    "materialize",
]
