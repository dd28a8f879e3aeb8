"""
Numeric literal parser.

Decomposes a literal into (value, fuzz, factor):

    [sign] digits [. digits] [marker] [E[+-]n] [factor]
    [sign] digits / digits [factor]
    [sign] factor

Fuzz markers:
- ``...`` or ``*``: box half-width of 5 in the last decimal place
- ``(d)`` / ``(dd)``: Gaussian standard deviation in the last digits
- ``[d]`` / ``[dd]``: box half-width in the last digits

Without a marker, decimals with at most two places (or ending in ``00``)
are exact, and longer ones get the implicit box fuzz.

Factor tokens: pi, Pi, PI, π, 𝛑 for pi and 𝑒, ℯ for e.
"""

import re
from dataclasses import dataclass
from typing import Any, Optional

from fuzzynum.core.errors import DivisionByZeroError, MalformedLiteralError
from fuzzynum.math.exact import ExactValue
from fuzzynum.math.factor import Factor
from fuzzynum.math.fuzz import Fuzz, FuzzShape
from fuzzynum.math.number import Number
from fuzzynum.math.rational import Rational

LITERAL_PATTERN = re.compile(
    r"""
    ^\s*
    (?P<sign>[+-])?
    (?:
        (?P<num>\d+)\s*/\s*(?P<den>\d+)
      |
        (?P<int>\d+)(?:\.(?P<frac>\d*))?
        (?P<marker>\.\.\.|\*|\((?P<gauss>\d{1,2})\)|\[(?P<box>\d{1,2})\])?
        (?:[eE](?P<exp>[+-]?\d+))?
    )?
    \s*(?P<factor>pi|Pi|PI|π|𝛑|𝑒|ℯ)?
    \s*$
    """,
    re.VERBOSE,
)

FACTOR_TOKENS = {
    "pi": Factor.PI,
    "Pi": Factor.PI,
    "PI": Factor.PI,
    "π": Factor.PI,
    "𝛑": Factor.PI,
    "𝑒": Factor.E,
    "ℯ": Factor.E,
}

# Decimals with at most this many places are exact
EXACT_PLACES = 2

# Implicit and "..." / "*" fuzz, in units of the last decimal place
IMPLICIT_FUZZ = 5


@dataclass(frozen=True)
class ParsedLiteral:
    """Components of a numeric literal."""

    value: ExactValue
    fuzz: Optional[Fuzz]
    factor: Factor

    def to_number(self) -> Number:
        return Number.create(self.value, self.factor, self.fuzz)


def _is_exact_decimal(frac: str) -> bool:
    return len(frac) <= EXACT_PLACES or frac.endswith("00")


def parse_literal(text: Any) -> ParsedLiteral:
    """
    Parse a numeric literal.

    Args:
        text: Literal such as "1.25", "3.1415927", "2.718(3)", "1/3", "2π"

    Returns:
        ParsedLiteral with a canonical exact value

    Raises:
        MalformedLiteralError: if text is not a numeric literal
    """
    if not isinstance(text, str):
        raise MalformedLiteralError(text, "expected a string")
    match = LITERAL_PATTERN.match(text)
    if not match:
        raise MalformedLiteralError(text)

    sign = -1 if match.group("sign") == "-" else 1
    factor = FACTOR_TOKENS.get(match.group("factor"), Factor.SCALAR)

    if match.group("num") is None and match.group("int") is None:
        # A bare factor token such as "pi" or "-π"
        if factor.is_scalar:
            raise MalformedLiteralError(text)
        return ParsedLiteral(Rational(sign).to_exact_value(), None, factor)

    if match.group("num") is not None:
        try:
            value = Rational(sign * int(match.group("num")), int(match.group("den")))
        except DivisionByZeroError:
            raise MalformedLiteralError(text, "zero denominator") from None
        return ParsedLiteral(value.to_exact_value(), None, factor)

    frac = match.group("frac") or ""
    places = len(frac)
    exponent = int(match.group("exp") or 0)
    scale = Rational(10) ** exponent

    value = Rational(sign * int(match.group("int") + frac), 10 ** places) * scale
    unit = Rational(1, 10 ** places) * scale

    marker = match.group("marker")
    if match.group("gauss") is not None:
        fuzz = Fuzz.gaussian((unit * int(match.group("gauss"))).to_float())
    elif match.group("box") is not None:
        fuzz = Fuzz.box((unit * int(match.group("box"))).to_float())
    elif marker is not None or not _is_exact_decimal(frac):
        fuzz = Fuzz.create((unit * IMPLICIT_FUZZ).to_float(), FuzzShape.BOX)
    else:
        fuzz = None

    return ParsedLiteral(value.to_exact_value(), fuzz, factor)


def parse_number(text: Any) -> Number:
    """Parse a numeric literal into an ExactNumber or FuzzyNumber."""
    return parse_literal(text).to_number()
