"""
Parser for numeric literals.

Turns text such as "3.1415927", "1.234(5)" or "2π" into
Number objects.
"""

from .literal import ParsedLiteral, parse_literal, parse_number

__all__ = ["ParsedLiteral", "parse_literal", "parse_number"]
