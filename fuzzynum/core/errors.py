"""
Library exceptions.

Exact-domain failures (division by zero, undefined results) are absorbed
into the Invalid value by the arithmetic layers; the exceptions below are
what reaches a caller.
"""

from typing import Any, Dict, Optional


class NumberError(Exception):
    """Base exception for fuzzynum errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidValueError(NumberError):
    """Raised when an ordering is requested on an undefined (Invalid) value"""

    def __init__(self, operation: str):
        super().__init__(
            message=f"Cannot {operation}: value is invalid",
            details={"operation": operation}
        )


class DivisionByZeroError(NumberError, ZeroDivisionError):
    """Raised when a Rational would get a zero denominator"""

    def __init__(self, numerator: int = 0):
        super().__init__(
            message=f"Division by zero (numerator {numerator})",
            details={"numerator": numerator}
        )


class IncompatibleFactorError(NumberError):
    """Raised when two factors cannot be reconciled for an operation"""

    def __init__(self, left: Any, right: Any, operation: str):
        super().__init__(
            message=f"Cannot {operation} values with factors {left} and {right}",
            details={"left": str(left), "right": str(right), "operation": operation}
        )


class UnboundedSeriesEvaluation(NumberError):
    """Raised when an infinite series is evaluated without epsilon or term bound"""

    def __init__(self, message: str = "Infinite series requires an epsilon or a maximum term count"):
        super().__init__(message=message)


class MalformedLiteralError(NumberError, ValueError):
    """Raised for literals or components that do not describe a number"""

    def __init__(self, literal: Any, reason: str = "not a number"):
        super().__init__(
            message=f"Malformed literal {literal!r}: {reason}",
            details={"literal": repr(literal), "reason": reason}
        )
