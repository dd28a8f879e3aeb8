"""
Expression tree node definitions.

Expressions are immutable trees of Numbers combined by operators and
functions. They are built with ordinary Python operators and evaluated
lazily by materialize(), which may first rewrite the tree so that
identities like sqrt(x)^2 = x hold exactly.

Nodes follow the Visitor pattern: rendering, rewriting and evaluation are
separate visitors in fuzzynum.expression.visitors.
"""

from __future__ import annotations

import fractions
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Protocol

from fuzzynum.math.exact import ExactValue
from fuzzynum.math.number import Number
from fuzzynum.math.rational import Rational

if TYPE_CHECKING:
    from fuzzynum.math.context import Context


UNARY_OPS = frozenset({"-", "abs", "sqrt", "exp", "ln", "sin", "cos", "tan", "atan"})
BINARY_OPS = frozenset({"+", "-", "*", "/", "^"})


class ExpressionVisitor(Protocol):
    """
    Visitor protocol for traversing expression nodes.

    Implementations provide string rendering, rewriting and evaluation.
    """

    def visit_leaf(self, node: "Leaf") -> Any:
        ...

    def visit_unary_op(self, node: "UnaryOp") -> Any:
        ...

    def visit_binary_op(self, node: "BinaryOp") -> Any:
        ...


class Expression(ABC):
    """
    Base class for all expression nodes.

    Operators build new nodes; nothing is evaluated until materialize().
    """

    @abstractmethod
    def accept(self, visitor: ExpressionVisitor) -> Any:
        """Accept a visitor for traversal."""
        pass

    def materialize(self, simplify: bool = True, context: Optional[Context] = None) -> Number:
        from .visitors import materialize
        return materialize(self, simplify=simplify, context=context)

    def __str__(self) -> str:
        from .visitors import StringVisitor
        return self.accept(StringVisitor())

    # Builders

    def __add__(self, other: Any) -> BinaryOp:
        return BinaryOp(self, "+", as_expression(other))

    def __radd__(self, other: Any) -> BinaryOp:
        return BinaryOp(as_expression(other), "+", self)

    def __sub__(self, other: Any) -> BinaryOp:
        return BinaryOp(self, "-", as_expression(other))

    def __rsub__(self, other: Any) -> BinaryOp:
        return BinaryOp(as_expression(other), "-", self)

    def __mul__(self, other: Any) -> BinaryOp:
        return BinaryOp(self, "*", as_expression(other))

    def __rmul__(self, other: Any) -> BinaryOp:
        return BinaryOp(as_expression(other), "*", self)

    def __truediv__(self, other: Any) -> BinaryOp:
        return BinaryOp(self, "/", as_expression(other))

    def __rtruediv__(self, other: Any) -> BinaryOp:
        return BinaryOp(as_expression(other), "/", self)

    def __pow__(self, other: Any) -> BinaryOp:
        return BinaryOp(self, "^", as_expression(other))

    def __rpow__(self, other: Any) -> BinaryOp:
        return BinaryOp(as_expression(other), "^", self)

    def __neg__(self) -> UnaryOp:
        return UnaryOp("-", self)

    def __abs__(self) -> UnaryOp:
        return UnaryOp("abs", self)


_NUMERIC = (Number, int, float, fractions.Fraction, Rational, ExactValue)


def as_expression(x: Any) -> Expression:
    """
    Wrap a number as a Leaf; expressions pass through.

    Raises:
        TypeError: for anything that is neither
    """
    if isinstance(x, Expression):
        return x
    if isinstance(x, _NUMERIC) and not isinstance(x, bool):
        return Leaf(x)
    raise TypeError(f"Cannot use {type(x).__name__} in an expression")


@dataclass(frozen=True)
class Leaf(Expression):
    """
    A Number in an expression.

    Examples: Leaf(7), Leaf(Number.pi), Leaf(parse_number("2.718(3)"))
    """

    number: Number

    def __post_init__(self):
        if not isinstance(self.number, Number):
            if not isinstance(self.number, _NUMERIC) or isinstance(self.number, bool):
                raise TypeError(f"Leaf requires a number, got {type(self.number).__name__}")
            object.__setattr__(self, "number", Number.of(self.number))

    def accept(self, visitor: ExpressionVisitor) -> Any:
        return visitor.visit_leaf(self)


@dataclass(frozen=True)
class UnaryOp(Expression):
    """
    A unary operator or function application.

    Operators: -, abs, sqrt, exp, ln, sin, cos, tan, atan
    """

    op: str
    operand: Expression

    def __post_init__(self):
        if self.op not in UNARY_OPS:
            raise ValueError(f"Unknown unary operator {self.op!r}")
        if not isinstance(self.operand, Expression):
            raise TypeError(f"Operand must be an Expression, got {type(self.operand).__name__}")

    def accept(self, visitor: ExpressionVisitor) -> Any:
        return visitor.visit_unary_op(self)


@dataclass(frozen=True)
class BinaryOp(Expression):
    """
    A binary operation.

    Operators: +, -, *, /, ^
    """

    left: Expression
    op: str
    right: Expression

    def __post_init__(self):
        if self.op not in BINARY_OPS:
            raise ValueError(f"Unknown binary operator {self.op!r}")
        for child in (self.left, self.right):
            if not isinstance(child, Expression):
                raise TypeError(f"Children must be Expressions, got {type(child).__name__}")

    def accept(self, visitor: ExpressionVisitor) -> Any:
        return visitor.visit_binary_op(self)


# Function builders

def sqrt(x: Any) -> UnaryOp:
    return UnaryOp("sqrt", as_expression(x))


def exp(x: Any) -> UnaryOp:
    return UnaryOp("exp", as_expression(x))


def ln(x: Any) -> UnaryOp:
    return UnaryOp("ln", as_expression(x))


def sin(x: Any) -> UnaryOp:
    return UnaryOp("sin", as_expression(x))


def cos(x: Any) -> UnaryOp:
    return UnaryOp("cos", as_expression(x))


def tan(x: Any) -> UnaryOp:
    return UnaryOp("tan", as_expression(x))


def atan(x: Any) -> UnaryOp:
    return UnaryOp("atan", as_expression(x))
