"""
Lazy expressions over Numbers.

Build trees with Python operators and the function builders, then call
materialize() to evaluate them, optionally after exact rewriting.
"""

from .ast import (
    BinaryOp,
    Expression,
    Leaf,
    UnaryOp,
    as_expression,
    atan,
    cos,
    exp,
    ln,
    sin,
    sqrt,
    tan,
)
from .visitors import MaterializeVisitor, SimplifyVisitor, StringVisitor, materialize

__all__ = [
    "Expression",
    "Leaf",
    "UnaryOp",
    "BinaryOp",
    "as_expression",
    "sqrt",
    "exp",
    "ln",
    "sin",
    "cos",
    "tan",
    "atan",
    "StringVisitor",
    "SimplifyVisitor",
    "MaterializeVisitor",
    "materialize",
]
