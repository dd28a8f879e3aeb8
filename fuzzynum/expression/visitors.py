"""
Expression visitor implementations.

Visitors implement the Visitor pattern to traverse and operate on expressions:
- StringVisitor: Convert an expression to its string representation
- SimplifyVisitor: Rewrite an expression so that exact identities hold exactly
- MaterializeVisitor: Evaluate an expression to a Number
"""

from typing import Any, Optional

from fuzzynum.core.errors import InvalidValueError
from fuzzynum.core.logging import get_logger
from fuzzynum.math import functions
from fuzzynum.math.context import Context, resolve_context
from fuzzynum.math.number import ExactNumber, Number
from .ast import BinaryOp, Expression, Leaf, UnaryOp

logger = get_logger(__name__)

PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2, "^": 3}

FUNCTIONS = {
    "sqrt": functions.sqrt,
    "exp": functions.exp,
    "ln": functions.ln,
    "sin": functions.sin,
    "cos": functions.cos,
    "tan": functions.tan,
    "atan": functions.atan,
}


class StringVisitor:
    """
    Convert an expression to a string.

    Examples:
    - BinaryOp(Leaf(2), '+', Leaf(3)) → "2 + 3"
    - UnaryOp('sqrt', Leaf(7)) → "sqrt(7)"
    """

    def visit_leaf(self, node: Leaf) -> str:
        return node.number.to_string()

    def visit_unary_op(self, node: UnaryOp) -> str:
        operand_str = node.operand.accept(self)
        if node.op == "-":
            if isinstance(node.operand, BinaryOp):
                operand_str = f"({operand_str})"
            return f"-{operand_str}"
        return f"{node.op}({operand_str})"

    def visit_binary_op(self, node: BinaryOp) -> str:
        left_str = node.left.accept(self)
        right_str = node.right.accept(self)

        # Add parentheses if needed based on precedence
        left_prec = self._get_precedence(node.left)
        right_prec = self._get_precedence(node.right)
        op_prec = PRECEDENCE[node.op]

        if left_prec > 0 and (left_prec < op_prec or (node.op == "^" and left_prec == op_prec)):
            left_str = f"({left_str})"

        # "^" is right-associative, the others left-associative
        if right_prec > 0 and (right_prec < op_prec or (right_prec == op_prec and node.op != "^")):
            right_str = f"({right_str})"

        return f"{left_str} {node.op} {right_str}"

    def _get_precedence(self, node: Any) -> int:
        """Get precedence of a node for parenthesization."""
        if isinstance(node, BinaryOp):
            return PRECEDENCE[node.op]
        return 0


class MaterializeVisitor:
    """
    Evaluate an expression to a Number.

    Pure: evaluating the same tree twice gives equal results.
    """

    def __init__(self, context: Optional[Context] = None):
        self.context = resolve_context(context)

    def visit_leaf(self, node: Leaf) -> Number:
        return node.number

    def visit_unary_op(self, node: UnaryOp) -> Number:
        operand = node.operand.accept(self)
        if node.op == "-":
            return -operand
        if node.op == "abs":
            return abs(operand)
        return FUNCTIONS[node.op](operand, self.context)

    def visit_binary_op(self, node: BinaryOp) -> Number:
        left = node.left.accept(self)
        right = node.right.accept(self)
        if node.op == "+":
            return left + right
        if node.op == "-":
            return left - right
        if node.op == "*":
            return left * right
        if node.op == "/":
            return left / right
        return functions.power(left, right, self.context)


def _exact_leaf(node: Expression) -> Optional[Number]:
    """The number of a Leaf holding an exact, fuzz-free value."""
    if isinstance(node, Leaf) and node.number.fuzz is None and node.number.value.is_exact:
        return node.number
    return None


def _is_constant(node: Expression, n: int) -> bool:
    number = _exact_leaf(node)
    return number is not None and number.factor.is_scalar and number.value.to_rational() == n


class SimplifyVisitor:
    """
    Rewrite an expression bottom-up.

    Rules:
    - sqrt(x) ^ 2 → x and sqrt(x) * sqrt(x) → x, for x known non-negative
    - --x → x
    - ln(exp(x)) → x
    - x + 0, 0 + x, x - 0, x * 1, 1 * x, x / 1, x ^ 1 → x
    - operations on exact leaves are folded when the result is exact
    """

    def __init__(self, context: Optional[Context] = None):
        self.context = resolve_context(context)
        self._evaluator = MaterializeVisitor(self.context)

    def visit_leaf(self, node: Leaf) -> Expression:
        return node

    def visit_unary_op(self, node: UnaryOp) -> Expression:
        operand = node.operand.accept(self)

        if node.op == "-" and isinstance(operand, UnaryOp) and operand.op == "-":
            return self._rewrote("--x", operand.operand)
        if node.op == "ln" and isinstance(operand, UnaryOp) and operand.op == "exp":
            return self._rewrote("ln(exp(x))", operand.operand)

        return self._fold(UnaryOp(node.op, operand), operand)

    def visit_binary_op(self, node: BinaryOp) -> Expression:
        left = node.left.accept(self)
        right = node.right.accept(self)
        op = node.op

        if op == "^" and self._is_sqrt(left) and _is_constant(right, 2):
            return self._rewrote("sqrt(x)^2", left.operand)
        if op == "*" and self._is_sqrt(left) and left == right:
            return self._rewrote("sqrt(x)*sqrt(x)", left.operand)

        if op in ("+", "-") and _is_constant(right, 0):
            return self._rewrote("x ± 0", left)
        if op == "+" and _is_constant(left, 0):
            return self._rewrote("0 + x", right)
        if op in ("*", "/", "^") and _is_constant(right, 1):
            return self._rewrote(f"x {op} 1", left)
        if op == "*" and _is_constant(left, 1):
            return self._rewrote("1 * x", right)

        return self._fold(BinaryOp(left, op, right), left, right)

    def _is_sqrt(self, node: Expression) -> bool:
        return isinstance(node, UnaryOp) and node.op == "sqrt" and self._is_non_negative(node.operand)

    def _is_non_negative(self, node: Expression) -> bool:
        if isinstance(node, UnaryOp):
            return node.op in ("sqrt", "exp", "abs")
        if isinstance(node, Leaf):
            try:
                return node.number.signum() >= 0
            except InvalidValueError:
                return False
        return False

    def _fold(self, node: Expression, *children: Expression) -> Expression:
        """Replace an operation on exact leaves by its value when that is exact."""
        if not all(_exact_leaf(child) is not None for child in children):
            return node
        result = node.accept(self._evaluator)
        if isinstance(result, ExactNumber):
            logger.debug(f"Folded {node} to {result}")
            return Leaf(result)
        return node

    def _rewrote(self, rule: str, result: Expression) -> Expression:
        logger.debug(f"Applied {rule}, giving {result}")
        return result


def materialize(
    node: Any, simplify: bool = True, context: Optional[Context] = None
) -> Number:
    """
    Evaluate an expression to a Number.

    Args:
        node: Expression (a Number is returned unchanged)
        simplify: Run the rewrite pass first
        context: Numeric context (None = default)

    Raises:
        TypeError: if node is neither an Expression nor a Number
    """
    if isinstance(node, Number):
        return node.materialize()
    if not isinstance(node, Expression):
        raise TypeError(f"Cannot materialize {type(node).__name__}")
    if simplify:
        node = node.accept(SimplifyVisitor(context))
    return node.accept(MaterializeVisitor(context))
