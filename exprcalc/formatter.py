"""
Precedence-aware printing of expression trees.

Output re-parses to the same tree: parentheses are only added where
precedence or associativity would otherwise regroup the operands.
"""

from typing import Any, Callable

from exprcalc.tokens import UNARY_MINUS, UNARY_PLUS, Branch, Fixity, Function, Operand, Operator, Variable
from exprcalc.tree import Node

LEFT = 0
RIGHT = 1


def format_expression(root: Node, operand_to_string: Callable[[Any], str]) -> str:
    """Canonical infix text for a tree"""
    return _format(root, operand_to_string)


def _format(node: Node, operand_to_string) -> str:
    token = node.token

    if isinstance(token, Operand):
        return operand_to_string(token.value)

    if isinstance(token, Variable):
        return token.label

    if isinstance(token, (Function, Branch)):
        arguments = ", ".join(_format(child, operand_to_string) for child in node.children)
        return f"{token.label}({arguments})"

    if token.fixity.is_infix:
        left, right = node.children
        left_text = _wrap(token, left, LEFT, operand_to_string)
        right_text = _wrap(token, right, RIGHT, operand_to_string)
        return f"{left_text} {token.display} {right_text}"

    child = node.children[0]
    text = _format(child, operand_to_string)

    # Unary signs sit directly against their operand: -5, ---5, -sin 5
    if token.label in (UNARY_PLUS, UNARY_MINUS):
        if isinstance(child.token, Operator) and child.token.fixity != Fixity.PREFIX:
            return f"{token.display}({text})"
        return f"{token.display}{text}"

    if isinstance(child.token, (Operator, Function, Branch)):
        if token.fixity == Fixity.PREFIX:
            return f"{token.display}({text})"
        return f"({text}) {token.display}"

    if token.fixity == Fixity.PREFIX:
        return f"{token.display} {text}"
    return f"{text} {token.display}"


def _wrap(parent: Operator, child: Node, side: int, operand_to_string) -> str:
    text = _format(child, operand_to_string)
    if _needs_parentheses(parent, child.token, side):
        return f"({text})"
    return text


def _needs_parentheses(parent: Operator, child, side: int) -> bool:
    if not isinstance(child, Operator):
        return False

    if child.precedence != parent.precedence:
        return child.precedence < parent.precedence

    if not child.fixity.is_infix:
        return False

    # Equal precedence: the right side is always grouped, "2 ^ (3 ^ 4)";
    # the left side only when the child groups to the right
    if side == RIGHT:
        return True
    return child.fixity == Fixity.INFIX_RIGHT
