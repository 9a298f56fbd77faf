"""
Shunting-Yard conversion of an infix token list into postfix order.

Besides ordering operators by precedence and associativity, the parser counts
the arguments of every open function or branch call, resolves variable
arities, and rejects tokens that may not be adjacent.
"""

import logging
from dataclasses import replace
from typing import List, Optional

from exprcalc.errors import (
    ArityError,
    CommaError,
    InvalidExpressionError,
    NestingDepthError,
    UnmatchedParenthesisError,
)
from exprcalc.tokens import Branch, Fixity, Function, Operand, Operator, Separator, Token, Variable, is_operand_like

logger = logging.getLogger(__name__)


def _callable(token) -> bool:
    return isinstance(token, (Function, Branch))


def _non_postfix_operator(token) -> bool:
    return isinstance(token, Operator) and token.fixity != Fixity.POSTFIX


def _evaluates_first(stacked: Operator, incoming: Operator) -> bool:
    """True when the stacked operator must be applied before the incoming one"""
    if stacked.precedence != incoming.precedence:
        return stacked.precedence > incoming.precedence
    return stacked.is_left_associative


class Parser:
    """Converts one token list to postfix; holds no state between calls"""

    def __init__(self, max_depth: Optional[int] = None):
        self.max_depth = max_depth

    def parse(self, tokens: List[Token]) -> List[Token]:
        output: List[Token] = []
        stack: List[Token] = []
        counts: List[int] = []

        depth = 0
        probable_zero_arguments = False
        last: Optional[Token] = None

        i = 0
        while i < len(tokens):
            token = tokens[i]

            if isinstance(token, Separator):
                if token == Separator.OPEN_PAREN:
                    depth = self._enter(depth)
                    stack.append(token)

                elif token == Separator.CLOSE_PAREN:
                    if probable_zero_arguments:
                        counts[-1] = 0
                    else:
                        self._require_operand_before(last, token)
                    depth -= 1
                    self._close_parenthesis(output, stack, counts)

                else:
                    if last is None or _callable(last):
                        raise InvalidExpressionError("Invalid expression: misplaced comma")
                    self._require_operand_before(last, token)

                    while stack and not _callable(stack[-1]):
                        if stack[-1] == Separator.OPEN_PAREN:
                            raise CommaError("Invalid expression: comma outside of a function call")
                        output.append(stack.pop())
                    if not stack:
                        raise CommaError("Invalid expression: comma outside of a function call")
                    counts[-1] += 1

                probable_zero_arguments = False

            elif _callable(token):
                following = tokens[i + 1] if i + 1 < len(tokens) else None
                if following != Separator.OPEN_PAREN:
                    raise InvalidExpressionError(f"Missing open parenthesis for function: {token.label}")
                i += 1

                depth = self._enter(depth)
                stack.append(token)
                counts.append(1)
                probable_zero_arguments = True

            elif isinstance(token, Operator):
                if token.fixity == Fixity.PREFIX:
                    if last is not None and is_operand_like(last):
                        raise InvalidExpressionError(f"Invalid expression: unexpected prefix operator {token.display}")
                else:
                    if last is None or _callable(last):
                        raise InvalidExpressionError(f"Invalid expression: missing operand before {token.display}")
                    self._require_operand_before(last, token)

                self._push_operator(token, output, stack)
                probable_zero_arguments = False

            elif isinstance(token, (Operand, Variable)):
                output.append(token)
                probable_zero_arguments = False

            else:
                raise InvalidExpressionError(f"Invalid expression: unexpected token {token!r}")

            last = token
            i += 1

        if last is None or _non_postfix_operator(last):
            raise InvalidExpressionError("Invalid expression: missing operand at end of expression")

        while stack:
            token = stack.pop()
            if isinstance(token, Separator) or _callable(token):
                raise UnmatchedParenthesisError("Unmatched number of parenthesis")
            output.append(token)

        logger.debug(f"Postfix: {' '.join(str(t) for t in output)}")
        return output

    def _enter(self, depth: int) -> int:
        depth += 1
        if self.max_depth is not None and depth > self.max_depth:
            raise NestingDepthError(f"Expression nests deeper than {self.max_depth} levels")
        return depth

    @staticmethod
    def _require_operand_before(last: Optional[Token], token: Token):
        """Infix/postfix operators, commas and close parens need a finished operand before them"""
        if _non_postfix_operator(last) or last in (Separator.OPEN_PAREN, Separator.COMMA):
            raise InvalidExpressionError(f"Invalid expression: missing operand before {token}")

    @staticmethod
    def _push_operator(operator: Operator, output: List[Token], stack: List[Token]):
        if operator.fixity != Fixity.PREFIX:
            while stack and isinstance(stack[-1], Operator) and _evaluates_first(stack[-1], operator):
                output.append(stack.pop())

        if operator.fixity == Fixity.POSTFIX:
            output.append(operator)
        else:
            stack.append(operator)

    @staticmethod
    def _close_parenthesis(output: List[Token], stack: List[Token], counts: List[int]):
        while stack:
            token = stack.pop()

            # Function or branch call
            if _callable(token):
                actual = counts.pop()
                output.append(Parser._resolve_arity(token, actual))
                return

            # Grouping parenthesis
            if token == Separator.OPEN_PAREN:
                if stack and isinstance(stack[-1], Operator) and stack[-1].fixity == Fixity.PREFIX:
                    output.append(stack.pop())
                return

            output.append(token)

        raise UnmatchedParenthesisError("Unmatched number of parenthesis")

    @staticmethod
    def _resolve_arity(token, actual: int):
        if token.is_variable:
            if isinstance(token, Branch) and actual < 3:
                raise ArityError(token.label, 3, actual)
            return replace(token, arity=actual)

        if token.arity != actual:
            raise ArityError(token.label, token.arity, actual)
        return token
