"""
Lexical analysis: turns an expression string into a list of tokens.

At each position the scanner tries, in order: separators, a unary sign where
an operand is expected, dictionary labels (longest first), operand patterns,
the variable pattern and whitespace. Implicit multiplication markers are
inserted between juxtaposed operands ("5x", "2(3)", "(a)(b)").
"""

import logging
import re
from typing import List, Optional

from exprcalc.config import ExpressionConfig
from exprcalc.dictionary import Dictionary
from exprcalc.errors import BlankExpressionError, InvalidCharacterError, LexError, UndefinedSymbolError
from exprcalc.tokens import (
    IMPLICIT_MULTIPLICATION,
    UNARY_MINUS,
    UNARY_PLUS,
    Fixity,
    Operand,
    Operator,
    Separator,
    Token,
    Variable,
    is_operand_like,
)

logger = logging.getLogger(__name__)

SEPARATOR_PATTERN = re.compile(r"[(),]")
UNARY_PATTERN = re.compile(r"[+-]")
WHITESPACE_PATTERN = re.compile(r"\s+")


class Tokenizer:
    """Splits expressions using a dictionary's labels and a builder's patterns"""

    def __init__(self, dictionary: Dictionary, config: ExpressionConfig):
        self.dictionary = dictionary
        self.config = config
        self.operand_patterns = [re.compile(p) for p in config.operand_patterns]
        self.variable_pattern = re.compile(config.variable_pattern)

        labels = dictionary.labels()
        if labels:
            self.label_pattern: Optional[re.Pattern] = re.compile("|".join(re.escape(l) for l in labels))
        else:
            self.label_pattern = None

    def tokenize(self, expression: str) -> List[Token]:
        """Convert expression string into tokens"""
        if expression is None or not expression.strip():
            raise BlankExpressionError("Invalid expression: expression is blank")

        tokens: List[Token] = []
        index = 0
        probable_unary = True

        while index < len(expression):
            last = tokens[-1] if tokens else None

            # Separators
            match = SEPARATOR_PATTERN.match(expression, index)
            if match:
                separator = Separator(match.group())
                if separator == Separator.OPEN_PAREN:
                    self._implicit_multiplication(tokens, last)
                tokens.append(separator)
                probable_unary = separator != Separator.CLOSE_PAREN
                index = match.end()
                continue

            # Unary plus and minus
            match = UNARY_PATTERN.match(expression, index)
            if probable_unary and match:
                label = UNARY_PLUS if match.group() == "+" else UNARY_MINUS
                tokens.append(self.dictionary.marker(label))
                index = match.end()
                continue

            # Operators, functions and branches
            match = self.label_pattern.match(expression, index) if self.label_pattern else None
            if match:
                label = match.group()
                executable = self.dictionary.get_function(label) or self.dictionary.get_branch(label)
                if executable is None:
                    executable = self._resolve_operator(label, last)
                    probable_unary = executable.fixity != Fixity.POSTFIX
                else:
                    probable_unary = False

                if not isinstance(executable, Operator) or executable.fixity == Fixity.PREFIX:
                    self._implicit_multiplication(tokens, last)
                tokens.append(executable)
                index = match.end()
                continue

            # Operands, first matching pattern wins
            match = next(filter(None, (p.match(expression, index) for p in self.operand_patterns)), None)
            if match:
                self._implicit_multiplication(tokens, last)
                tokens.append(Operand(self._to_operand(match.group())))
                probable_unary = False
                index = match.end()
                continue

            # Variables
            match = self.variable_pattern.match(expression, index)
            if match:
                self._implicit_multiplication(tokens, last)
                tokens.append(Variable(match.group()))
                probable_unary = False
                index = match.end()
                continue

            match = WHITESPACE_PATTERN.match(expression, index)
            if match:
                index = match.end()
                continue

            raise InvalidCharacterError(expression, index)

        logger.debug(f"Tokenized {expression!r} into {len(tokens)} tokens")
        return tokens

    def _resolve_operator(self, label: str, last: Optional[Token]) -> Operator:
        """Pick the operator fixity that fits after the previous token"""
        if last is not None and is_operand_like(last):
            operator = self.dictionary.get_infix_operator(label) or self.dictionary.get_postfix_operator(label)
        else:
            operator = self.dictionary.get_prefix_operator(label)

        # a label that is only prefix can still follow an operand: "5 sin 5" is 5 * sin 5
        if operator is None and last is not None and is_operand_like(last):
            operator = self.dictionary.get_prefix_operator(label)

        if operator is None:
            raise UndefinedSymbolError(label)
        return operator

    def _implicit_multiplication(self, tokens: List[Token], last: Optional[Token]):
        if last is not None and is_operand_like(last):
            tokens.append(self.dictionary.marker(IMPLICIT_MULTIPLICATION))

    def _to_operand(self, text: str):
        try:
            return self.config.string_to_operand(text)
        except (ValueError, ArithmeticError) as e:
            raise LexError(f"Invalid operand: {text}") from e
