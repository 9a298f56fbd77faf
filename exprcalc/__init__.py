"""
Generic infix expression engine: tokenizer, Shunting-Yard parser, tree
builder, lazy evaluator and formatter over a caller-defined vocabulary.
"""

from exprcalc.builder import Builder
from exprcalc.cache import ExpressionCache
from exprcalc.config import ExpressionConfig
from exprcalc.dictionary import Dictionary
from exprcalc.errors import (
    ArityError,
    BlankExpressionError,
    BranchIndexError,
    CommaError,
    ConfigError,
    EvalError,
    ExpressionError,
    InvalidCharacterError,
    InvalidExpressionError,
    LexError,
    NestingDepthError,
    OperandError,
    ParseError,
    ReservedLabelError,
    TreeError,
    UndefinedSymbolError,
    UnknownConstantError,
    UnknownVariableError,
    UnmatchedParenthesisError,
)
from exprcalc.expression import Expression, Parameter
from exprcalc.formatter import format_expression
from exprcalc.tokens import (
    IMPLICIT_MULTIPLICATION,
    MAX_PRECEDENCE,
    UNARY_MINUS,
    UNARY_PLUS,
    VARIABLE_ARITY,
    Branch,
    Fixity,
    Function,
    Operand,
    Operator,
    Separator,
    Variable,
)
from exprcalc.tree import Node

__version__ = "1.0.0"

__all__ = [
    "Builder",
    "Dictionary",
    "Expression",
    "ExpressionCache",
    "ExpressionConfig",
    "Node",
    "Parameter",
    "format_expression",
    # tokens
    "Branch",
    "Fixity",
    "Function",
    "Operand",
    "Operator",
    "Separator",
    "Variable",
    "IMPLICIT_MULTIPLICATION",
    "MAX_PRECEDENCE",
    "UNARY_MINUS",
    "UNARY_PLUS",
    "VARIABLE_ARITY",
    # errors
    "ArityError",
    "BlankExpressionError",
    "BranchIndexError",
    "CommaError",
    "ConfigError",
    "EvalError",
    "ExpressionError",
    "InvalidCharacterError",
    "InvalidExpressionError",
    "LexError",
    "NestingDepthError",
    "OperandError",
    "ParseError",
    "ReservedLabelError",
    "TreeError",
    "UndefinedSymbolError",
    "UnknownConstantError",
    "UnknownVariableError",
    "UnmatchedParenthesisError",
]
