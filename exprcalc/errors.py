"""
Exception hierarchy for expression building and evaluation.

Every error is a ValueError so callers can keep catching ValueError the way
the calculator always has; the subclasses tell the stage that failed.
"""


class ExpressionError(ValueError):
    """Base class for all expression errors"""


# ==========================================
# LEXICAL ERRORS
# ==========================================

class LexError(ExpressionError):
    """Raised while splitting the input into tokens"""


class BlankExpressionError(LexError):
    """Raised for empty or whitespace-only input"""


class InvalidCharacterError(LexError):
    """Raised when no token pattern matches at some position"""

    def __init__(self, expression: str, position: int):
        self.expression = expression
        self.position = position
        super().__init__(f"Unexpected character at position {position}: {expression[position]}")


class UndefinedSymbolError(LexError):
    """Raised when a label has no operator of a usable fixity"""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Undefined symbol: {symbol}")


# ==========================================
# PARSE ERRORS
# ==========================================

class ParseError(ExpressionError):
    """Raised when the token sequence is structurally invalid"""


class UnmatchedParenthesisError(ParseError):
    """Raised when parentheses do not pair up"""


class InvalidExpressionError(ParseError):
    """Raised when two tokens may not be adjacent"""


class ArityError(ParseError):
    """Raised when a call has the wrong number of arguments"""

    def __init__(self, label: str, expected: int, actual: int):
        self.label = label
        self.expected = expected
        self.actual = actual
        super().__init__(f"Incorrect number of parameters for {label}: expected {expected}, got {actual}")


class CommaError(ParseError):
    """Raised for a comma outside of a function or branch call"""


class NestingDepthError(ParseError):
    """Raised when an expression nests deeper than the configured limit"""


# ==========================================
# TREE ERRORS
# ==========================================

class TreeError(ExpressionError):
    """Raised when the postfix sequence does not reduce to one tree"""


# ==========================================
# EVALUATION ERRORS
# ==========================================

class EvalError(ExpressionError):
    """Raised while evaluating a built expression"""


class UnknownVariableError(EvalError):
    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Variable not found: {label}")


class UnknownConstantError(EvalError):
    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Constant not found: {label}")


class BranchIndexError(EvalError):
    """Raised when a branch chooses a child that does not exist"""


class OperandError(EvalError):
    """Raised by operand arithmetic for values outside its domain"""


# ==========================================
# CONFIGURATION ERRORS
# ==========================================

class ConfigError(ExpressionError):
    """Raised for invalid dictionary or builder configuration"""


class ReservedLabelError(ConfigError):
    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Cannot use reserved label: {label}")
