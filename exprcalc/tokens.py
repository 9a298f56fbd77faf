"""
Token model shared by the tokenizer, parser, tree builder and evaluator.

Operands and variables are leaves; operators, functions and branches are the
executable tokens that own children in a tree. Separators only exist between
the tokenizer and the parser.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Union

from exprcalc.errors import ConfigError

if TYPE_CHECKING:
    from exprcalc.expression import Parameter

# Arity of functions and branches whose argument count comes from the call site
VARIABLE_ARITY = -1

# Labels of the operators synthesized by the tokenizer
UNARY_PLUS = "uplus"
UNARY_MINUS = "uminus"
IMPLICIT_MULTIPLICATION = "imult"

RESERVED_LABELS = frozenset({UNARY_PLUS, UNARY_MINUS, IMPLICIT_MULTIPLICATION})

# Precedence of the unary sign operators
MAX_PRECEDENCE = 2 ** 31 - 1


class Fixity(Enum):
    PREFIX = "PREFIX"
    POSTFIX = "POSTFIX"
    INFIX = "INFIX"
    INFIX_RIGHT = "INFIX_RIGHT"

    @property
    def arity(self) -> int:
        return 2 if self.is_infix else 1

    @property
    def is_infix(self) -> bool:
        return self in (Fixity.INFIX, Fixity.INFIX_RIGHT)


class Separator(Enum):
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"
    COMMA = ","

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Operand:
    value: Any

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Variable:
    label: str

    def __str__(self):
        return self.label


@dataclass(frozen=True)
class Operator:
    """Prefix, postfix or infix operator with a precedence"""
    label: str
    fixity: Fixity
    precedence: int
    fn: Callable = field(compare=False, repr=False)
    # Text printed for markers, whose label is a reserved name
    symbol: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.fixity, Fixity):
            raise ConfigError(f"Invalid fixity for operator {self.label}: {self.fixity!r}")
        if isinstance(self.precedence, bool) or not isinstance(self.precedence, int) or self.precedence < 1:
            raise ConfigError(f"Invalid precedence for operator {self.label}: {self.precedence!r}")

    @property
    def arity(self) -> int:
        return self.fixity.arity

    @property
    def display(self) -> str:
        return self.symbol if self.symbol is not None else self.label

    @property
    def is_left_associative(self) -> bool:
        return self.fixity in (Fixity.INFIX, Fixity.POSTFIX)

    def evaluate(self, parameters: List["Parameter"]) -> Any:
        return self.fn(parameters)

    def __str__(self):
        return self.display


@dataclass(frozen=True)
class Function:
    """Named call with a fixed or variable number of parameters"""
    label: str
    arity: int
    fn: Callable = field(compare=False, repr=False)

    def __post_init__(self):
        if isinstance(self.arity, bool) or not isinstance(self.arity, int) or self.arity < VARIABLE_ARITY:
            raise ConfigError(f"Invalid number of parameters for function {self.label}: {self.arity!r}")

    @property
    def is_variable(self) -> bool:
        return self.arity == VARIABLE_ARITY

    def evaluate(self, parameters: List["Parameter"]) -> Any:
        return self.fn(parameters)

    def __str__(self):
        return self.label


@dataclass(frozen=True)
class Branch:
    """
    Conditional call: child 0 is evaluated and handed to `choice`, which
    returns the index of the single other child to evaluate.
    """
    label: str
    arity: int
    choice: Callable = field(compare=False, repr=False)

    def __post_init__(self):
        if isinstance(self.arity, bool) or not isinstance(self.arity, int) or \
                (self.arity != VARIABLE_ARITY and self.arity < 3):
            raise ConfigError(f"Invalid number of parameters for branch {self.label}: {self.arity!r}")

    @property
    def is_variable(self) -> bool:
        return self.arity == VARIABLE_ARITY

    def choose(self, value: Any) -> int:
        return self.choice(value)

    def __str__(self):
        return self.label


Executable = Union[Operator, Function, Branch]
Token = Union[Operand, Variable, Operator, Function, Branch, Separator]


def is_operand_like(token) -> bool:
    """True when an operand is complete before this token"""
    if isinstance(token, (Operand, Variable)):
        return True
    if isinstance(token, Operator):
        return token.fixity == Fixity.POSTFIX
    return token == Separator.CLOSE_PAREN
