"""
Floating point builder: the scientific calculator vocabulary over Python floats
"""

import math
import random
from typing import List, Optional

from exprcalc.builder import Builder
from exprcalc.config import DEFAULT_MAX_DEPTH, ExpressionConfig
from exprcalc.errors import BranchIndexError, OperandError
from exprcalc.impl.support import aggregate, binary, constant, identity, unary
from exprcalc.tokens import MAX_PRECEDENCE, VARIABLE_ARITY, Fixity

# Operator precedences, loosest first
COMPARISON = 1
ADDITIVE = 2
MULTIPLICATIVE = 3
POWER = 4
PREFIX_FUNCTION = 5
FACTORIAL = 6

# Largest magnitude printed without an exponent or fraction
_INTEGRAL_LIMIT = 1e16


def format_float(value: float) -> str:
    """Integral values print without a fractional part: 100.0 -> "100" """
    if isinstance(value, float) and value.is_integer() and abs(value) < _INTEGRAL_LIMIT:
        return str(int(value))
    return repr(value)


def factorial(x: float) -> float:
    if x < 0 or not float(x).is_integer():
        raise OperandError(f"Cannot calculate factorial of {format_float(x)}")
    return float(math.factorial(int(x)))


def round_half_up(x: float) -> float:
    return float(math.floor(x + 0.5))


def log(base: float, x: float) -> float:
    return math.log(x) / math.log(base)


def average(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def truth(value: bool) -> float:
    return 1.0 if value else 0.0


def if_choice(condition: float) -> int:
    return 1 if condition else 2


def switch_choice(selector: float) -> int:
    if not math.isfinite(selector) or not float(selector).is_integer():
        raise BranchIndexError(f"Switch selector must be an integer: {selector}")
    return int(selector)


def divide(x: float, y: float) -> float:
    if y == 0:
        raise OperandError("Division by zero")
    return x / y


def modulo(x: float, y: float) -> float:
    if y == 0:
        raise OperandError("Modulo by zero")
    return x % y


class FloatBuilder(Builder):
    """Builder preloaded with arithmetic, comparison and scientific functions"""

    PREFIX_FUNCTIONS = {
        'abs': abs,

        # Trigonometric
        'sin': math.sin,
        'cos': math.cos,
        'tan': math.tan,
        'asin': math.asin,
        'acos': math.acos,
        'atan': math.atan,

        # Hyperbolic
        'sinh': math.sinh,
        'cosh': math.cosh,
        'tanh': math.tanh,
        'asinh': math.asinh,
        'acosh': math.acosh,
        'atanh': math.atanh,

        # Rounding
        'round': round_half_up,
        'floor': lambda x: float(math.floor(x)),
        'ceil': lambda x: float(math.ceil(x)),

        # Logarithmic
        'ln': math.log,
        'log10': math.log10,

        # Power & Root
        'sqrt': math.sqrt,
        'cbrt': math.cbrt,
    }

    COMPARISONS = {
        '<': lambda x, y: truth(x < y),
        '>': lambda x, y: truth(x > y),
        '<=': lambda x, y: truth(x <= y),
        '>=': lambda x, y: truth(x >= y),
        '==': lambda x, y: truth(x == y),
        '!=': lambda x, y: truth(x != y),
    }

    def __init__(self, cache_size: int = 0, max_depth: Optional[int] = DEFAULT_MAX_DEPTH):
        config = ExpressionConfig(
            string_to_operand=float,
            operand_to_string=format_float,
            max_depth=max_depth,
        )
        super().__init__(config, cache_size=cache_size)
        self.initialize()

    def initialize(self):
        """Register operators, functions, branches and constants"""
        d = self.dictionary

        d.add_operator('+', Fixity.PREFIX, MAX_PRECEDENCE, identity)
        d.add_operator('-', Fixity.PREFIX, MAX_PRECEDENCE, unary('-', lambda x: -x))

        for label, fn in self.COMPARISONS.items():
            d.add_operator(label, Fixity.INFIX, COMPARISON, binary(label, fn))

        d.add_operator('+', Fixity.INFIX, ADDITIVE, binary('+', lambda x, y: x + y))
        d.add_operator('-', Fixity.INFIX, ADDITIVE, binary('-', lambda x, y: x - y))

        d.add_operator('*', Fixity.INFIX, MULTIPLICATIVE, binary('*', lambda x, y: x * y))
        d.add_operator('/', Fixity.INFIX, MULTIPLICATIVE, binary('/', divide))
        d.add_operator('%', Fixity.INFIX, MULTIPLICATIVE, binary('%', modulo))

        d.add_operator('^', Fixity.INFIX_RIGHT, POWER, binary('^', math.pow))

        d.add_operator('!', Fixity.POSTFIX, FACTORIAL, unary('!', factorial))

        for label, fn in self.PREFIX_FUNCTIONS.items():
            d.add_operator(label, Fixity.PREFIX, PREFIX_FUNCTION, unary(label, fn))

        d.add_function('deg', 1, unary('deg', math.degrees))
        d.add_function('rad', 1, unary('rad', math.radians))
        d.add_function('exp', 1, unary('exp', math.exp))
        d.add_function('log', 2, binary('log', log))

        d.add_function('max', VARIABLE_ARITY, aggregate('max', lambda values: max(values, default=0.0)))
        d.add_function('min', VARIABLE_ARITY, aggregate('min', lambda values: min(values, default=0.0)))
        d.add_function('mean', VARIABLE_ARITY, aggregate('mean', average))
        d.add_function('average', VARIABLE_ARITY, aggregate('average', average))

        d.add_function('rand', 0, constant(random.random))

        d.add_branch('if', 3, if_choice)
        d.add_branch('switch', VARIABLE_ARITY, switch_choice)

        d.add_constant('pi', math.pi)
        d.add_constant('e', math.e)
