"""
Decimal builder: arbitrary precision arithmetic with decimal.Decimal.

Every operation runs inside the builder's decimal.Context, so results are
rounded to its precision with its rounding mode. Trigonometric functions
use the series recipes from the decimal module documentation.
"""

import decimal
import math
import random
from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal, localcontext
from typing import Callable, List, Optional

from exprcalc.builder import Builder
from exprcalc.config import DEFAULT_MAX_DEPTH, ExpressionConfig
from exprcalc.errors import BranchIndexError, OperandError
from exprcalc.impl.floating import ADDITIVE, COMPARISON, FACTORIAL, MULTIPLICATIVE, POWER, PREFIX_FUNCTION
from exprcalc.impl.support import aggregate, binary, constant, identity, unary
from exprcalc.tokens import MAX_PRECEDENCE, VARIABLE_ARITY, Fixity

DEFAULT_PRECISION = 20
DEFAULT_ROUNDING = ROUND_HALF_UP

ZERO = Decimal(0)
ONE = Decimal(1)


def format_decimal(value: Decimal) -> str:
    """Plain notation without trailing zeros: 1E+2 -> "100", 2.50 -> "2.5" """
    text = format(value, 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


# ==========================================
# SERIES (run inside an active context)
# ==========================================

def compute_pi() -> Decimal:
    decimal.getcontext().prec += 2
    three = Decimal(3)
    lasts, t, s, n, na, d, da = 0, three, 3, 1, 0, 0, 24
    while s != lasts:
        lasts = s
        n, na = n + na, na + 8
        d, da = d + da, da + 32
        t = (t * n) / d
        s += t
    decimal.getcontext().prec -= 2
    return +s


def _reduce(x: Decimal) -> Decimal:
    """Angle brought into (-2pi, 2pi) so the series converge quickly"""
    return x % (2 * compute_pi())


def sin(x: Decimal) -> Decimal:
    x = _reduce(x)
    decimal.getcontext().prec += 2
    i, lasts, s, fact, num, sign = 1, 0, x, 1, x, 1
    while s != lasts:
        lasts = s
        i += 2
        fact *= i * (i - 1)
        num *= x * x
        sign *= -1
        s += num / fact * sign
    decimal.getcontext().prec -= 2
    return +s


def cos(x: Decimal) -> Decimal:
    x = _reduce(x)
    decimal.getcontext().prec += 2
    i, lasts, s, fact, num, sign = 0, 0, 1, 1, 1, 1
    while s != lasts:
        lasts = s
        i += 2
        fact *= i * (i - 1)
        num *= x * x
        sign *= -1
        s += num / fact * sign
    decimal.getcontext().prec -= 2
    return +s


def tan(x: Decimal) -> Decimal:
    return sin(x) / cos(x)


def sinh(x: Decimal) -> Decimal:
    return (x.exp() - (-x).exp()) / 2


def cosh(x: Decimal) -> Decimal:
    return (x.exp() + (-x).exp()) / 2


def tanh(x: Decimal) -> Decimal:
    return sinh(x) / cosh(x)


def cbrt(x: Decimal) -> Decimal:
    if x == 0:
        return ZERO
    root = (abs(x).ln() / 3).exp()
    # exact cubes come back exact
    nearest = root.to_integral_value()
    if nearest ** 3 == abs(x):
        root = nearest
    return root if x > 0 else -root


def factorial(x: Decimal) -> Decimal:
    if x < 0 or x != x.to_integral_value():
        raise OperandError(f"Cannot calculate factorial of {format_decimal(x)}")
    return +Decimal(math.factorial(int(x)))


def log(base: Decimal, x: Decimal) -> Decimal:
    return x.ln() / base.ln()


def average(values: List[Decimal]) -> Decimal:
    return sum(values, ZERO) / len(values) if values else ZERO


def truth(value: bool) -> Decimal:
    return ONE if value else ZERO


def switch_choice(selector: Decimal) -> int:
    if not selector.is_finite() or selector != selector.to_integral_value():
        raise BranchIndexError(f"Switch selector must be an integer: {selector}")
    return int(selector)


class DecimalBuilder(Builder):
    """Builder over decimal.Decimal with a fixed precision and rounding mode"""

    def __init__(self, precision: int = DEFAULT_PRECISION, rounding: str = DEFAULT_ROUNDING,
                 cache_size: int = 0, max_depth: Optional[int] = DEFAULT_MAX_DEPTH):
        config = ExpressionConfig(
            string_to_operand=Decimal,
            operand_to_string=format_decimal,
            max_depth=max_depth,
        )
        super().__init__(config, cache_size=cache_size)
        self.context = decimal.Context(prec=precision, rounding=rounding)
        self.initialize()

    def local(self, fn: Callable) -> Callable:
        """Wrap fn to run inside this builder's context"""
        context = self.context

        def compute(*args):
            with localcontext(context):
                return fn(*args)
        return compute

    def initialize(self):
        d = self.dictionary
        local = self.local

        d.add_operator('+', Fixity.PREFIX, MAX_PRECEDENCE, identity)
        d.add_operator('-', Fixity.PREFIX, MAX_PRECEDENCE, unary('-', local(lambda x: -x)))

        comparisons = {
            '<': lambda x, y: truth(x < y),
            '>': lambda x, y: truth(x > y),
            '<=': lambda x, y: truth(x <= y),
            '>=': lambda x, y: truth(x >= y),
            '==': lambda x, y: truth(x == y),
            '!=': lambda x, y: truth(x != y),
        }
        for label, fn in comparisons.items():
            d.add_operator(label, Fixity.INFIX, COMPARISON, binary(label, fn))

        d.add_operator('+', Fixity.INFIX, ADDITIVE, binary('+', local(lambda x, y: x + y)))
        d.add_operator('-', Fixity.INFIX, ADDITIVE, binary('-', local(lambda x, y: x - y)))

        d.add_operator('*', Fixity.INFIX, MULTIPLICATIVE, binary('*', local(lambda x, y: x * y)))
        d.add_operator('/', Fixity.INFIX, MULTIPLICATIVE, binary('/', local(lambda x, y: x / y)))
        d.add_operator('%', Fixity.INFIX, MULTIPLICATIVE, binary('%', local(lambda x, y: x % y)))

        d.add_operator('^', Fixity.INFIX_RIGHT, POWER, binary('^', local(lambda x, y: x ** y)))

        d.add_operator('!', Fixity.POSTFIX, FACTORIAL, unary('!', local(factorial)))

        prefix_functions = {
            'abs': abs,
            'sin': sin,
            'cos': cos,
            'tan': tan,
            'sinh': sinh,
            'cosh': cosh,
            'tanh': tanh,
            'round': lambda x: x.to_integral_value(rounding=ROUND_HALF_UP),
            'floor': lambda x: x.to_integral_value(rounding=ROUND_FLOOR),
            'ceil': lambda x: x.to_integral_value(rounding=ROUND_CEILING),
            'ln': lambda x: x.ln(),
            'log10': lambda x: x.log10(),
            'sqrt': lambda x: x.sqrt(),
            'cbrt': cbrt,
        }
        for label, fn in prefix_functions.items():
            d.add_operator(label, Fixity.PREFIX, PREFIX_FUNCTION, unary(label, local(fn)))

        d.add_function('deg', 1, unary('deg', local(lambda x: x * 180 / compute_pi())))
        d.add_function('rad', 1, unary('rad', local(lambda x: x * compute_pi() / 180)))
        d.add_function('exp', 1, unary('exp', local(lambda x: x.exp())))
        d.add_function('log', 2, binary('log', local(log)))

        d.add_function('max', VARIABLE_ARITY, aggregate('max', lambda values: max(values, default=ZERO)))
        d.add_function('min', VARIABLE_ARITY, aggregate('min', lambda values: min(values, default=ZERO)))
        d.add_function('mean', VARIABLE_ARITY, aggregate('mean', local(average)))
        d.add_function('average', VARIABLE_ARITY, aggregate('average', local(average)))

        d.add_function('rand', 0, constant(local(lambda: +Decimal(random.random()))))

        d.add_branch('if', 3, lambda condition: 1 if condition else 2)
        d.add_branch('switch', VARIABLE_ARITY, switch_choice)

        d.add_constant('pi', local(compute_pi)())
        d.add_constant('e', local(lambda: ONE.exp())())
