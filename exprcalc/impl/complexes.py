"""Complex builder: cmath over Python complex numbers, imaginary literals like 2i"""

import cmath
import math
import random
from typing import List, Optional

from exprcalc.builder import Builder
from exprcalc.config import DEFAULT_MAX_DEPTH, ExpressionConfig
from exprcalc.impl.floating import ADDITIVE, MULTIPLICATIVE, POWER, PREFIX_FUNCTION, format_float
from exprcalc.impl.support import aggregate, binary, constant, identity, unary
from exprcalc.tokens import MAX_PRECEDENCE, VARIABLE_ARITY, Fixity

# Real or imaginary literals; the "i" suffix may follow whitespace
COMPLEX_OPERAND_PATTERNS = (
    r"\d+(?:\.\d+)?[eE][-+]?\d+(?:\s*i(?![a-zA-Z0-9]))?",
    r"\d*\.?\d+(?:\s*i(?![a-zA-Z0-9]))?",
)


def parse_complex(text: str) -> complex:
    text = text.strip()
    if text.endswith('i'):
        return complex(0, float(text[:-1].strip()))
    return complex(float(text), 0)


def format_complex(value: complex) -> str:
    """Real part, then signed imaginary part with an "i" suffix: 1+2i, -i, 2.5i"""
    value = complex(value)
    real, imaginary = value.real, value.imag

    if imaginary == 0:
        return format_float(real)

    magnitude = "" if abs(imaginary) == 1 else format_float(abs(imaginary))
    sign = "-" if imaginary < 0 else ""
    if real == 0:
        return f"{sign}{magnitude}i"
    return f"{format_float(real)}{sign or '+'}{magnitude}i"


def log(base: complex, x: complex) -> complex:
    return cmath.log(x) / cmath.log(base)


def largest(values: List[complex]) -> complex:
    """Largest modulus; ties keep the first"""
    return max(values, key=abs, default=0j)


def smallest(values: List[complex]) -> complex:
    return min(values, key=abs, default=0j)


def average(values: List[complex]) -> complex:
    return sum(values, 0j) / len(values) if values else 0j


class ComplexBuilder(Builder):
    """Builder over complex numbers; no ordering, so no comparisons or branches"""

    PREFIX_FUNCTIONS = {
        'abs': lambda z: complex(abs(z)),
        'sin': cmath.sin,
        'cos': cmath.cos,
        'tan': cmath.tan,
        'asin': cmath.asin,
        'acos': cmath.acos,
        'atan': cmath.atan,
        'sinh': cmath.sinh,
        'cosh': cmath.cosh,
        'tanh': cmath.tanh,
        'asinh': cmath.asinh,
        'acosh': cmath.acosh,
        'atanh': cmath.atanh,
        'ln': cmath.log,
        'log10': cmath.log10,
        'sqrt': cmath.sqrt,
        'cbrt': lambda z: z ** (1 / 3),
    }

    def __init__(self, cache_size: int = 0, max_depth: Optional[int] = DEFAULT_MAX_DEPTH):
        config = ExpressionConfig(
            string_to_operand=parse_complex,
            operand_to_string=format_complex,
            operand_patterns=COMPLEX_OPERAND_PATTERNS,
            max_depth=max_depth,
        )
        super().__init__(config, cache_size=cache_size)
        self.initialize()

    def initialize(self):
        d = self.dictionary

        d.add_operator('+', Fixity.PREFIX, MAX_PRECEDENCE, identity)
        d.add_operator('-', Fixity.PREFIX, MAX_PRECEDENCE, unary('-', lambda z: -z))

        d.add_operator('+', Fixity.INFIX, ADDITIVE, binary('+', lambda x, y: x + y))
        d.add_operator('-', Fixity.INFIX, ADDITIVE, binary('-', lambda x, y: x - y))
        d.add_operator('*', Fixity.INFIX, MULTIPLICATIVE, binary('*', lambda x, y: x * y))
        d.add_operator('/', Fixity.INFIX, MULTIPLICATIVE, binary('/', lambda x, y: x / y))
        d.add_operator('^', Fixity.INFIX_RIGHT, POWER, binary('^', lambda x, y: x ** y))

        for label, fn in self.PREFIX_FUNCTIONS.items():
            d.add_operator(label, Fixity.PREFIX, PREFIX_FUNCTION, unary(label, fn))

        d.add_function('deg', 1, unary('deg', lambda z: z * 180 / math.pi))
        d.add_function('rad', 1, unary('rad', lambda z: z * math.pi / 180))
        d.add_function('exp', 1, unary('exp', cmath.exp))
        d.add_function('log', 2, binary('log', log))

        d.add_function('max', VARIABLE_ARITY, aggregate('max', largest))
        d.add_function('min', VARIABLE_ARITY, aggregate('min', smallest))
        d.add_function('mean', VARIABLE_ARITY, aggregate('mean', average))
        d.add_function('average', VARIABLE_ARITY, aggregate('average', average))

        d.add_function('rand', 0, constant(lambda: complex(random.random(), random.random())))

        d.add_constant('pi', complex(math.pi))
        d.add_constant('e', complex(math.e))
        d.add_constant('i', 1j)
