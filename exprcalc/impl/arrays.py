"""
Array builder: the float vocabulary applied elementwise with numpy.

Literals become numpy float64 scalars and variables are bound to arrays (or
scalars); every operator broadcasts. Comparisons yield boolean arrays, and
where(cond, a, b) selects elementwise. There are no branches: a branch picks
one child for the whole expression, which has no elementwise meaning.
"""

from typing import List, Optional

import numpy as np

from exprcalc.builder import Builder
from exprcalc.config import DEFAULT_MAX_DEPTH, ExpressionConfig
from exprcalc.impl.floating import (
    ADDITIVE,
    COMPARISON,
    FACTORIAL,
    MULTIPLICATIVE,
    POWER,
    PREFIX_FUNCTION,
    factorial,
    format_float,
)
from exprcalc.impl.support import aggregate, binary, constant, identity, unary
from exprcalc.tokens import MAX_PRECEDENCE, VARIABLE_ARITY, Fixity

_elementwise_factorial = np.vectorize(factorial, otypes=[np.float64])


def format_scalar(value) -> str:
    return format_float(float(value))


def _stack(values: List[np.ndarray]) -> np.ndarray:
    return np.stack(np.broadcast_arrays(*values))


def maximum(values):
    return _stack(values).max(axis=0) if values else np.float64(0.0)


def minimum(values):
    return _stack(values).min(axis=0) if values else np.float64(0.0)


def mean(values):
    return _stack(values).mean(axis=0) if values else np.float64(0.0)


def log(base, x):
    return np.log(x) / np.log(base)


class ArrayBuilder(Builder):
    """Builder whose expressions evaluate over numpy arrays"""

    PREFIX_FUNCTIONS = {
        'abs': np.abs,
        'sin': np.sin,
        'cos': np.cos,
        'tan': np.tan,
        'asin': np.arcsin,
        'acos': np.arccos,
        'atan': np.arctan,
        'sinh': np.sinh,
        'cosh': np.cosh,
        'tanh': np.tanh,
        'asinh': np.arcsinh,
        'acosh': np.arccosh,
        'atanh': np.arctanh,
        'round': lambda x: np.floor(np.add(x, 0.5)),
        'floor': np.floor,
        'ceil': np.ceil,
        'ln': np.log,
        'log10': np.log10,
        'sqrt': np.sqrt,
        'cbrt': np.cbrt,
    }

    COMPARISONS = {
        '<': np.less,
        '>': np.greater,
        '<=': np.less_equal,
        '>=': np.greater_equal,
        '==': np.equal,
        '!=': np.not_equal,
    }

    def __init__(self, cache_size: int = 0, max_depth: Optional[int] = DEFAULT_MAX_DEPTH, seed: Optional[int] = None):
        config = ExpressionConfig(
            string_to_operand=np.float64,
            operand_to_string=format_scalar,
            max_depth=max_depth,
        )
        super().__init__(config, cache_size=cache_size)
        self.rng = np.random.default_rng(seed)
        self.initialize()

    def initialize(self):
        d = self.dictionary

        d.add_operator('+', Fixity.PREFIX, MAX_PRECEDENCE, identity)
        d.add_operator('-', Fixity.PREFIX, MAX_PRECEDENCE, unary('-', np.negative))

        for label, fn in self.COMPARISONS.items():
            d.add_operator(label, Fixity.INFIX, COMPARISON, binary(label, fn))

        d.add_operator('+', Fixity.INFIX, ADDITIVE, binary('+', np.add))
        d.add_operator('-', Fixity.INFIX, ADDITIVE, binary('-', np.subtract))
        d.add_operator('*', Fixity.INFIX, MULTIPLICATIVE, binary('*', np.multiply))
        d.add_operator('/', Fixity.INFIX, MULTIPLICATIVE, binary('/', np.true_divide))
        d.add_operator('%', Fixity.INFIX, MULTIPLICATIVE, binary('%', np.mod))
        d.add_operator('^', Fixity.INFIX_RIGHT, POWER, binary('^', np.float_power))
        d.add_operator('!', Fixity.POSTFIX, FACTORIAL, unary('!', _elementwise_factorial))

        for label, fn in self.PREFIX_FUNCTIONS.items():
            d.add_operator(label, Fixity.PREFIX, PREFIX_FUNCTION, unary(label, fn))

        d.add_function('deg', 1, unary('deg', np.degrees))
        d.add_function('rad', 1, unary('rad', np.radians))
        d.add_function('exp', 1, unary('exp', np.exp))
        d.add_function('log', 2, binary('log', log))
        d.add_function('where', 3, self._where)

        d.add_function('max', VARIABLE_ARITY, aggregate('max', maximum))
        d.add_function('min', VARIABLE_ARITY, aggregate('min', minimum))
        d.add_function('mean', VARIABLE_ARITY, aggregate('mean', mean))
        d.add_function('average', VARIABLE_ARITY, aggregate('average', mean))

        d.add_function('rand', 0, constant(self.rng.random))

        d.add_constant('pi', np.float64(np.pi))
        d.add_constant('e', np.float64(np.e))

    @staticmethod
    def _where(parameters):
        condition, x, y = (parameter.value() for parameter in parameters)
        return np.where(condition, x, y)
