"""Adapters from plain operand arithmetic to lazy-parameter callbacks"""

from typing import Any, Callable, List

from exprcalc.errors import OperandError


def apply(label: str, fn: Callable, *args) -> Any:
    """Call fn, reporting arithmetic failures as OperandError"""
    try:
        return fn(*args)
    except OperandError:
        raise
    except ZeroDivisionError as e:
        raise OperandError(f"Division by zero in {label}") from e
    except (ArithmeticError, ValueError) as e:
        shown = ", ".join(str(arg) for arg in args)
        raise OperandError(f"Cannot evaluate {label}({shown}): {e}") from e


def identity(parameters):
    return parameters[0].value()


def unary(label: str, fn: Callable[[Any], Any]):
    def evaluate(parameters):
        return apply(label, fn, parameters[0].value())
    return evaluate


def binary(label: str, fn: Callable[[Any, Any], Any]):
    def evaluate(parameters):
        return apply(label, fn, parameters[0].value(), parameters[1].value())
    return evaluate


def aggregate(label: str, fn: Callable[[List[Any]], Any]):
    """Variable-arity callback; evaluates every parameter"""
    def evaluate(parameters):
        return apply(label, fn, [parameter.value() for parameter in parameters])
    return evaluate


def constant(fn: Callable[[], Any]):
    """Zero-arity callback"""
    def evaluate(parameters):
        return fn()
    return evaluate
