"""
Formula columns for pandas DataFrames.

Each variable of an expression is bound to the DataFrame column with the same
name, so "price * qty" evaluates row by row over the whole frame at once.
"""

import logging
from typing import Any, Dict, Mapping, Optional

import numpy as np
import pandas as pd

from exprcalc.builder import Builder
from exprcalc.expression import Expression
from exprcalc.impl.arrays import ArrayBuilder

logger = logging.getLogger(__name__)


def evaluate_frame(expression: Expression, frame: pd.DataFrame, bindings: Optional[Dict[str, Any]] = None,
                   name: Optional[str] = None) -> pd.Series:
    """
    Evaluate an expression over a DataFrame.

    Args:
        expression: expression built by an ArrayBuilder (or any builder whose
            operators accept numpy arrays)
        frame: columns are bound to variables of the same name
        bindings: extra variables; columns win on a name clash
        name: name of the resulting Series

    Returns:
        Series aligned with the frame's index; scalar results are repeated
    """
    variables = dict(bindings or {})
    for label in expression.variables():
        if label in frame.columns:
            variables[label] = frame[label].to_numpy()

    result = np.asarray(expression.evaluate(variables))
    if result.ndim == 0:
        result = np.full(len(frame), result.item())

    return pd.Series(result, index=frame.index, name=name)


def assign_formulas(frame: pd.DataFrame, formulas: Mapping[str, str], builder: Optional[Builder] = None,
                    bindings: Optional[Dict[str, Any]] = None) -> pd.DataFrame:
    """
    Return a copy of the frame with one new column per formula.

    Formulas are applied in order, so later formulas can use earlier columns:
    {"total": "price * qty", "taxed": "total * 1.2"}
    """
    builder = builder if builder is not None else ArrayBuilder()
    result = frame.copy()

    for column, text in formulas.items():
        expression = builder.build(text)
        result[column] = evaluate_frame(expression, result, bindings, name=column)
        logger.debug(f"Assigned column {column!r} = {expression}")

    return result
