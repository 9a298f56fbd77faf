"""Ready-made builders for common operand types"""

from exprcalc.impl.arrays import ArrayBuilder
from exprcalc.impl.complexes import ComplexBuilder
from exprcalc.impl.decimals import DecimalBuilder
from exprcalc.impl.floating import FloatBuilder
from exprcalc.impl.frame import assign_formulas, evaluate_frame

__all__ = [
    "ArrayBuilder",
    "ComplexBuilder",
    "DecimalBuilder",
    "FloatBuilder",
    "assign_formulas",
    "evaluate_frame",
]
