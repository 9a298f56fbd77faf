import sys, pathlib
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

import pytest

from exprcalc import (
    ArityError,
    CommaError,
    InvalidExpressionError,
    NestingDepthError,
    Operand,
    ParseError,
    UndefinedSymbolError,
    UnmatchedParenthesisError,
)
from exprcalc.impl import FloatBuilder


@pytest.fixture
def builder():
    return FloatBuilder()


def rpn(builder, expression):
    """Postfix as plain values: numbers for operands, labels otherwise"""
    return [t.value if isinstance(t, Operand) else t.label for t in builder.postfix(expression)]


def test_precedence(builder):
    assert rpn(builder, "2 + 3 * 4") == [2, 3, 4, "*", "+"]
    assert rpn(builder, "2 * 3 + 4") == [2, 3, "*", 4, "+"]


def test_left_associativity(builder):
    assert rpn(builder, "2 - 3 - 4") == [2, 3, "-", 4, "-"]


def test_right_associativity(builder):
    assert rpn(builder, "2 ^ 3 ^ 4") == [2, 3, 4, "^", "^"]


def test_parentheses_override_precedence(builder):
    assert rpn(builder, "(2 + 3) * 4") == [2, 3, "+", 4, "*"]


def test_unary_minus_binds_tightest(builder):
    assert rpn(builder, "-5 * 6") == [5, "uminus", 6, "*"]
    assert rpn(builder, "-(5 * 6)") == [5, 6, "*", "uminus"]


def test_prefix_chain(builder):
    assert rpn(builder, "- - - 5") == [5, "uminus", "uminus", "uminus"]


def test_prefix_operator_flushed_at_close_paren(builder):
    assert rpn(builder, "sin(5) + 1") == [5, "sin", 1, "+"]


def test_postfix_goes_straight_to_output(builder):
    assert rpn(builder, "2 * 3!") == [2, 3, "!", "*"]


def test_variable_arity_resolved(builder):
    postfix = builder.postfix("max(1, 2, 3)")
    assert postfix[-1].label == "max"
    assert postfix[-1].arity == 3

    assert builder.postfix("max()")[-1].arity == 0
    assert builder.postfix("max(7)")[-1].arity == 1


def test_nested_calls(builder):
    assert rpn(builder, "log(2, max(1, 8))") == [2, 1, 8, "max", "log"]


def test_fixed_arity_mismatch(builder):
    with pytest.raises(ArityError) as info:
        builder.postfix("log(3)")
    assert info.value.expected == 2
    assert info.value.actual == 1

    with pytest.raises(ArityError):
        builder.postfix("rand(1)")


def test_variable_arity_branch_needs_three(builder):
    with pytest.raises(ArityError):
        builder.postfix("switch(1, 2)")
    assert builder.postfix("switch(1, 2, 3)")[-1].arity == 3


def test_unmatched_parentheses(builder):
    with pytest.raises(UnmatchedParenthesisError):
        builder.postfix("(2 + 3))")
    with pytest.raises(UnmatchedParenthesisError):
        builder.postfix("(2 + (3)")
    with pytest.raises(UnmatchedParenthesisError):
        builder.postfix("max(1, 2")


def test_empty_parentheses(builder):
    with pytest.raises(InvalidExpressionError):
        builder.postfix("()")
    with pytest.raises(InvalidExpressionError):
        builder.postfix("5 +() 6")


def test_function_needs_open_paren(builder):
    with pytest.raises(InvalidExpressionError):
        builder.postfix("max 5")


def test_comma_placement(builder):
    with pytest.raises(CommaError):
        builder.postfix("(5, 5)")
    with pytest.raises(CommaError):
        builder.postfix("1, 2")
    with pytest.raises(InvalidExpressionError):
        builder.postfix("max(, 1)")
    with pytest.raises(InvalidExpressionError):
        builder.postfix("max(1, )")
    with pytest.raises(InvalidExpressionError):
        builder.postfix("max(1 +, 2)")


def test_operator_adjacency(builder):
    # no prefix "*" to read where an operand is expected
    with pytest.raises(UndefinedSymbolError):
        builder.postfix("6 + * 5")
    with pytest.raises(InvalidExpressionError):
        builder.postfix("5 max(6 *)")
    with pytest.raises(InvalidExpressionError):
        builder.postfix("5 (+) 6")


def test_parse_errors_share_a_base(builder):
    for bad in ["(2 + 3))", "()", "log(3)", "(5, 5)"]:
        with pytest.raises(ParseError):
            builder.postfix(bad)


def test_nesting_depth_limit():
    shallow = FloatBuilder(max_depth=3)
    assert shallow.build("((1))").evaluate() == 1

    with pytest.raises(NestingDepthError):
        shallow.postfix("((((1))))")
    with pytest.raises(NestingDepthError):
        shallow.postfix("max(max(max(max(1))))")


def test_deep_nesting_without_limit():
    unlimited = FloatBuilder(max_depth=None)
    expression = "(" * 300 + "1" + ")" * 300
    assert unlimited.build(expression).evaluate() == 1


def test_trailing_operator(builder):
    for bad in ["5 +", "+", "-", "sin", "5 6 +", "2 * -"]:
        with pytest.raises(InvalidExpressionError):
            builder.postfix(bad)
    assert builder.postfix("5!")[-1].label == "!"
