import sys, pathlib
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

import pytest

from exprcalc import (
    IMPLICIT_MULTIPLICATION,
    UNARY_MINUS,
    UNARY_PLUS,
    BlankExpressionError,
    Builder,
    Dictionary,
    ExpressionConfig,
    Fixity,
    InvalidCharacterError,
    LexError,
    Operand,
    Separator,
    UndefinedSymbolError,
    Variable,
)
from exprcalc.impl import FloatBuilder


@pytest.fixture
def builder():
    return FloatBuilder()


def labels(tokens):
    return [getattr(t, 'label', None) for t in tokens]


def test_blank_input(builder):
    with pytest.raises(BlankExpressionError):
        builder.tokenize("")
    with pytest.raises(BlankExpressionError):
        builder.tokenize("   ")


def test_invalid_character_position(builder):
    with pytest.raises(InvalidCharacterError) as info:
        builder.tokenize("5 $ 3")
    assert info.value.position == 2
    assert "$" in str(info.value)


def test_unary_and_binary_minus(builder):
    tokens = builder.tokenize("-5 - 3")
    assert tokens[0].label == UNARY_MINUS
    assert tokens[0].display == "-"
    assert tokens[2].label == "-"
    assert tokens[2].fixity == Fixity.INFIX


def test_unary_after_open_paren_and_comma(builder):
    tokens = builder.tokenize("max(-1, +2)")
    assert tokens[2].label == UNARY_MINUS
    assert tokens[5].label == UNARY_PLUS


def test_unary_after_operator(builder):
    tokens = builder.tokenize("2 ^ -3")
    assert tokens[2].label == UNARY_MINUS


def test_longest_label_wins(builder):
    tokens = builder.tokenize("sinh 1")
    assert tokens[0].label == "sinh"
    tokens = builder.tokenize("3 <= 4")
    assert tokens[1].label == "<="


def test_scientific_notation_before_plain_decimal(builder):
    assert builder.tokenize("1e-3") == [Operand(0.001)]
    assert builder.tokenize("1.5E+2") == [Operand(150.0)]
    assert builder.tokenize(".5") == [Operand(0.5)]


def test_number_followed_by_constant(builder):
    tokens = builder.tokenize("2e")
    assert tokens[0] == Operand(2.0)
    assert tokens[1].label == IMPLICIT_MULTIPLICATION
    assert tokens[2] == Variable("e")


def test_variables_with_digits(builder):
    assert builder.tokenize("x5") == [Variable("x5")]
    assert builder.tokenize("ab12cd") == [Variable("ab12cd")]


def test_implicit_multiplication(builder):
    assert labels(builder.tokenize("5x"))[1] == IMPLICIT_MULTIPLICATION
    assert labels(builder.tokenize("5 5"))[1] == IMPLICIT_MULTIPLICATION
    assert labels(builder.tokenize("5(5)"))[1] == IMPLICIT_MULTIPLICATION
    assert labels(builder.tokenize("5 max(1, 2)"))[1] == IMPLICIT_MULTIPLICATION

    tokens = builder.tokenize("(a)(b)")
    assert len(tokens) == 7
    assert tokens[3].label == IMPLICIT_MULTIPLICATION
    assert tokens[3].display == "*"


def test_no_implicit_multiplication_after_operator(builder):
    tokens = builder.tokenize("5 + (2)")
    assert IMPLICIT_MULTIPLICATION not in labels(tokens)


def test_prefix_operator_after_operand(builder):
    tokens = builder.tokenize("5 sin 5")
    assert labels(tokens)[1] == IMPLICIT_MULTIPLICATION
    assert tokens[2].label == "sin"
    assert tokens[2].fixity == Fixity.PREFIX


def test_postfix_then_prefix(builder):
    tokens = builder.tokenize("5! sin 5")
    assert tokens[1].fixity == Fixity.POSTFIX
    assert tokens[2].label == IMPLICIT_MULTIPLICATION


def test_separators(builder):
    tokens = builder.tokenize("log(2, 8)")
    assert tokens[1] == Separator.OPEN_PAREN
    assert tokens[3] == Separator.COMMA
    assert tokens[5] == Separator.CLOSE_PAREN


def test_undefined_symbol(builder):
    with pytest.raises(UndefinedSymbolError) as info:
        builder.tokenize("* 5")
    assert info.value.symbol == "*"


def test_missing_marker_source():
    config = ExpressionConfig(string_to_operand=float)
    dictionary = Dictionary()
    dictionary.add_operator("+", Fixity.INFIX, 1, lambda p: p[0].value() + p[1].value())
    plain = Builder(config, dictionary)

    with pytest.raises(UndefinedSymbolError):
        plain.tokenize("-5")
    with pytest.raises(UndefinedSymbolError):
        plain.tokenize("5x")

    # unary plus falls back to identity
    assert plain.build("+5").evaluate() == 5.0


def test_operand_conversion_failure():
    def picky(text):
        if text == "13":
            raise ValueError("unlucky")
        return int(text)

    config = ExpressionConfig(string_to_operand=picky, operand_patterns=(r"\d+",))
    assert Builder(config).tokenize("12") == [Operand(12)]
    with pytest.raises(LexError):
        Builder(config).tokenize("13")
