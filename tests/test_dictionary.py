import sys, pathlib
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

import pytest

from exprcalc import (
    IMPLICIT_MULTIPLICATION,
    MAX_PRECEDENCE,
    UNARY_MINUS,
    UNARY_PLUS,
    VARIABLE_ARITY,
    ConfigError,
    Dictionary,
    ExpressionConfig,
    Fixity,
    ReservedLabelError,
    UndefinedSymbolError,
    UnknownConstantError,
)


def add(parameters):
    return parameters[0].value() + parameters[1].value()


def negate(parameters):
    return -parameters[0].value()


@pytest.fixture
def dictionary():
    d = Dictionary()
    d.add_operator("+", Fixity.INFIX, 1, add)
    d.add_operator("-", Fixity.PREFIX, 10, negate)
    d.add_operator("-", Fixity.INFIX, 1, lambda p: p[0].value() - p[1].value())
    return d


def test_same_label_in_several_maps(dictionary):
    assert dictionary.get_operator("-", Fixity.PREFIX).fixity == Fixity.PREFIX
    assert dictionary.get_operator("-", Fixity.INFIX).fixity == Fixity.INFIX
    assert dictionary.get_operator("-", Fixity.POSTFIX) is None
    assert dictionary.has_operator("-")


def test_add_replaces_same_fixity(dictionary):
    dictionary.add_operator("+", Fixity.INFIX, 5, add)
    assert dictionary.get_infix_operator("+").precedence == 5
    assert len([op for op in dictionary.operators() if op.label == "+"]) == 1


def test_right_associative_shares_infix_map():
    d = Dictionary()
    d.add_operator("^", Fixity.INFIX_RIGHT, 3, add)
    assert d.get_operator("^", Fixity.INFIX_RIGHT) is not None
    assert d.get_operator("^", Fixity.INFIX) is None
    assert d.get_infix_operator("^").fixity == Fixity.INFIX_RIGHT
    assert d.has_operator("^", Fixity.INFIX_RIGHT)


def test_remove_operator(dictionary):
    assert dictionary.remove_operator("-", Fixity.PREFIX)
    assert not dictionary.has_operator("-", Fixity.PREFIX)
    assert dictionary.has_operator("-", Fixity.INFIX)

    assert dictionary.remove_operator("-")
    assert not dictionary.has_operator("-")
    assert not dictionary.remove_operator("-")


def test_functions_and_branches():
    d = Dictionary()
    d.add_function("max", VARIABLE_ARITY, lambda p: max(x.value() for x in p))
    d.add_branch("if", 3, lambda cond: 1 if cond else 2)

    assert d.has_function("max")
    assert d.get_function("max").is_variable
    assert d.has_branch("if")
    assert [b.label for b in d.branches()] == ["if"]

    with pytest.raises(ConfigError):
        d.add_branch("max", 3, lambda cond: 1)
    with pytest.raises(ConfigError):
        d.add_function("if", 1, negate)

    assert d.remove_function("max")
    assert not d.remove_function("max")
    assert d.remove_branch("if")
    assert not d.remove_branch("if")


def test_constants():
    d = Dictionary()
    d.add_constant("pi", 3.14)
    assert d.has_constant("pi")
    assert d.get_constant("pi") == 3.14
    assert d.constants == {"pi": 3.14}

    with pytest.raises(TypeError):
        d.constants["tau"] = 6.28

    assert d.remove_constant("pi")
    assert not d.remove_constant("pi")
    with pytest.raises(UnknownConstantError):
        d.get_constant("pi")


@pytest.mark.parametrize("label", [UNARY_PLUS, UNARY_MINUS, IMPLICIT_MULTIPLICATION])
def test_reserved_labels(dictionary, label):
    with pytest.raises(ReservedLabelError):
        dictionary.add_operator(label, Fixity.PREFIX, 1, negate)
    with pytest.raises(ReservedLabelError):
        dictionary.add_function(label, 1, negate)
    with pytest.raises(ReservedLabelError):
        dictionary.add_branch(label, 3, lambda cond: 1)
    with pytest.raises(ReservedLabelError):
        dictionary.add_constant(label, 1)
    with pytest.raises(ReservedLabelError):
        dictionary.remove_operator(label)
    with pytest.raises(ReservedLabelError):
        dictionary.remove_function(label)
    with pytest.raises(ReservedLabelError):
        dictionary.remove_constant(label)


def test_reserved_label_error_is_config_error():
    assert issubclass(ReservedLabelError, ConfigError)


@pytest.mark.parametrize("label", ["", "a b", "f(", "g,", ")"])
def test_invalid_labels(label):
    with pytest.raises(ConfigError):
        Dictionary().add_function(label, 1, negate)


@pytest.mark.parametrize("precedence", [0, -1, 1.5, True, "2"])
def test_invalid_precedence(precedence):
    with pytest.raises(ConfigError):
        Dictionary().add_operator("#", Fixity.INFIX, precedence, add)


def test_invalid_fixity():
    with pytest.raises(ConfigError):
        Dictionary().add_operator("#", "INFIX", 1, add)


def test_invalid_arity():
    with pytest.raises(ConfigError):
        Dictionary().add_function("f", -2, negate)
    with pytest.raises(ConfigError):
        Dictionary().add_function("f", 1.0, negate)
    with pytest.raises(ConfigError):
        Dictionary().add_branch("b", 2, lambda cond: 1)


def test_labels_longest_first():
    d = Dictionary()
    d.add_operator("sin", Fixity.PREFIX, 4, negate)
    d.add_operator("sinh", Fixity.PREFIX, 4, negate)
    d.add_function("s", 1, negate)
    assert d.labels() == ["sinh", "sin", "s"]


def test_version_and_copy(dictionary):
    version = dictionary.version
    dictionary.add_constant("k", 1)
    assert dictionary.version > version

    clone = dictionary.copy()
    clone.add_constant("j", 2)
    clone.remove_operator("+")
    assert not dictionary.has_constant("j")
    assert dictionary.has_operator("+")
    assert clone.has_constant("k")


def test_markers(dictionary):
    minus = dictionary.marker(UNARY_MINUS)
    assert minus.label == UNARY_MINUS
    assert minus.display == "-"
    assert minus.precedence == 10
    assert minus.fixity == Fixity.PREFIX

    plus = dictionary.marker(UNARY_PLUS)
    assert plus.precedence == MAX_PRECEDENCE
    assert plus.display == "+"

    with pytest.raises(UndefinedSymbolError):
        dictionary.marker(IMPLICIT_MULTIPLICATION)

    dictionary.add_operator("*", Fixity.INFIX, 2, add)
    times = dictionary.marker(IMPLICIT_MULTIPLICATION)
    assert times.display == "*"
    assert times.precedence == 2
    assert times.fixity == Fixity.INFIX

    with pytest.raises(ConfigError):
        dictionary.marker("sin")


# ==========================================
# CONFIG
# ==========================================

def test_config_defaults():
    config = ExpressionConfig(string_to_operand=float)
    assert config.operand_to_string is str
    assert config.max_depth == 128
    assert isinstance(config.operand_patterns, tuple)


@pytest.mark.parametrize("options", [
    {"string_to_operand": "float"},
    {"string_to_operand": float, "operand_to_string": None},
    {"string_to_operand": float, "operand_patterns": r"\d+"},
    {"string_to_operand": float, "operand_patterns": ()},
    {"string_to_operand": float, "operand_patterns": ("(",)},
    {"string_to_operand": float, "operand_patterns": (r"\d*",)},
    {"string_to_operand": float, "variable_pattern": "[a-z]*"},
    {"string_to_operand": float, "max_depth": 0},
    {"string_to_operand": float, "max_depth": True},
])
def test_invalid_config(options):
    with pytest.raises(ConfigError):
        ExpressionConfig(**options)
