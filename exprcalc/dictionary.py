"""
Registry of the operators, functions, branches and constants a builder knows.

A label is unique within each map, but the same label may live in several
operator maps (e.g. "-" as prefix and infix). Three labels are reserved for
the operators the tokenizer synthesizes; callers cannot add or remove them.
"""

import logging
import re
from dataclasses import replace
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional

from exprcalc.errors import ConfigError, ReservedLabelError, UndefinedSymbolError, UnknownConstantError
from exprcalc.tokens import (
    IMPLICIT_MULTIPLICATION,
    MAX_PRECEDENCE,
    RESERVED_LABELS,
    UNARY_MINUS,
    UNARY_PLUS,
    Branch,
    Fixity,
    Function,
    Operator,
)

logger = logging.getLogger(__name__)

_INVALID_LABEL = re.compile(r"[\s(),]")

# Marker -> (source label, source fixity)
_MARKER_SOURCES = {
    UNARY_PLUS: ("+", Fixity.PREFIX),
    UNARY_MINUS: ("-", Fixity.PREFIX),
    IMPLICIT_MULTIPLICATION: ("*", Fixity.INFIX),
}


def _identity(parameters):
    return parameters[0].value()


class Dictionary:
    """Operators, functions, branches and constants over one operand type"""

    def __init__(self):
        self._operators: Dict[Fixity, Dict[str, Operator]] = {
            Fixity.PREFIX: {},
            Fixity.POSTFIX: {},
            Fixity.INFIX: {},
        }
        self._functions: Dict[str, Function] = {}
        self._branches: Dict[str, Branch] = {}
        self._constants: Dict[str, Any] = {}
        self._version = 0

    @property
    def version(self) -> int:
        """Incremented on every mutation"""
        return self._version

    def copy(self) -> "Dictionary":
        """Independent copy that can be mutated without touching this one"""
        other = Dictionary()
        for fixity, operators in self._operators.items():
            other._operators[fixity] = dict(operators)
        other._functions = dict(self._functions)
        other._branches = dict(self._branches)
        other._constants = dict(self._constants)
        return other

    def _touch(self):
        self._version += 1

    @staticmethod
    def _validate_label(label: str):
        if label in RESERVED_LABELS:
            raise ReservedLabelError(label)
        if not isinstance(label, str) or not label or _INVALID_LABEL.search(label):
            raise ConfigError(f"Invalid label: {label!r}")

    @staticmethod
    def _operator_map_key(fixity: Fixity) -> Fixity:
        # both infix forms share one map: a label has a single infix meaning
        return Fixity.INFIX if fixity == Fixity.INFIX_RIGHT else fixity

    # ------------------------------------------
    # Operators
    # ------------------------------------------

    def add_operator(self, label: str, fixity: Fixity, precedence: int, fn: Callable) -> Operator:
        """Register an operator, replacing one with the same label and fixity"""
        self._validate_label(label)
        operator = Operator(label, fixity, precedence, fn)
        self._operators[self._operator_map_key(fixity)][label] = operator
        self._touch()
        logger.debug(f"Added {fixity.value} operator {label!r} with precedence {precedence}")
        return operator

    def remove_operator(self, label: str, fixity: Optional[Fixity] = None) -> bool:
        """Remove the operator of a fixity, or of every fixity when None"""
        if label in RESERVED_LABELS:
            raise ReservedLabelError(label)

        if fixity is None:
            maps = list(self._operators.values())
        else:
            maps = [self._operators[self._operator_map_key(fixity)]]

        found = False
        for operators in maps:
            if operators.pop(label, None) is not None:
                found = True

        if found:
            self._touch()
        return found

    def get_operator(self, label: str, fixity: Fixity) -> Optional[Operator]:
        operator = self._operators[self._operator_map_key(fixity)].get(label)
        if operator is not None and fixity.is_infix and operator.fixity != fixity:
            return None
        return operator

    def has_operator(self, label: str, fixity: Optional[Fixity] = None) -> bool:
        if fixity is None:
            return any(label in operators for operators in self._operators.values())
        return self.get_operator(label, fixity) is not None

    def get_prefix_operator(self, label: str) -> Optional[Operator]:
        return self._operators[Fixity.PREFIX].get(label)

    def get_postfix_operator(self, label: str) -> Optional[Operator]:
        return self._operators[Fixity.POSTFIX].get(label)

    def get_infix_operator(self, label: str) -> Optional[Operator]:
        """Infix operator of either associativity"""
        return self._operators[Fixity.INFIX].get(label)

    def operators(self) -> List[Operator]:
        return [op for operators in self._operators.values() for op in operators.values()]

    # ------------------------------------------
    # Functions and branches
    # ------------------------------------------

    def add_function(self, label: str, arity: int, fn: Callable) -> Function:
        self._validate_label(label)
        if label in self._branches:
            raise ConfigError(f"Label already used by a branch: {label}")
        function = Function(label, arity, fn)
        self._functions[label] = function
        self._touch()
        logger.debug(f"Added function {label!r} with arity {arity}")
        return function

    def remove_function(self, label: str) -> bool:
        if label in RESERVED_LABELS:
            raise ReservedLabelError(label)
        if self._functions.pop(label, None) is None:
            return False
        self._touch()
        return True

    def get_function(self, label: str) -> Optional[Function]:
        return self._functions.get(label)

    def has_function(self, label: str) -> bool:
        return label in self._functions

    def functions(self) -> List[Function]:
        return list(self._functions.values())

    def add_branch(self, label: str, arity: int, choice: Callable) -> Branch:
        self._validate_label(label)
        if label in self._functions:
            raise ConfigError(f"Label already used by a function: {label}")
        branch = Branch(label, arity, choice)
        self._branches[label] = branch
        self._touch()
        logger.debug(f"Added branch {label!r} with arity {arity}")
        return branch

    def remove_branch(self, label: str) -> bool:
        if label in RESERVED_LABELS:
            raise ReservedLabelError(label)
        if self._branches.pop(label, None) is None:
            return False
        self._touch()
        return True

    def get_branch(self, label: str) -> Optional[Branch]:
        return self._branches.get(label)

    def has_branch(self, label: str) -> bool:
        return label in self._branches

    def branches(self) -> List[Branch]:
        return list(self._branches.values())

    # ------------------------------------------
    # Constants
    # ------------------------------------------

    def add_constant(self, label: str, value: Any):
        self._validate_label(label)
        self._constants[label] = value
        self._touch()

    def remove_constant(self, label: str) -> bool:
        if label in RESERVED_LABELS:
            raise ReservedLabelError(label)
        if label not in self._constants:
            return False
        del self._constants[label]
        self._touch()
        return True

    def get_constant(self, label: str) -> Any:
        if label not in self._constants:
            raise UnknownConstantError(label)
        return self._constants[label]

    def has_constant(self, label: str) -> bool:
        return label in self._constants

    @property
    def constants(self) -> Mapping[str, Any]:
        return MappingProxyType(self._constants)

    # ------------------------------------------
    # Tokenizer support
    # ------------------------------------------

    def labels(self) -> List[str]:
        """Labels of all executables, longest first"""
        labels = set(self._functions) | set(self._branches)
        for operators in self._operators.values():
            labels.update(operators)
        return sorted(labels, key=lambda label: (-len(label), label))

    def marker(self, label: str) -> Operator:
        """
        Operator the tokenizer emits for a reserved label.

        Markers borrow fixity, precedence and behaviour from the operator
        they stand for (prefix "+", prefix "-", infix "*") and print as it.
        """
        if label not in _MARKER_SOURCES:
            raise ConfigError(f"Not a reserved label: {label}")

        source_label, fixity = _MARKER_SOURCES[label]
        if fixity == Fixity.PREFIX:
            source = self.get_prefix_operator(source_label)
        else:
            source = self.get_infix_operator(source_label)

        if source is None:
            if label == UNARY_PLUS:
                return Operator(UNARY_PLUS, Fixity.PREFIX, MAX_PRECEDENCE, _identity, symbol="+")
            raise UndefinedSymbolError(source_label)

        return replace(source, label=label, symbol=source.label)
