"""
Built expressions and their lazy evaluation.

Children of operators and functions are handed over as Parameters that
evaluate on first access and cache the result, so a body that never reads a
parameter never evaluates that subtree. Branches evaluate their selector and
then exactly one chosen child.
"""

import operator
from collections import ChainMap
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Set

from exprcalc.errors import BranchIndexError, UnknownVariableError
from exprcalc.formatter import format_expression
from exprcalc.tokens import Branch, Operand, Variable
from exprcalc.tree import Node

_UNEVALUATED = object()


class Parameter:
    """Deferred value of one child node, computed at most once"""

    __slots__ = ("_expression", "_node", "_variables", "_result")

    def __init__(self, expression: "Expression", node: Node, variables: Mapping[str, Any]):
        self._expression = expression
        self._node = node
        self._variables = variables
        self._result = _UNEVALUATED

    @property
    def evaluated(self) -> bool:
        return self._result is not _UNEVALUATED

    def value(self) -> Any:
        if self._result is _UNEVALUATED:
            self._result = self._expression._evaluate(self._node, self._variables)
        return self._result

    def __repr__(self):
        state = repr(self._result) if self.evaluated else "unevaluated"
        return f"Parameter({state})"


class Expression:
    """Immutable parsed expression; evaluate it as often as needed"""

    def __init__(self, root: Node, constants: Mapping[str, Any], operand_to_string: Callable[[Any], str] = str):
        self.root = root
        self._constants = MappingProxyType(dict(constants))
        self._operand_to_string = operand_to_string

    @property
    def constants(self) -> Mapping[str, Any]:
        """Constants the dictionary held when this expression was built"""
        return self._constants

    def evaluate(self, bindings: Optional[Dict[str, Any]] = None) -> Any:
        """Evaluate with variable bindings, which take priority over constants"""
        variables = ChainMap(dict(bindings), self._constants) if bindings else self._constants
        return self._evaluate(self.root, variables)

    def _evaluate(self, node: Node, variables: Mapping[str, Any]) -> Any:
        token = node.token

        if isinstance(token, Operand):
            return token.value

        if isinstance(token, Variable):
            try:
                return variables[token.label]
            except KeyError:
                raise UnknownVariableError(token.label) from None

        if isinstance(token, Branch):
            selector = self._evaluate(node.children[0], variables)
            index = self._branch_index(token, token.choose(selector), len(node.children))
            return self._evaluate(node.children[index], variables)

        # Operators and functions
        parameters = [Parameter(self, child, variables) for child in node.children]
        return token.evaluate(parameters)

    @staticmethod
    def _branch_index(branch: Branch, index: Any, count: int) -> int:
        try:
            index = operator.index(index)
        except TypeError:
            raise BranchIndexError(f"Branch {branch.label} chose a non-integer index: {index!r}") from None

        if not 1 <= index < count:
            raise BranchIndexError(f"Branch {branch.label} chose index {index}, expected 1 to {count - 1}")
        return index

    def variables(self) -> Set[str]:
        """Labels of every variable the expression refers to"""
        labels = set()
        stack = [self.root]
        while stack:
            node = stack.pop()
            if isinstance(node.token, Variable):
                labels.add(node.token.label)
            stack.extend(node.children)
        return labels

    def to_string(self) -> str:
        return format_expression(self.root, self._operand_to_string)

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        return f"Expression({self.to_string()!r})"
