"""Expression tree nodes and their assembly from a postfix token list"""

import logging
from typing import List, Optional

from exprcalc.errors import NestingDepthError, TreeError
from exprcalc.tokens import Branch, Function, Operator, Token


logger = logging.getLogger(__name__)


class Node:
    """A token and its ordered children; leaves have no children"""

    __slots__ = ("token", "children")

    def __init__(self, token: Token):
        self.token = token
        self.children: List["Node"] = []

    @property
    def arity(self) -> int:
        if isinstance(self.token, (Operator, Function, Branch)):
            return self.token.arity
        return 0

    def __repr__(self):
        if not self.children:
            return f"Node({self.token})"
        return f"Node({self.token}, {self.children!r})"


class TreeBuilder:
    """Rebuilds the tree from postfix order, last token first"""

    def __init__(self, max_depth: Optional[int] = None):
        self.max_depth = max_depth

    def build(self, postfix: List[Token]) -> Node:
        if not postfix:
            raise TreeError("Invalid expression")

        pending = list(postfix)
        root = Node(pending.pop())

        while pending:
            if not self._insert(root, Node(pending.pop())):
                raise TreeError("Invalid expression")

        self._validate(root)
        logger.debug(f"Tree: {root!r}")
        return root

    @staticmethod
    def _insert(root: Node, node: Node) -> bool:
        """
        Insert as the new first child of the deepest node on the first-child
        chain that still has a free slot.

        Tokens arrive in reverse source order, so filling slots from the
        front while preferring the deepest open node rebuilds the nesting.
        """
        chain = [root]
        while chain[-1].children:
            chain.append(chain[-1].children[0])

        for candidate in reversed(chain):
            if len(candidate.children) < candidate.arity:
                candidate.children.insert(0, node)
                return True
        return False

    def _validate(self, root: Node):
        """Every node must be full, and the tree no deeper than allowed"""
        stack = [(root, 1)]
        while stack:
            node, depth = stack.pop()
            if self.max_depth is not None and depth > self.max_depth:
                raise NestingDepthError(f"Expression nests deeper than {self.max_depth} levels")
            if len(node.children) != node.arity:
                raise TreeError("Invalid expression")
            stack.extend((child, depth + 1) for child in node.children)
