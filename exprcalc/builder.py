"""
Single entry point chaining tokenizer, parser and tree builder.
"""

import copy
import logging
from typing import Any, List, Optional

from exprcalc.cache import ExpressionCache
from exprcalc.config import ExpressionConfig
from exprcalc.dictionary import Dictionary
from exprcalc.expression import Expression
from exprcalc.parser import Parser
from exprcalc.tokenizer import Tokenizer
from exprcalc.tokens import Token
from exprcalc.tree import TreeBuilder

logger = logging.getLogger(__name__)


class Builder:
    """
    Builds expressions over one operand type.

    The dictionary is read on every build; mutate it only between builds.
    Use copy() to derive a builder whose vocabulary can change independently.
    """

    def __init__(self, config: ExpressionConfig, dictionary: Optional[Dictionary] = None, cache_size: int = 0):
        self._config = config
        self._dictionary = dictionary if dictionary is not None else Dictionary()
        self._cache = ExpressionCache(cache_size) if cache_size else None
        self._cache_version = self._dictionary.version
        self._tokenizer: Optional[Tokenizer] = None
        self._tokenizer_version = -1

    @property
    def config(self) -> ExpressionConfig:
        return self._config

    @property
    def dictionary(self) -> Dictionary:
        return self._dictionary

    @property
    def cache(self) -> Optional[ExpressionCache]:
        return self._cache

    def copy(self) -> "Builder":
        """Builder with the same configuration and a private copy of the dictionary"""
        other = copy.copy(self)
        other._dictionary = self._dictionary.copy()
        other._cache = ExpressionCache(self._cache.max_size) if self._cache else None
        other._cache_version = other._dictionary.version
        other._tokenizer = None
        other._tokenizer_version = -1
        return other

    def tokenize(self, expression: str) -> List[Token]:
        """Tokens of an expression, implicit multiplications included"""
        version = self._dictionary.version
        if self._tokenizer is None or self._tokenizer_version != version:
            self._tokenizer = Tokenizer(self._dictionary, self._config)
            self._tokenizer_version = version
        return self._tokenizer.tokenize(expression)

    def postfix(self, expression: str) -> List[Token]:
        """Tokens of an expression in postfix (RPN) order"""
        return Parser(self._config.max_depth).parse(self.tokenize(expression))

    def build(self, expression: str) -> Expression:
        """Parse an expression string into an evaluable expression"""
        version = self._dictionary.version
        if self._cache is not None:
            if version != self._cache_version:
                self._cache.discard_stale(version)
                self._cache_version = version
            cached = self._cache.get(expression, version)
            if cached is not None:
                logger.debug(f"Expression cache hit for {expression!r}")
                return cached

        postfix = self.postfix(expression)
        root = TreeBuilder(self._config.max_depth).build(postfix)
        built = Expression(root, self._dictionary.constants, self._config.operand_to_string)

        if self._cache is not None:
            self._cache.set(expression, version, built)

        logger.debug(f"Built {expression!r} as {built}")
        return built

    def evaluate(self, expression: str, bindings: Optional[dict] = None) -> Any:
        """Build and evaluate in one step"""
        return self.build(expression).evaluate(bindings)
