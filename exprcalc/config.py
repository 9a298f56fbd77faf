"""Builder configuration: operand conversion callbacks and lexical patterns"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from exprcalc.errors import ConfigError

# Scientific notation first so "1e-3" is not read as "1" followed by "e"
DEFAULT_OPERAND_PATTERNS = (
    r"\d+(?:\.\d+)?[eE][-+]?\d+",
    r"\d*\.?\d+",
)

DEFAULT_VARIABLE_PATTERN = r"[a-zA-Z]+[0-9]*[a-zA-Z]*"

DEFAULT_MAX_DEPTH = 128


@dataclass(frozen=True)
class ExpressionConfig:
    """How operands are read and printed, and how deep expressions may nest"""
    string_to_operand: Callable[[str], Any]
    operand_to_string: Callable[[Any], str] = str
    operand_patterns: Tuple[str, ...] = DEFAULT_OPERAND_PATTERNS
    variable_pattern: str = DEFAULT_VARIABLE_PATTERN
    max_depth: Optional[int] = DEFAULT_MAX_DEPTH

    def __post_init__(self):
        if not callable(self.string_to_operand) or not callable(self.operand_to_string):
            raise ConfigError("Operand conversion callbacks must be callable")

        if isinstance(self.operand_patterns, str):
            raise ConfigError("Operand patterns must be a sequence of patterns, not a string")
        object.__setattr__(self, "operand_patterns", tuple(self.operand_patterns))

        if not self.operand_patterns:
            raise ConfigError("At least one operand pattern is required")

        for pattern in (*self.operand_patterns, self.variable_pattern):
            try:
                compiled = re.compile(pattern)
            except re.error as e:
                raise ConfigError(f"Invalid pattern {pattern!r}: {e}") from e
            if compiled.match(""):
                raise ConfigError(f"Pattern {pattern!r} matches the empty string")

        if self.max_depth is not None and (isinstance(self.max_depth, bool) or
                                           not isinstance(self.max_depth, int) or self.max_depth < 1):
            raise ConfigError(f"Invalid maximum depth: {self.max_depth!r}")
