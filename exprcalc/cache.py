"""LRU cache of built expressions"""

import logging
from collections import OrderedDict
from typing import Dict, Hashable, Optional

from exprcalc.errors import ConfigError
from exprcalc.expression import Expression

logger = logging.getLogger(__name__)


class ExpressionCache:
    """
    LRU cache for built expressions.

    Keys carry the dictionary version, so an entry built before the
    dictionary changed is never returned afterwards.
    """

    def __init__(self, max_size: int = 128):
        if isinstance(max_size, bool) or not isinstance(max_size, int) or max_size < 1:
            raise ConfigError(f"Invalid cache size: {max_size!r}")

        self.cache: "OrderedDict[Hashable, Expression]" = OrderedDict()
        self.max_size = max_size
        self.hit_count = 0
        self.miss_count = 0

    def get(self, expression: str, version: int) -> Optional[Expression]:
        """Get a built expression if cached for this dictionary version"""
        key = (expression, version)
        if key in self.cache:
            # Move to end (most recently used)
            self.cache.move_to_end(key)
            self.hit_count += 1
            return self.cache[key]

        self.miss_count += 1
        return None

    def set(self, expression: str, version: int, built: Expression):
        """Add a built expression to the cache"""
        # Remove oldest if at capacity
        if len(self.cache) >= self.max_size:
            oldest, _ = self.cache.popitem(last=False)
            logger.debug(f"Evicted {oldest[0]!r} from expression cache")

        self.cache[(expression, version)] = built

    def discard_stale(self, version: int):
        """Remove entries built against other dictionary versions"""
        stale = [key for key in self.cache if key[1] != version]
        for key in stale:
            del self.cache[key]

    def clear(self):
        self.cache.clear()
        self.hit_count = 0
        self.miss_count = 0

    def get_stats(self) -> Dict:
        """Get cache statistics"""
        total_requests = self.hit_count + self.miss_count
        hit_rate = self.hit_count / total_requests if total_requests > 0 else 0

        return {
            'size': len(self.cache),
            'max_size': self.max_size,
            'hit_count': self.hit_count,
            'miss_count': self.miss_count,
            'hit_rate': hit_rate,
        }

    def __len__(self):
        return len(self.cache)
