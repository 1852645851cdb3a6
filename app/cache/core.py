"""
Core cache data structures.
"""
from dataclasses import dataclass
from typing import Any, Tuple

from app.utils.helpers import safe_lower

# (nickname, game)
CacheKey = Tuple[str, str]


def make_cache_key(nickname: str, game: str) -> CacheKey:
    """Build the cache key for a profile lookup. Game is case-insensitive."""
    return (nickname, safe_lower(game))


@dataclass
class CacheEntry:
    """
    A cached value with its absolute expiry timestamp.

    Timestamps come from the owning cache's clock, so they are only
    comparable with that clock's readings.
    """
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """Entry is usable up to and including its expiry instant."""
        return now > self.expires_at

    def remaining_seconds(self, now: float) -> float:
        return max(0.0, self.expires_at - now)
