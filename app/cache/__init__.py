"""
Response caching with lazy expiry and background refresh.
"""
from .core import CacheEntry, CacheKey, make_cache_key
from .manager import ResponseCache

__all__ = [
    # Core types
    "CacheEntry",
    "CacheKey",
    "make_cache_key",
    # Cache
    "ResponseCache",
]
