# This file marks pypopupanchor.utils as a Python package.

from .helpers import clamp, monotonic_millis
from .lru_cache import LRUCache, CacheStats
from .throttle import Throttle
from .log import configure_logging, to_logging_level

__all__ = [
    "clamp", "monotonic_millis",
    "LRUCache", "CacheStats",
    "Throttle",
    "configure_logging", "to_logging_level",
]
