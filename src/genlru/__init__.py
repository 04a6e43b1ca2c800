"""
genlru - bounded in-process cache with approximate LRU eviction.

Main components:
- SegmentedLRU: two-generation cache with lazy expiry and live resizing
- CacheOptions: validated construction options (mapping / environment)
- InvalidConfigurationError: raised for bad sizes, ages or callbacks
"""

from .cache import Entry, SegmentedLRU
from .clock import monotonic_ms
from .config import CacheOptions
from .errors import GenLRUError, InvalidConfigurationError

__version__ = "0.1.0"

__all__ = [
    # Cache
    "Entry",
    "SegmentedLRU",
    # Config
    "CacheOptions",
    "monotonic_ms",
    # Errors
    "GenLRUError",
    "InvalidConfigurationError",
]
