from __future__ import annotations


class GenLRUError(Exception):
    """Base error for the cache package."""


class InvalidConfigurationError(GenLRUError):
    """Raised when a cache size, age or callback is invalid."""
