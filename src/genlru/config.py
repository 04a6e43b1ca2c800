"""Configuration helpers for building caches.

Provides small helpers to read typed environment variables and the
CacheOptions record accepted by SegmentedLRU.from_options (max_size,
max_age_ms, on_eviction).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from genlru.errors import InvalidConfigurationError
from genlru.inputs import normalize_max_age, normalize_max_size, normalize_on_eviction
from genlru.interfaces import EvictionCallback


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


# Option names accepted by from_mapping, including the camelCase spellings.
_OPTION_ALIASES = {
    "max_size": "max_size",
    "maxSize": "max_size",
    "max_age_ms": "max_age_ms",
    "maxAge": "max_age_ms",
    "on_eviction": "on_eviction",
    "onEviction": "on_eviction",
}


@dataclass(frozen=True)
class CacheOptions:
    """Construction options for a SegmentedLRU.

    Fields:
    - max_size: capacity, a positive integer (required)
    - max_age_ms: default entry lifetime in milliseconds; None never expires
    - on_eviction: callback(key, value) for implicit removals
    """

    max_size: int
    max_age_ms: Optional[float] = None
    on_eviction: Optional[EvictionCallback] = None

    def validated(self) -> "CacheOptions":
        return replace(
            self,
            max_size=normalize_max_size(self.max_size),
            max_age_ms=normalize_max_age(self.max_age_ms),
            on_eviction=normalize_on_eviction(self.on_eviction),
        )

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "CacheOptions":
        fields: dict[str, Any] = {}
        for name, value in options.items():
            field_name = _OPTION_ALIASES.get(name)
            if field_name is None:
                raise InvalidConfigurationError(f"Unknown cache option: {name!r}")
            fields[field_name] = value
        if "max_size" not in fields:
            raise InvalidConfigurationError("max_size must be an integer greater than 0")
        return cls(**fields).validated()

    @classmethod
    def from_env(
        cls,
        prefix: str = "GENLRU_",
        *,
        max_size: Optional[int] = None,
        on_eviction: Optional[EvictionCallback] = None,
    ) -> "CacheOptions":
        """Read <prefix>MAX_SIZE and <prefix>MAX_AGE_MS, falling back to max_size."""
        return cls(
            max_size=_env_int(f"{prefix}MAX_SIZE", max_size),
            max_age_ms=_env_float(f"{prefix}MAX_AGE_MS", None),
            on_eviction=on_eviction,
        ).validated()
