from __future__ import annotations

import math
from typing import Any, Optional

from genlru.errors import InvalidConfigurationError


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def normalize_max_size(max_size: Any) -> int:
    if not isinstance(max_size, int) or isinstance(max_size, bool):
        raise InvalidConfigurationError("max_size must be an integer greater than 0")
    if max_size <= 0:
        raise InvalidConfigurationError("max_size must be an integer greater than 0")
    return max_size


def normalize_max_age(max_age_ms: Any) -> Optional[float]:
    # None and infinity both mean "never expire"; zero is always a mistake.
    if max_age_ms is None:
        return None
    if not _is_number(max_age_ms) or math.isnan(max_age_ms) or max_age_ms <= 0:
        raise InvalidConfigurationError("max_age_ms must be a number greater than 0")
    if math.isinf(max_age_ms):
        return None
    return max_age_ms


def normalize_on_eviction(on_eviction: Any) -> Any:
    if on_eviction is not None and not callable(on_eviction):
        raise InvalidConfigurationError("on_eviction must be callable")
    return on_eviction


def resolve_ttl(override: Any, default: Optional[float]) -> Optional[float]:
    """Pick the lifetime for one write.

    A numeric override above -inf wins over the cache-wide default.
    Returns None when the entry should never expire.
    """
    ttl = override if _is_number(override) and override > -math.inf else default
    if ttl is None or ttl == math.inf:
        return None
    return ttl
