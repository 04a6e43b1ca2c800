"""Core protocol definitions.

Describes the two collaborators the cache depends on but does not own:
the millisecond clock and the eviction callback.
"""

from __future__ import annotations

from typing import Any, Protocol


class Clock(Protocol):
    """Contract for a monotonic time source returning milliseconds."""
    def __call__(self) -> float:
        ...


class EvictionCallback(Protocol):
    """Contract for the hook called when an entry leaves the cache implicitly."""
    def __call__(self, key: Any, value: Any) -> None:
        ...
