"""Approximate LRU cache built from two generations of plain dicts.

New writes land in the "recent" generation. Once recent has taken
max_size writes it becomes the "retiring" generation and whatever was
retiring before is evicted wholesale. Reading a key that only lives in
retiring promotes it back into recent, so an entry survives as long as
it is touched at least once per rotation window.

Expiry is lazy: an entry past its deadline is removed (and reported to
on_eviction) the next time any read path touches it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import (
    Any,
    Dict,
    Generic,
    Hashable,
    Iterable,
    Iterator,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from genlru.clock import monotonic_ms
from genlru.config import CacheOptions
from genlru.inputs import (
    normalize_max_age,
    normalize_max_size,
    normalize_on_eviction,
    resolve_ttl,
)
from genlru.interfaces import Clock, EvictionCallback

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(slots=True)
class Entry(Generic[V]):
    # Stores value + absolute expiry in clock milliseconds (None = never)
    value: V
    expiry: Optional[float] = None


class SegmentedLRU(Generic[K, V]):
    """Bounded cache with approximate LRU eviction and optional expiry.

    Example:
        cache = SegmentedLRU(1000, max_age_ms=60_000)
        cache.set("a", 1).set("b", 2, max_age_ms=500)
        cache.get("a")  # 1
    """

    def __init__(
        self,
        max_size: int,
        *,
        max_age_ms: Optional[float] = None,
        on_eviction: Optional[EvictionCallback] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        Args:
            max_size: Capacity, a positive integer.
            max_age_ms: Default entry lifetime in milliseconds. None or
                math.inf means entries never expire unless set() says so.
            on_eviction: Called with (key, value) whenever an entry leaves
                the cache other than through delete() or clear().
            clock: Monotonic millisecond time source.

        Raises:
            InvalidConfigurationError: On a bad size, age or callback.
        """
        self._max_size = normalize_max_size(max_size)
        self._max_age_ms = normalize_max_age(max_age_ms)
        self._on_eviction = normalize_on_eviction(on_eviction)
        self._clock: Clock = clock if clock is not None else monotonic_ms

        self._recent: Dict[K, Entry[V]] = {}
        self._retiring: Dict[K, Entry[V]] = {}

        # Insertions into recent since the last rotation. Updates of keys
        # already in recent do not count.
        self._writes = 0

    @classmethod
    def from_options(
        cls,
        options: Union[CacheOptions, Mapping[str, Any]],
        *,
        clock: Optional[Clock] = None,
    ) -> "SegmentedLRU[K, V]":
        if not isinstance(options, CacheOptions):
            options = CacheOptions.from_mapping(options)
        return cls(
            options.max_size,
            max_age_ms=options.max_age_ms,
            on_eviction=options.on_eviction,
            clock=clock,
        )

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def max_age_ms(self) -> Optional[float]:
        return self._max_age_ms

    @property
    def size(self) -> int:
        """Number of distinct keys held, counting keys in both generations once."""
        if not self._writes:
            return len(self._retiring)

        unshadowed = sum(1 for key in self._retiring if key not in self._recent)
        # Clamp covers the overcount right at a rotation boundary.
        return min(self._writes + unshadowed, self._max_size)

    def __len__(self) -> int:
        return self.size

    def __contains__(self, key: object) -> bool:
        return self.has(key)

    def __iter__(self) -> Iterator[K]:
        return self.keys()

    def __repr__(self) -> str:
        return f"SegmentedLRU({self.size}/{self._max_size})"

    def _lookup(self, key: Any) -> Optional[Entry[V]]:
        # recent is authoritative when a key sits in both generations
        entry = self._recent.get(key)
        if entry is None:
            entry = self._retiring.get(key)
        return entry

    def _emit_evictions(self, items: Iterable[Tuple[K, Entry[V]]]) -> None:
        if self._on_eviction is None:
            return
        for key, entry in items:
            self._on_eviction(key, entry.value)

    def _delete_if_expired(self, key: K, entry: Entry[V]) -> bool:
        if entry.expiry is None or entry.expiry > self._clock():
            return False

        self.delete(key)
        if self._on_eviction is not None:
            self._on_eviction(key, entry.value)
        return True

    def _insert(self, key: K, entry: Entry[V]) -> None:
        self._recent[key] = entry
        self._writes += 1

        if self._writes >= self._max_size:
            self._rotate()

    def _rotate(self) -> None:
        evicted = self._retiring
        self._retiring = self._recent
        self._recent = {}
        self._writes = 0

        # Stale copies of keys rewritten since are reported too; they leave as well.
        if evicted:
            logger.debug("Rotated generations, evicting %d entries", len(evicted))
        self._emit_evictions(list(evicted.items()))

    def _is_live(self, key: K, entry: Entry[V]) -> bool:
        # Skips shadowed duplicates and entries removed since the snapshot.
        return self._lookup(key) is entry and not self._delete_if_expired(key, entry)

    def _entries_ascending(self) -> Iterator[Tuple[K, Entry[V]]]:
        for generation in (self._retiring, self._recent):
            for key, entry in list(generation.items()):
                if self._is_live(key, entry):
                    yield key, entry

    def _entries_descending(self) -> Iterator[Tuple[K, Entry[V]]]:
        for generation in (self._recent, self._retiring):
            for key, entry in reversed(list(generation.items())):
                if self._is_live(key, entry):
                    yield key, entry

    def set(self, key: K, value: V, *, max_age_ms: Optional[float] = None) -> "SegmentedLRU[K, V]":
        """Insert or update an entry and return the cache.

        max_age_ms overrides the cache-wide lifetime for this entry only;
        math.inf stores it without expiry. When the write triggers a
        rotation, on_eviction runs after the generations have been swapped
        and sees the post-rotation cache.
        """
        ttl = resolve_ttl(max_age_ms, self._max_age_ms)
        entry = Entry(value=value, expiry=None if ttl is None else self._clock() + ttl)

        if key in self._recent:
            self._recent[key] = entry
        else:
            self._insert(key, entry)
        return self

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """Return the value for key, marking it as recently used."""
        entry = self._recent.get(key)
        if entry is not None:
            if self._delete_if_expired(key, entry):
                return default
            return entry.value

        entry = self._retiring.get(key)
        if entry is None or self._delete_if_expired(key, entry):
            return default

        # Promotion keeps the original expiry.
        del self._retiring[key]
        self._insert(key, entry)
        return entry.value

    def has(self, key: Any) -> bool:
        entry = self._lookup(key)
        if entry is None:
            return False
        return not self._delete_if_expired(key, entry)

    def peek(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """Return the value for key without marking it as recently used."""
        entry = self._lookup(key)
        if entry is None or self._delete_if_expired(key, entry):
            return default
        return entry.value

    def expires_in(self, key: K) -> Optional[float]:
        """Milliseconds until key expires.

        Returns math.inf for entries without expiry and None for missing
        keys. The result may be negative for an expired entry that has not
        been removed yet; this call never removes anything.
        """
        entry = self._lookup(key)
        if entry is None:
            return None
        if entry.expiry is None:
            return float("inf")
        return entry.expiry - self._clock()

    def delete(self, key: K) -> bool:
        deleted = False
        if key in self._recent:
            del self._recent[key]
            self._writes -= 1
            deleted = True
        if key in self._retiring:
            del self._retiring[key]
            deleted = True
        return deleted

    def clear(self) -> None:
        self._recent.clear()
        self._retiring.clear()
        self._writes = 0

    def resize(self, new_max_size: int) -> None:
        """Change the capacity in place, evicting the oldest entries if needed.

        on_eviction is called for the dropped entries once the cache has
        already been rebuilt at the new size.
        """
        new_max_size = normalize_max_size(new_max_size)

        items = list(self._entries_ascending())
        excess = len(items) - new_max_size
        dropped: list[Tuple[K, Entry[V]]] = []

        if excess < 0:
            self._recent = dict(items)
            self._retiring = {}
            self._writes = len(items)
        else:
            # Survivors go to retiring so the next write rotates normally.
            dropped = items[:excess]
            self._retiring = dict(items[excess:])
            self._recent = {}
            self._writes = 0

        logger.debug(
            "Resized cache from %d to %d, evicting %d entries",
            self._max_size,
            new_max_size,
            len(dropped),
        )
        self._max_size = new_max_size
        self._emit_evictions(dropped)

    def keys(self) -> Iterator[K]:
        for key, _ in self._entries_ascending():
            yield key

    def values(self) -> Iterator[V]:
        for _, entry in self._entries_ascending():
            yield entry.value

    def items(self) -> Iterator[Tuple[K, V]]:
        return self.entries_ascending()

    def entries_ascending(self) -> Iterator[Tuple[K, V]]:
        """Live (key, value) pairs, oldest first."""
        for key, entry in self._entries_ascending():
            yield key, entry.value

    def entries_descending(self) -> Iterator[Tuple[K, V]]:
        """Live (key, value) pairs, newest first."""
        for key, entry in self._entries_descending():
            yield key, entry.value
