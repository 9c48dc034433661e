"""Bounded least-recently-used cache for lookup results.

Entries live in a fixed arena of slots linked by integer indices into a
recency list (head is least recently used, tail most recently used). A
free list recycles slots, so the arena never grows past the capacity and
the structure holds no reference cycles.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Hashable, Iterator
from typing import Any

from wordnet_ris.exceptions import ConfigurationError
from wordnet_ris.models import CacheStats

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 1000

_NIL = -1


class _Slot:
    __slots__ = ("key", "value", "prev", "next")

    def __init__(self) -> None:
        self.key: Hashable = None
        self.value: Any = None
        self.prev = _NIL
        self.next = _NIL


class LRUCache:
    """Fixed-capacity LRU mapping, safe to share between threads."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise ConfigurationError(
                f"Cache capacity must be a positive integer, got {capacity!r}"
            )
        self._capacity = capacity
        self._lock = threading.Lock()
        self._slots: list[_Slot] = []
        self._index: dict[Hashable, int] = {}
        self._free: list[int] = []
        self._head = _NIL
        self._tail = _NIL
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._index)

    def __contains__(self, key: Hashable) -> bool:
        # membership does not count as a use
        with self._lock:
            return key in self._index

    def keys(self) -> list[Hashable]:
        """Cached keys from least to most recently used."""
        with self._lock:
            return [self._slots[i].key for i in self._walk()]

    def get(self, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            pos = self._index.get(key)
            if pos is None:
                self._misses += 1
                return default
            self._hits += 1
            self._move_to_tail(pos)
            return self._slots[pos].value

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            pos = self._index.get(key)
            if pos is not None:
                self._slots[pos].value = value
                self._move_to_tail(pos)
                return
            if len(self._index) >= self._capacity:
                self._evict()
            pos = self._allocate()
            slot = self._slots[pos]
            slot.key = key
            slot.value = value
            self._index[key] = pos
            self._append(pos)

    def clear(self) -> None:
        with self._lock:
            self._slots.clear()
            self._index.clear()
            self._free.clear()
            self._head = self._tail = _NIL

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                capacity=self._capacity,
                size=len(self._index),
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
            )

    # ------------------------------------------------------------------
    # Recency list (caller holds the lock)
    # ------------------------------------------------------------------

    def _walk(self) -> Iterator[int]:
        pos = self._head
        while pos != _NIL:
            yield pos
            pos = self._slots[pos].next

    def _allocate(self) -> int:
        if self._free:
            return self._free.pop()
        self._slots.append(_Slot())
        return len(self._slots) - 1

    def _append(self, pos: int) -> None:
        slot = self._slots[pos]
        slot.prev = self._tail
        slot.next = _NIL
        if self._tail != _NIL:
            self._slots[self._tail].next = pos
        else:
            self._head = pos
        self._tail = pos

    def _unlink(self, pos: int) -> None:
        slot = self._slots[pos]
        if slot.prev != _NIL:
            self._slots[slot.prev].next = slot.next
        else:
            self._head = slot.next
        if slot.next != _NIL:
            self._slots[slot.next].prev = slot.prev
        else:
            self._tail = slot.prev
        slot.prev = slot.next = _NIL

    def _move_to_tail(self, pos: int) -> None:
        if pos != self._tail:
            self._unlink(pos)
            self._append(pos)

    def _evict(self) -> None:
        pos = self._head
        slot = self._slots[pos]
        self._unlink(pos)
        del self._index[slot.key]
        logger.debug(f"Evicted {slot.key!r} from lookup cache")
        slot.key = slot.value = None
        self._free.append(pos)
        self._evictions += 1
