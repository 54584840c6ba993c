"""
Memory Store Adapter

Implements CacheStore port with an in-process dict (the fast tier).
"""
import copy
import threading
from typing import Optional

from ..core.domain import CacheEntry
from ..core.ports import CacheStore


class MemoryStore(CacheStore):
    """In-memory cache tier"""

    def __init__(self):
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def load(self, key: str) -> Optional[CacheEntry]:
        """Return an independent copy of the entry"""
        with self._lock:
            entry = self._entries.get(key)
        return copy.deepcopy(entry) if entry is not None else None

    def save(self, key: str, entry: CacheEntry) -> None:
        entry = copy.deepcopy(entry)
        with self._lock:
            self._entries[key] = entry

    def remove(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
