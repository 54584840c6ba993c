"""
Filesystem Cache Adapter

Implements CacheStore port using local filesystem (the durable tier).

One JSON file per key, namespaced so the cache directory can be shared:

    <cache_dir>/seraphim_cache_brand_xiaomi.json
    {"data": [...], "timestamp": 1718000000000, "expiresAt": 1718086400000,
     "kind": "models", "version": 1}
"""
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional
from urllib.parse import quote, unquote

from ..core.domain import CacheEntry
from ..core.errors import StorageUnavailableError
from ..core.ports import CacheStore

logger = logging.getLogger(__name__)

NAMESPACE = "seraphim_cache_"
RECORD_VERSION = 1
_SUFFIX = ".json"


def encode_entry(entry: CacheEntry) -> str:
    return json.dumps({
        "data": entry.payload,
        "timestamp": entry.created_at,
        "expiresAt": entry.expires_at,
        "kind": entry.kind,
        "version": RECORD_VERSION,
    }, ensure_ascii=False)


def decode_entry(text: str) -> Optional[CacheEntry]:
    """Parse a stored record; unknown versions and damaged records are None"""
    try:
        record = json.loads(text)
        if record.get("version", RECORD_VERSION) != RECORD_VERSION:
            return None
        return CacheEntry(
            payload=record["data"],
            created_at=int(record["timestamp"]),
            expires_at=int(record["expiresAt"]),
            kind=record.get("kind"),
        )
    except (ValueError, KeyError, TypeError, AttributeError):
        return None


class FilesystemStore(CacheStore):
    """Filesystem-based cache tier"""

    def __init__(self, cache_dir: str | Path, max_bytes: Optional[int] = None):
        self.cache_dir = Path(cache_dir)
        self.max_bytes = max_bytes
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _ensure_dir(self) -> Path:
        """Ensure cache directory exists"""
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        return self.cache_dir

    def _get_path(self, key: str) -> Path:
        """Get path for cached key"""
        return self.cache_dir / f"{NAMESPACE}{quote(key, safe='')}{_SUFFIX}"

    def _key_lock(self, key: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(key, threading.Lock())

    def _namespaced_files(self) -> list[Path]:
        if not self.cache_dir.exists():
            return []
        return [
            p for p in self.cache_dir.iterdir()
            if p.is_file() and p.name.startswith(NAMESPACE) and p.name.endswith(_SUFFIX)
        ]

    def load(self, key: str) -> Optional[CacheEntry]:
        path = self._get_path(key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageUnavailableError(f"Cannot read {path.name}: {e}") from e

        entry = decode_entry(text)
        if entry is None:
            logger.debug(f"Ignoring unreadable cache record {path.name}")
        return entry

    def save(self, key: str, entry: CacheEntry) -> None:
        try:
            body = encode_entry(entry)
        except (TypeError, ValueError) as e:
            raise StorageUnavailableError(f"Payload for {key} is not serializable: {e}") from e

        path = self._get_path(key)
        with self._key_lock(key):
            if self.max_bytes is not None:
                current = self.usage_bytes()
                if path.exists():
                    current -= path.stat().st_size
                if current + len(body.encode("utf-8")) > self.max_bytes:
                    raise StorageUnavailableError(
                        f"Quota exceeded: {self.max_bytes} bytes"
                    )

            directory = self._ensure_dir()
            # Write to a temp file and rename so readers never see partial records
            fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".tmp_", suffix=_SUFFIX)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(body)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise

    def remove(self, key: str) -> None:
        with self._key_lock(key):
            self._get_path(key).unlink(missing_ok=True)

    def clear(self) -> None:
        for path in self._namespaced_files():
            path.unlink(missing_ok=True)

    def keys(self) -> list[str]:
        return sorted(
            unquote(p.name[len(NAMESPACE):-len(_SUFFIX)])
            for p in self._namespaced_files()
        )

    def usage_bytes(self) -> int:
        """Get total disk usage in bytes"""
        total = 0
        for path in self._namespaced_files():
            try:
                total += path.stat().st_size
            except FileNotFoundError:
                continue
        return total
