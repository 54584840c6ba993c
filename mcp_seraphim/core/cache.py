"""
Tiered Cache

Key/value cache with per-entry expiry. A fast tier (in-memory) is backed
by a durable tier (on disk); the durable tier is best-effort and its
failures degrade the cache to memory-only instead of reaching callers.

One TieredCache is created by the Container and shared by every service.
"""
import logging
import time
from typing import Any, Callable, Optional

from .domain import CacheEntry, CacheInfo
from .errors import StorageUnavailableError
from .ports import CacheStore

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60

# Key conventions shared with stored data; renaming needs a migration
BRANDS_LIST_KEY = "brands_list"
ALL_BRANDS_METADATA_KEY = "all_brands_metadata"
ALL_MODELS_GLOBAL_KEY = "all_models_global_data"
BRAND_KEY_PREFIX = "brand_"


def brand_key(slug: str) -> str:
    return f"{BRAND_KEY_PREFIX}{slug}"


class DurabilityPolicy:
    """How durable-tier operations are attempted"""

    def attempt(self, operation: str, key: Optional[str], action: Callable[[], Any], default: Any = None) -> Any:
        return action()


class StrictWrites(DurabilityPolicy):
    """Durable-tier errors propagate to the caller"""


class BestEffortWrites(DurabilityPolicy):
    """Durable-tier errors are logged and the operation continues in memory"""

    def attempt(self, operation: str, key: Optional[str], action: Callable[[], Any], default: Any = None) -> Any:
        try:
            return action()
        except (StorageUnavailableError, OSError) as e:
            target = f" {key}" if key else ""
            logger.warning(f"Durable cache {operation}{target} failed: {e}")
            return default


class TieredCache:
    """Memory tier in front of a durable tier, with expiry"""

    def __init__(
        self,
        fast: CacheStore,
        durable: CacheStore,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        policy: Optional[DurabilityPolicy] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.fast = fast
        self.durable = durable
        self.default_ttl = default_ttl
        self.policy = policy or BestEffortWrites()
        self.clock = clock

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def _ttl_ms(self, ttl: Optional[float]) -> int:
        # Missing, zero or negative ttl all fall back to the default
        if ttl is None or ttl <= 0:
            if ttl is not None:
                logger.debug(f"Ignoring non-positive ttl {ttl}, using {self.default_ttl}s")
            ttl = self.default_ttl
        return int(ttl * 1000)

    def set(self, key: str, value: Any, ttl: Optional[float] = None, kind: Optional[str] = None) -> None:
        """Store value in both tiers (durable write is best-effort)"""
        now = self._now_ms()
        entry = CacheEntry(
            payload=value,
            created_at=now,
            expires_at=now + self._ttl_ms(ttl),
            kind=kind,
        )

        self.fast.save(key, entry)
        self.policy.attempt("write", key, lambda: self.durable.save(key, entry))
        self._log_usage()

    def force_set(self, key: str, value: Any, ttl: Optional[float] = None, kind: Optional[str] = None) -> None:
        """Overwrite key regardless of what is cached"""
        logger.info(f"Force updating cache for: {key}")
        self.set(key, value, ttl=ttl, kind=kind)

    def _lookup(self, key: str) -> Optional[CacheEntry]:
        """Fast tier, then durable tier (hydrating the fast tier on a hit)"""
        entry = self.fast.load(key)
        if entry is not None:
            return entry

        entry = self.policy.attempt("read", key, lambda: self.durable.load(key))
        if entry is not None:
            logger.debug(f"Hydrated {key} from durable cache")
            self.fast.save(key, entry)
        return entry

    @staticmethod
    def _kind_matches(entry: CacheEntry, kind: Optional[str]) -> bool:
        if kind is None or entry.kind == kind:
            return True
        logger.debug(f"Cache kind mismatch: expected {kind}, found {entry.kind}")
        return False

    def get(self, key: str, kind: Optional[str] = None) -> Any:
        """Return a fresh payload, or None. Expired entries are evicted."""
        entry = self._lookup(key)
        if entry is None:
            logger.debug(f"Cache miss: {key}")
            return None

        if entry.is_expired(self._now_ms()):
            logger.debug(f"Cache expired: {key}")
            self.delete(key)
            return None

        if not self._kind_matches(entry, kind):
            return None
        return entry.payload

    def get_stale(self, key: str, kind: Optional[str] = None) -> Any:
        """Return the payload even if expired (instant search), or None"""
        entry = self._lookup(key)
        if entry is None or not self._kind_matches(entry, kind):
            return None
        return entry.payload

    def has_stale(self, key: str) -> bool:
        return self.get_stale(key) is not None

    def delete(self, key: str) -> None:
        self.fast.remove(key)
        self.policy.attempt("delete", key, lambda: self.durable.remove(key))
        self._log_usage()

    def clear(self) -> None:
        self.fast.clear()
        self.policy.attempt("clear", None, self.durable.clear)
        self._log_usage()

    def info(self, key: str) -> CacheInfo:
        """Age and remaining lifetime of key. Never evicts or hydrates."""
        entry = self.fast.load(key)
        if entry is None:
            entry = self.policy.attempt("read", key, lambda: self.durable.load(key))
        if entry is None:
            return CacheInfo(exists=False)

        now = self._now_ms()
        return CacheInfo(
            exists=True,
            age_ms=now - entry.created_at,
            expires_in_ms=entry.expires_at - now,
        )

    def list_keys_with_prefix(self, prefix: str) -> list[str]:
        """Key suffixes after prefix, across both tiers, de-duplicated"""
        suffixes = []
        seen = set()

        durable_keys = self.policy.attempt("list", None, self.durable.keys, default=[])
        for key in list(self.fast.keys()) + list(durable_keys):
            if key.startswith(prefix) and key not in seen:
                seen.add(key)
                suffixes.append(key[len(prefix):])
        return suffixes

    def cached_brand_slugs(self) -> list[str]:
        return self.list_keys_with_prefix(BRAND_KEY_PREFIX)

    def storage_usage(self) -> int:
        """Bytes held by the durable tier"""
        return self.policy.attempt("usage", None, self.durable.usage_bytes, default=0)

    def _log_usage(self) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        total = self.storage_usage()
        logger.debug(
            f"[TieredCache] Durable usage: {total / 1024:.2f} KB ({total / (1024 * 1024):.2f} MB)"
        )
