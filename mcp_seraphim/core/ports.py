"""
Ports - Interfaces for external dependencies

These define HOW the core interacts with the outside world,
but NOT the implementation details.
"""
from abc import ABC, abstractmethod
from typing import Optional

from .domain import CacheEntry, RawEntry


class CatalogFetcher(ABC):
    """Port for fetching the upstream brand catalog"""

    @abstractmethod
    def list_entries(self) -> list[RawEntry]:
        """List catalog documents (only names with the document extension)"""
        pass

    @abstractmethod
    def fetch_document(self, name: str) -> str:
        """Download raw document text.

        Raises NotFoundError if the document is absent,
        UpstreamUnavailableError on any other failure.
        """
        pass


class CacheStore(ABC):
    """Port for one cache tier (storage capability)"""

    @abstractmethod
    def load(self, key: str) -> Optional[CacheEntry]:
        """Return the stored entry, or None"""
        pass

    @abstractmethod
    def save(self, key: str, entry: CacheEntry) -> None:
        """Store entry under key, replacing any existing one"""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove entry if present"""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry owned by this store"""
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List stored keys"""
        pass

    def usage_bytes(self) -> int:
        """Approximate bytes held by this store"""
        return 0
