"""
Core - Domain logic and ports

This package contains:
- domain.py: Pure domain models
- ports.py: Port interfaces (abstractions for external dependencies)
- names.py, parser.py, search.py: Pure catalog logic
- cache.py: Tiered cache over two CacheStore tiers
- services.py: Application services (use cases)
"""
from .domain import (
    RawEntry,
    BrandIdentity,
    ModelVariant,
    ModelRecord,
    Brand,
    ModelHit,
    GlobalSearchResult,
    CacheEntry,
    CacheInfo,
    BrandModels,
)
from .errors import SeraphimError, NotFoundError, UpstreamUnavailableError, StorageUnavailableError
from .ports import CatalogFetcher, CacheStore
from .cache import TieredCache, BestEffortWrites, StrictWrites
from .services import (
    ListBrandsService,
    BrandModelsService,
    LoadCatalogService,
    SearchCatalogService,
    RefreshCatalogService,
    CacheStatusService,
)

__all__ = [
    # Domain models
    "RawEntry",
    "BrandIdentity",
    "ModelVariant",
    "ModelRecord",
    "Brand",
    "ModelHit",
    "GlobalSearchResult",
    "CacheEntry",
    "CacheInfo",
    "BrandModels",
    # Errors
    "SeraphimError",
    "NotFoundError",
    "UpstreamUnavailableError",
    "StorageUnavailableError",
    # Ports
    "CatalogFetcher",
    "CacheStore",
    # Cache
    "TieredCache",
    "BestEffortWrites",
    "StrictWrites",
    # Services
    "ListBrandsService",
    "BrandModelsService",
    "LoadCatalogService",
    "SearchCatalogService",
    "RefreshCatalogService",
    "CacheStatusService",
]
