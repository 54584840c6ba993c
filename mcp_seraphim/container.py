"""
Dependency Injection Container

Wires together the hexagonal architecture by creating and injecting dependencies.
The one shared TieredCache is created here and handed to every service.
"""
from typing import Optional

from .adapters import FilesystemStore, GitHubFetcher, MemoryStore
from .config import Settings
from .core import (
    TieredCache,
    CatalogFetcher,
    ListBrandsService,
    BrandModelsService,
    LoadCatalogService,
    SearchCatalogService,
    RefreshCatalogService,
    CacheStatusService,
)


class Container:
    """Dependency injection container for the application"""

    def __init__(self, settings: Settings, fetcher: Optional[CatalogFetcher] = None):
        self.settings = settings

        # Adapters (infrastructure)
        self.memory = MemoryStore()
        self.durable = FilesystemStore(settings.cache_dir)
        self.cache = TieredCache(
            fast=self.memory,
            durable=self.durable,
            default_ttl=settings.default_ttl
        )
        self.fetcher = fetcher or GitHubFetcher(
            repo=settings.repo,
            branch=settings.branch,
            brands_dir=settings.brands_dir,
            token=settings.github_token,
            require_token=settings.require_token,
            user_agent=settings.user_agent,
            timeout=settings.http_timeout
        )

        # Services (use cases)
        self.list_brands = ListBrandsService(
            cache=self.cache,
            fetcher=self.fetcher
        )

        self.brand_models = BrandModelsService(
            cache=self.cache,
            fetcher=self.fetcher,
            list_brands=self.list_brands
        )

        self.load_catalog = LoadCatalogService(
            cache=self.cache,
            fetcher=self.fetcher,
            list_brands=self.list_brands,
            max_workers=settings.max_workers
        )

        self.search_catalog = SearchCatalogService(cache=self.cache)
        self.refresh_catalog = RefreshCatalogService(cache=self.cache)
        self.cache_status = CacheStatusService(cache=self.cache)
