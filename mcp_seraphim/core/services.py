"""
Application Services - Use cases that orchestrate domain logic

These are the entry points to the core. They coordinate between
domain models and ports, but contain no infrastructure concerns.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, Optional

from .cache import (
    ALL_BRANDS_METADATA_KEY,
    ALL_MODELS_GLOBAL_KEY,
    BRANDS_LIST_KEY,
    TieredCache,
    brand_key,
)
from .domain import Brand, BrandModels, CacheInfo, GlobalSearchResult, ModelRecord
from .errors import NotFoundError
from .names import classify, classify_entries
from .parser import parse_document
from .ports import CatalogFetcher
from .search import global_search

logger = logging.getLogger(__name__)

# Payload type tags stored alongside cached data
KIND_LISTING = "listing"
KIND_BRANDS = "brands"
KIND_MODELS = "models"

ProgressCallback = Callable[[int, int], None]


def _decode_brands(payload) -> Optional[list[Brand]]:
    if payload is None:
        return None
    try:
        return [Brand.from_dict(b) for b in payload]
    except (KeyError, TypeError, AttributeError):
        logger.warning("Discarding malformed cached brand list")
        return None


def _decode_models(payload) -> Optional[list[ModelRecord]]:
    if payload is None:
        return None
    try:
        return [ModelRecord.from_dict(m) for m in payload]
    except (KeyError, TypeError, AttributeError):
        logger.warning("Discarding malformed cached model list")
        return None


class ListBrandsService:
    """Use case: List brands from the catalog directory"""

    def __init__(self, cache: TieredCache, fetcher: CatalogFetcher):
        self.cache = cache
        self.fetcher = fetcher

    def execute(self, force_refetch: bool = False) -> list[Brand]:
        """
        Brands sorted by display name, without models.

        Served from the metadata cache while fresh.
        """
        if not force_refetch:
            cached = _decode_brands(self.cache.get(ALL_BRANDS_METADATA_KEY, kind=KIND_BRANDS))
            if cached is not None:
                return cached

        entries = self.fetcher.list_entries()
        if not entries:
            raise NotFoundError("No brand files found in the repository")

        brands = classify_entries(entries)
        self.cache.set(BRANDS_LIST_KEY, [e.filename for e in entries], kind=KIND_LISTING)
        self.cache.set(ALL_BRANDS_METADATA_KEY, [b.to_dict() for b in brands], kind=KIND_BRANDS)
        return brands


class BrandModelsService:
    """Use case: Models of a single brand (stale-first, then fresh)"""

    def __init__(self, cache: TieredCache, fetcher: CatalogFetcher, list_brands: ListBrandsService):
        self.cache = cache
        self.fetcher = fetcher
        self.list_brands = list_brands

    def resolve(self, slug: str) -> Brand:
        """Find the brand for slug in the directory listing"""
        for brand in self.list_brands.execute():
            if brand.slug == slug:
                return brand
        raise NotFoundError(f'Brand "{slug}" not found')

    def peek(self, slug: str) -> Optional[BrandModels]:
        """Cached models even if expired, without touching the network"""
        models = _decode_models(self.cache.get_stale(brand_key(slug), kind=KIND_MODELS))
        if models is None:
            return None

        identity = classify(f"{slug}.md")
        brand = Brand(identity.display_name, identity.slug, f"{slug}.md", tuple(models))
        return BrandModels(
            brand=brand,
            models=models,
            from_cache=True,
            info=self.cache.info(brand_key(slug)),
        )

    def refresh(self, slug: str) -> BrandModels:
        """Always fetch, parse and overwrite the brand cache"""
        brand = self.resolve(slug)
        content = self.fetcher.fetch_document(brand.filename)
        models = parse_document(content)
        logger.info(f"Parsed {len(models)} models for {brand.name}")

        self.cache.force_set(brand_key(slug), [m.to_dict() for m in models], kind=KIND_MODELS)
        return BrandModels(
            brand=brand.with_models(models),
            models=models,
            from_cache=False,
            info=self.cache.info(brand_key(slug)),
        )

    def execute(self, slug: str, prefer_cache: bool = False) -> BrandModels:
        """
        Get models for a brand.

        With prefer_cache, a fresh cached copy is returned without fetching.
        Otherwise fresh data is always fetched (the brand page behaviour).
        """
        if prefer_cache:
            models = _decode_models(self.cache.get(brand_key(slug), kind=KIND_MODELS))
            if models is not None:
                brand = self.resolve(slug)
                return BrandModels(
                    brand=brand.with_models(models),
                    models=models,
                    from_cache=True,
                    info=self.cache.info(brand_key(slug)),
                )
        return self.refresh(slug)


class LoadCatalogService:
    """Use case: Load every brand with its models (global dataset)"""

    def __init__(
        self,
        cache: TieredCache,
        fetcher: CatalogFetcher,
        list_brands: ListBrandsService,
        max_workers: int = 8
    ):
        self.cache = cache
        self.fetcher = fetcher
        self.list_brands = list_brands
        self.max_workers = max_workers

    def _load_brand(self, brand: Brand) -> list[ModelRecord]:
        return parse_document(self.fetcher.fetch_document(brand.filename))

    def execute(
        self,
        force_refetch: bool = False,
        progress: Optional[ProgressCallback] = None
    ) -> tuple[list[Brand], bool]:
        """
        Load all brands and models.

        Brands are fetched concurrently; a brand that fails to load keeps
        an empty model list and the rest still complete.

        Returns:
            (brands, from_cache)
        """
        if not force_refetch:
            cached = _decode_brands(self.cache.get(ALL_MODELS_GLOBAL_KEY, kind=KIND_BRANDS))
            if cached is not None:
                logger.info("Loading all data (brands and models) from global cache")
                return cached, True

        brands = self.list_brands.execute(force_refetch=force_refetch)
        total = len(brands)
        logger.info(f"Fetching models for {total} brands")

        results: dict[str, Brand] = {}
        loaded = 0
        with ThreadPoolExecutor(max_workers=max(1, self.max_workers)) as executor:
            futures = {executor.submit(self._load_brand, brand): brand for brand in brands}
            for future in as_completed(futures):
                brand = futures[future]
                try:
                    models = future.result()
                    self.cache.set(brand_key(brand.slug), [m.to_dict() for m in models], kind=KIND_MODELS)
                    results[brand.slug] = brand.with_models(models)
                except Exception as e:
                    logger.error(f"Failed to load models for {brand.name}: {e}")
                    results[brand.slug] = brand.with_models(())
                finally:
                    loaded += 1
                    if progress:
                        progress(loaded, total)

        completed = [results.get(b.slug, b) for b in brands]
        self.cache.set(ALL_MODELS_GLOBAL_KEY, [b.to_dict() for b in completed], kind=KIND_BRANDS)
        logger.info("All global data cached.")
        return completed, False


class SearchCatalogService:
    """Use case: Instant global search over cached data"""

    def __init__(self, cache: TieredCache):
        self.cache = cache

    def _cached_brands(self) -> tuple[list[Brand], str]:
        """Best available dataset and where it came from"""
        # get() would evict an expired dataset; read stale and check age instead
        cached = _decode_brands(self.cache.get_stale(ALL_MODELS_GLOBAL_KEY, kind=KIND_BRANDS))
        if cached is not None:
            info = self.cache.info(ALL_MODELS_GLOBAL_KEY)
            return cached, ("fresh" if info.expires_in_ms >= 0 else "stale")

        # Assemble from whatever brand caches survive
        brands = _decode_brands(self.cache.get_stale(ALL_BRANDS_METADATA_KEY, kind=KIND_BRANDS)) or []
        by_slug = {b.slug: b for b in brands}
        for slug in self.cache.cached_brand_slugs():
            if slug not in by_slug:
                identity = classify(f"{slug}.md")
                by_slug[slug] = Brand(identity.display_name, slug, f"{slug}.md")

        assembled = []
        for brand in sorted(by_slug.values(), key=lambda b: (b.name.casefold(), b.slug)):
            models = _decode_models(self.cache.get_stale(brand_key(brand.slug), kind=KIND_MODELS))
            assembled.append(brand.with_models(models or ()))

        return assembled, ("partial" if assembled else "empty")

    def execute(self, query: str) -> tuple[GlobalSearchResult, str]:
        """
        Search models across cached brands, falling back to brand names.

        Returns:
            (result, source) where source is "fresh", "stale", "partial" or "empty"
        """
        brands, source = self._cached_brands()
        return global_search(brands, query), source


class RefreshCatalogService:
    """Use case: Drop catalog caches so the next load refetches"""

    def __init__(self, cache: TieredCache):
        self.cache = cache

    def execute(self, known_slugs: Iterable[str] = ()) -> list[str]:
        """Delete catalog keys, return the keys removed"""
        slugs = list(dict.fromkeys(list(self.cache.cached_brand_slugs()) + list(known_slugs)))
        keys = [ALL_BRANDS_METADATA_KEY, ALL_MODELS_GLOBAL_KEY, BRANDS_LIST_KEY]
        keys += [brand_key(slug) for slug in slugs]

        for key in keys:
            self.cache.delete(key)
        logger.info(f"Cleared {len(keys)} catalog cache keys")
        return keys


class CacheStatusService:
    """Use case: Cache introspection"""

    def __init__(self, cache: TieredCache):
        self.cache = cache

    def execute(self, key: str = ALL_MODELS_GLOBAL_KEY) -> tuple[CacheInfo, list[str], int]:
        """
        Returns:
            (info for key, cached brand slugs, durable usage in bytes)
        """
        return self.cache.info(key), self.cache.cached_brand_slugs(), self.cache.storage_usage()
