"""
MCP Tool Handlers

Shared handlers for MCP tools that use the hexagonal core.
"""
import asyncio
from dataclasses import asdict
from typing import Any, Optional

from ...container import Container
from ...core.cache import ALL_MODELS_GLOBAL_KEY
from ...core.domain import Brand, CacheInfo, ModelRecord
from ...core.errors import NotFoundError, UpstreamUnavailableError
from ...core.search import filter_brands, filter_models


def _error(message: str, e: Exception) -> dict[str, Any]:
    if isinstance(e, NotFoundError):
        error_type = "not_found"
    elif isinstance(e, UpstreamUnavailableError):
        error_type = "upstream_unavailable"
    else:
        error_type = "internal"
    return {
        "success": False,
        "error": f"{message}: {str(e)}",
        "error_type": error_type
    }


def _info_dict(info: Optional[CacheInfo]) -> Optional[dict[str, Any]]:
    return asdict(info) if info is not None else None


def _model_dict(model: ModelRecord) -> dict[str, Any]:
    return {
        "main_model_name": model.main_model_name,
        "codename": model.codename,
        "series": model.series,
        "variants": [
            {"model_number": v.model_number, "variant_name": v.variant_name}
            for v in model.variants
        ]
    }


def _brand_dict(brand: Brand) -> dict[str, Any]:
    return {
        "name": brand.name,
        "slug": brand.slug,
        "filename": brand.filename,
        "model_count": len(brand.models)
    }


class MCPHandlers:
    """Handlers for MCP tools using dependency injection"""

    def __init__(self, container: Container):
        self.container = container

    async def list_brands(
        self,
        query: Optional[str] = None,
        force_refetch: bool = False
    ) -> dict[str, Any]:
        """List brands, optionally filtered by name/slug"""
        try:
            brands = await asyncio.to_thread(
                self.container.list_brands.execute,
                force_refetch=force_refetch
            )
            matching = filter_brands(brands, query or "")

            return {
                "success": True,
                "query": query or "",
                "brands": [_brand_dict(b) for b in matching],
                "count": len(matching),
                "total": len(brands)
            }

        except Exception as e:
            return _error("Failed to list brands", e)

    async def get_brand_models(
        self,
        slug: str,
        query: Optional[str] = None,
        cached_only: bool = False
    ) -> dict[str, Any]:
        """Models of one brand; cached_only serves a possibly stale copy"""
        try:
            if cached_only:
                result = await asyncio.to_thread(
                    self.container.brand_models.peek,
                    slug
                )
                if result is None:
                    raise NotFoundError(f'No cached models for "{slug}"')
            else:
                result = await asyncio.to_thread(
                    self.container.brand_models.execute,
                    slug
                )

            matching = filter_models(result.models, query or "")

            return {
                "success": True,
                "brand": _brand_dict(result.brand),
                "query": query or "",
                "models": [_model_dict(m) for m in matching],
                "count": len(matching),
                "total": len(result.models),
                "from_cache": result.from_cache,
                "cache_info": _info_dict(result.info)
            }

        except Exception as e:
            return _error(f"Failed to load models for {slug}", e)

    async def search_models(
        self,
        query: str,
        max_results: int = 50
    ) -> dict[str, Any]:
        """Global search over cached catalog data"""
        try:
            result, source = await asyncio.to_thread(
                self.container.search_catalog.execute,
                query
            )

            return {
                "success": True,
                "query": result.query,
                "mode": result.mode,
                "hits": [asdict(h) for h in result.hits[:max_results]],
                "hit_count": len(result.hits),
                "brands": [_brand_dict(b) for b in result.brands[:max_results]],
                "brand_count": len(result.brands),
                "source": source,
                "max_results": max_results
            }

        except Exception as e:
            return _error("Search failed", e)

    async def load_catalog(self, force_refetch: bool = False) -> dict[str, Any]:
        """Load every brand with models"""
        try:
            brands, from_cache = await asyncio.to_thread(
                self.container.load_catalog.execute,
                force_refetch=force_refetch
            )

            return {
                "success": True,
                "brand_count": len(brands),
                "model_count": sum(len(b.models) for b in brands),
                "empty_brands": [b.slug for b in brands if not b.models],
                "from_cache": from_cache,
                "cache_info": _info_dict(self.container.cache.info(ALL_MODELS_GLOBAL_KEY))
            }

        except Exception as e:
            return _error("Failed to load catalog", e)

    async def cache_status(self, key: Optional[str] = None) -> dict[str, Any]:
        """Cache introspection"""
        try:
            key = key or ALL_MODELS_GLOBAL_KEY
            info, slugs, usage = await asyncio.to_thread(
                self.container.cache_status.execute,
                key
            )

            return {
                "success": True,
                "key": key,
                "cache_info": _info_dict(info),
                "cached_brands": slugs,
                "cached_brand_count": len(slugs),
                "disk_usage_kb": round(usage / 1024, 2),
                "cache_dir": str(self.container.durable.cache_dir)
            }

        except Exception as e:
            return _error("Failed to read cache status", e)

    async def refresh_cache(self) -> dict[str, Any]:
        """Clear catalog caches"""
        try:
            removed = await asyncio.to_thread(self.container.refresh_catalog.execute)

            return {
                "success": True,
                "removed_keys": removed,
                "count": len(removed)
            }

        except Exception as e:
            return _error("Failed to refresh cache", e)
