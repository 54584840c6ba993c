"""
Minimal tests for hexagonal architecture

Smoke tests wiring the container, MCP handlers and formatters together
with an in-process fetcher.
"""
import asyncio
from unittest.mock import patch

import pytest

from mcp_seraphim.adapters import GitHubFetcher
from mcp_seraphim.adapters.mcp import TOOL_SCHEMAS, MCPHandlers
from mcp_seraphim.config import Settings
from mcp_seraphim.container import Container
from mcp_seraphim.formatters import (
    FORMATTERS,
    format_brand_models,
    format_cache_line,
    format_duration,
)

from .conftest import SAMPLE_DOC, ZETA_DOC, FakeFetcher


@pytest.fixture
def container(tmp_path):
    fetcher = FakeFetcher({"acme_global_en.md": SAMPLE_DOC, "zeta_cn.md": ZETA_DOC})
    return Container(Settings(cache_dir=tmp_path), fetcher=fetcher)


@pytest.fixture
def handlers(container):
    return MCPHandlers(container)


class TestContainer:
    """Test dependency injection container."""

    def test_container_creates_all_services(self, container):
        """Test container initializes all dependencies."""
        # Check adapters exist
        assert container.cache is not None
        assert container.fetcher is not None

        # One cache shared by every service
        assert container.list_brands.cache is container.cache
        assert container.brand_models.cache is container.cache
        assert container.load_catalog.cache is container.cache
        assert container.search_catalog.cache is container.cache
        assert container.refresh_catalog.cache is container.cache
        assert container.cache_status.cache is container.cache

    def test_default_fetcher(self, tmp_path):
        container = Container(Settings(cache_dir=tmp_path, github_token="t", repo="o/r"))
        assert isinstance(container.fetcher, GitHubFetcher)
        assert container.fetcher.token == "t"
        assert container.fetcher.repo == "o/r"


class TestSettings:
    """Test environment configuration."""

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SERAPHIM_CACHE_DIR", str(tmp_path))
        monkeypatch.setenv("GITHUB_TOKEN", "abc")
        monkeypatch.setenv("SERAPHIM_DEFAULT_TTL", "60")
        monkeypatch.setenv("SERAPHIM_REQUIRE_TOKEN", "true")

        settings = Settings.from_env()

        assert settings.cache_dir == tmp_path
        assert settings.github_token == "abc"
        assert settings.default_ttl == 60
        assert settings.require_token is True

    def test_explicit_cache_dir_wins(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SERAPHIM_CACHE_DIR", "/elsewhere")
        assert Settings.from_env(cache_dir=tmp_path).cache_dir == tmp_path

    def test_invalid_int(self, monkeypatch):
        monkeypatch.setenv("SERAPHIM_MAX_WORKERS", "many")
        with pytest.raises(ValueError, match="SERAPHIM_MAX_WORKERS"):
            Settings.from_env()


class TestMCPHandlers:
    """Test MCP handlers use the container."""

    def test_handlers_initialization(self, container, handlers):
        assert handlers.container is container

    def test_tool_schemas_match_handlers(self, handlers):
        names = set(TOOL_SCHEMAS)
        assert names == set(FORMATTERS)
        assert all(TOOL_SCHEMAS[name]["name"] == name for name in names)
        assert all(callable(getattr(handlers, name)) for name in names)

    def test_list_brands_filtered(self, handlers):
        result = asyncio.run(handlers.list_brands(query="china"))
        assert result["success"] is True
        assert [b["slug"] for b in result["brands"]] == ["zeta_cn"]
        assert result["total"] == 2

    def test_get_brand_models(self, handlers):
        result = asyncio.run(handlers.get_brand_models("acme_global_en", query="mn-200"))
        assert result["success"] is True
        assert result["total"] == 2
        assert [m["main_model_name"] for m in result["models"]] == ["Phone Two"]
        assert result["from_cache"] is False

    def test_unknown_brand(self, handlers):
        result = asyncio.run(handlers.get_brand_models("nokia"))
        assert result["success"] is False
        assert result["error_type"] == "not_found"

    def test_cached_only_without_cache(self, handlers):
        result = asyncio.run(handlers.get_brand_models("zeta_cn", cached_only=True))
        assert result["success"] is False
        assert result["error_type"] == "not_found"

    def test_cached_only_reads_in_worker_thread(self, container, handlers):
        """Test the cached copy is read via asyncio.to_thread, not on the loop."""
        asyncio.run(handlers.get_brand_models("zeta_cn"))
        offloaded = []

        async def run_inline(func, *args, **kwargs):
            offloaded.append(func)
            return func(*args, **kwargs)

        with patch("mcp_seraphim.adapters.mcp.handlers.asyncio.to_thread", new=run_inline):
            result = asyncio.run(handlers.get_brand_models("zeta_cn", cached_only=True))

        assert result["success"] is True
        assert result["from_cache"] is True
        assert offloaded == [container.brand_models.peek]

    def test_upstream_error_type(self, tmp_path):
        fetcher = FakeFetcher({"acme.md": SAMPLE_DOC}, failing=("acme.md",))
        handlers = MCPHandlers(Container(Settings(cache_dir=tmp_path), fetcher=fetcher))
        result = asyncio.run(handlers.get_brand_models("acme"))
        assert result["error_type"] == "upstream_unavailable"

    def test_load_then_search(self, handlers):
        loaded = asyncio.run(handlers.load_catalog())
        assert loaded["brand_count"] == 2
        assert loaded["model_count"] == 3
        assert loaded["from_cache"] is False

        result = asyncio.run(handlers.search_models("pro", max_results=1))
        assert result["mode"] == "models"
        assert result["hit_count"] == 2
        assert len(result["hits"]) == 1
        assert result["source"] == "fresh"
        assert "More:" in FORMATTERS["search_models"](result)

    def test_cache_status_and_refresh(self, handlers, tmp_path):
        asyncio.run(handlers.load_catalog())

        status = asyncio.run(handlers.cache_status())
        assert status["cache_info"]["exists"] is True
        assert status["cached_brand_count"] == 2
        assert status["cache_dir"] == str(tmp_path)

        refreshed = asyncio.run(handlers.refresh_cache())
        assert refreshed["success"] is True

        status = asyncio.run(handlers.cache_status())
        assert status["cache_info"]["exists"] is False
        assert status["cached_brands"] == []


class TestFormatters:
    """Test plain-text formatting."""

    def test_duration(self):
        assert format_duration(None) == "N/A"
        assert format_duration(45_000) == "45s"
        assert format_duration(12 * 60_000) == "12m"
        assert format_duration((3 * 60 + 5) * 60_000) == "3h 5m"
        assert format_duration((50 * 60) * 60_000) == "2d 2h"

    def test_cache_line(self):
        assert format_cache_line(None) == "NOT CACHED"
        assert format_cache_line({"exists": True, "age_ms": 60_000, "expires_in_ms": -5000}) == (
            "UPDATED 1m ago | EXPIRED 5s ago"
        )

    def test_brand_models_grouped(self, handlers):
        result = asyncio.run(handlers.get_brand_models("zeta_cn"))
        text = format_brand_models(result)
        assert text.startswith("ZETA (CHINA) | 1 models | FRESH")
        assert "## Other Models" in text
        assert "Z-1" in text

    def test_errors(self):
        failed = {"success": False, "error": "boom"}
        assert all(fmt(failed) == "ERROR: boom" for fmt in FORMATTERS.values())
