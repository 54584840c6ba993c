"""
seraphim MCP Server (stdio)

MCP delivery layer - wraps the container's handlers as MCP tools.
Separation of concerns: this file only handles MCP protocol.
"""
import argparse
import logging
import os
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .adapters.mcp import MCPHandlers
from .config import Settings
from .container import Container
from .formatters import (
    format_list_brands,
    format_brand_models,
    format_search_models,
    format_load_catalog,
    format_cache_status,
    format_refresh_cache,
)

# Suppress per-request INFO logs
logging.getLogger("httpx").setLevel(logging.WARNING)

# Get port from env or default
HTTP_PORT = int(os.getenv("SERAPHIM_HTTP_PORT", "6660"))
HTTP_HOST = os.getenv("SERAPHIM_HTTP_HOST", "0.0.0.0")

# Initialize MCP server with HTTP config
mcp = FastMCP("seraphim", host=HTTP_HOST, port=HTTP_PORT)

_handlers: Optional[MCPHandlers] = None


def get_handlers() -> MCPHandlers:
    """Container is built on first use so --cache-dir can apply"""
    global _handlers
    if _handlers is None:
        _handlers = MCPHandlers(Container(Settings.from_env()))
    return _handlers


@mcp.tool()
async def list_brands(query: Optional[str] = None, force_refetch: bool = False) -> str:
    """
    List phone brands in the catalog, sorted by display name.

    Args:
        query: Optional case-insensitive filter on brand name or slug
        force_refetch: Re-read the directory listing even if cached

    Example:
        list_brands(query="xiaomi")
        → Xiaomi (China) xiaomi_cn, Xiaomi (Global) xiaomi_global_en, ...
    """
    return format_list_brands(await get_handlers().list_brands(query=query, force_refetch=force_refetch))


@mcp.tool()
async def get_brand_models(slug: str, query: Optional[str] = None, cached_only: bool = False) -> str:
    """
    Models and variants of one brand, grouped by series.

    Args:
        slug: Brand slug, the document name without .md (e.g. "xiaomi_en")
        query: Optional filter on model name, codename, model number or variant name
        cached_only: Serve the cached copy (even if expired) without fetching
    """
    return format_brand_models(await get_handlers().get_brand_models(
        slug=slug,
        query=query,
        cached_only=cached_only
    ))


@mcp.tool()
async def search_models(query: str, max_results: int = 50) -> str:
    """
    Search all cached brands for models; falls back to matching brand names.

    A query matching both a model and a brand returns only the model rows.
    Run load_catalog first so every brand is cached.

    Args:
        query: Case-insensitive substring (e.g. "mn-200", "redmi note")
        max_results: Maximum rows to return (default: 50)
    """
    return format_search_models(await get_handlers().search_models(query=query, max_results=max_results))


@mcp.tool()
async def load_catalog(force_refetch: bool = False) -> str:
    """
    Fetch and cache every brand with its models.

    Args:
        force_refetch: Ignore cached data and refetch everything
    """
    return format_load_catalog(await get_handlers().load_catalog(force_refetch=force_refetch))


@mcp.tool()
async def cache_status(key: Optional[str] = None) -> str:
    """
    Cache age, expiry and which brands have cached data.

    Args:
        key: Cache key to inspect (default: all_models_global_data)
    """
    return format_cache_status(await get_handlers().cache_status(key=key))


@mcp.tool()
async def refresh_cache() -> str:
    """Drop catalog caches so the next load refetches from upstream."""
    return format_refresh_cache(await get_handlers().refresh_cache())


def main():
    """Main entry point for the MCP server."""
    global _handlers

    parser = argparse.ArgumentParser(
        description="seraphim: phone brand/model catalog search MCP."
    )
    parser.add_argument(
        "--transport",
        default="stdio",
        choices=["stdio", "streamable-http"],
        help="Transport method (default: stdio)"
    )
    parser.add_argument(
        "--cache-dir",
        default=None,
        help="Cache directory (default: $SERAPHIM_CACHE_DIR or ~/.cache/seraphim)"
    )
    args = parser.parse_args()

    # Override cache dir if specified
    if args.cache_dir:
        _handlers = MCPHandlers(Container(Settings.from_env(cache_dir=args.cache_dir)))

    # Run the server
    if args.transport == "streamable-http":
        print(f"Starting seraphim on http://{HTTP_HOST}:{HTTP_PORT}")
        mcp.run(transport="streamable-http")
    else:
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
