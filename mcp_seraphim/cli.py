#!/usr/bin/env python3
"""
CLI for seraphim MCP - test tools without MCP restart

Usage:
  mcp-seraphim list-tools                 # Show MCP tool definitions
  mcp-seraphim brands                     # List brands (uses env SERAPHIM_CACHE_DIR)
  mcp-seraphim brands --query xiaomi      # Filter brands by name/slug
  mcp-seraphim models xiaomi_en           # Fetch models for a brand
  mcp-seraphim models xiaomi_en --cached  # Cached models only (may be stale)
  mcp-seraphim load-all                   # Fetch every brand into the cache
  mcp-seraphim search "mn-200"            # Search cached models, then brands
  mcp-seraphim cache-info                 # Cache age and cached brands
  mcp-seraphim refresh                    # Clear catalog caches

Fast iteration: Uses hexagonal core directly (no MCP layer)
"""

import argparse
import asyncio
import json
import logging
import sys

from .adapters.mcp import TOOL_SCHEMAS, MCPHandlers
from .config import Settings, get_cache_dir
from .container import Container
from .formatters import FORMATTERS


async def list_tools_command() -> int:
    """Show MCP tool definitions"""
    print("=" * 80)
    print("MCP TOOL DEFINITIONS")
    print("=" * 80)
    print()

    for tool_name, tool_schema in TOOL_SCHEMAS.items():
        print(f"Tool: {tool_schema['name']}")
        print()
        print("Description:")
        print(tool_schema['description'])
        print()
        print("Input Schema:")
        print(json.dumps(tool_schema['inputSchema'], indent=2))
        print()
        print("-" * 80)
        print()

    return 0


async def run_tool(tool_name: str, cache_dir: str, **kwargs) -> int:
    """Run one handler and print its formatted result"""
    container = Container(Settings.from_env(cache_dir=cache_dir))
    handlers = MCPHandlers(container)

    result = await getattr(handlers, tool_name)(**kwargs)
    print(FORMATTERS[tool_name](result))

    return 0 if result["success"] else 1


def main():
    parser = argparse.ArgumentParser(
        description="seraphim CLI - phone brand/model catalog search"
    )
    parser.add_argument(
        "--cache-dir",
        default=str(get_cache_dir()),
        help="Cache directory (default: $SERAPHIM_CACHE_DIR or ~/.cache/seraphim)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # list-tools command
    subparsers.add_parser("list-tools", help="Show MCP tool definitions")

    # brands command
    brands_parser = subparsers.add_parser("brands", help="List brands")
    brands_parser.add_argument("--query", help="Filter by brand name or slug")
    brands_parser.add_argument("--refetch", action="store_true", help="Ignore cached listing")

    # models command
    models_parser = subparsers.add_parser("models", help="Show models of a brand")
    models_parser.add_argument("slug", help="Brand slug (e.g., xiaomi_en)")
    models_parser.add_argument("--query", help="Filter models")
    models_parser.add_argument("--cached", action="store_true", help="Cached data only, never fetch")

    # search command
    search_parser = subparsers.add_parser("search", help="Search cached models and brands")
    search_parser.add_argument("query", help="Search text (case-insensitive)")
    search_parser.add_argument("--max", type=int, default=50, help="Max results (default: 50)")

    # load-all command
    load_parser = subparsers.add_parser("load-all", help="Fetch every brand into the cache")
    load_parser.add_argument("--refetch", action="store_true", help="Ignore cached data")

    # cache-info command
    info_parser = subparsers.add_parser("cache-info", help="Show cache status")
    info_parser.add_argument("key", nargs="?", help="Cache key (default: all_models_global_data)")

    # refresh command
    subparsers.add_parser("refresh", help="Clear catalog caches")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s"
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    # Run command
    if args.command == "list-tools":
        return asyncio.run(list_tools_command())
    elif args.command == "brands":
        return asyncio.run(run_tool(
            "list_brands", args.cache_dir,
            query=args.query,
            force_refetch=args.refetch
        ))
    elif args.command == "models":
        return asyncio.run(run_tool(
            "get_brand_models", args.cache_dir,
            slug=args.slug,
            query=args.query,
            cached_only=args.cached
        ))
    elif args.command == "search":
        return asyncio.run(run_tool(
            "search_models", args.cache_dir,
            query=args.query,
            max_results=args.max
        ))
    elif args.command == "load-all":
        return asyncio.run(run_tool(
            "load_catalog", args.cache_dir,
            force_refetch=args.refetch
        ))
    elif args.command == "cache-info":
        return asyncio.run(run_tool("cache_status", args.cache_dir, key=args.key))
    elif args.command == "refresh":
        return asyncio.run(run_tool("refresh_cache", args.cache_dir))
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
