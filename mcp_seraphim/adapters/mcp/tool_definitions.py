"""
MCP Tool Definitions

Single source of truth for tool schemas and descriptions.
Used by both stdio and HTTP/SSE servers.
"""

# Tool schemas for MCP
TOOL_SCHEMAS = {
    "list_brands": {
        "name": "list_brands",
        "description": """List phone brands in the catalog, sorted by name. Optional name filter.

list_brands() → all brands with slugs
list_brands(query="xiaomi") → brands whose name or slug contains "xiaomi"
""",
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Case-insensitive substring of brand name or slug"
                },
                "force_refetch": {
                    "type": "boolean",
                    "description": "Re-read the directory listing even if cached",
                    "default": False
                }
            }
        }
    },
    "get_brand_models": {
        "name": "get_brand_models",
        "description": """Models and variants of one brand, grouped by series.

get_brand_models("xiaomi_en") → fresh models (fetched and cached)
get_brand_models("xiaomi_en", query="pro") → only models matching "pro"
get_brand_models("xiaomi_en", cached_only=true) → cached copy, even if expired
""",
        "inputSchema": {
            "type": "object",
            "properties": {
                "slug": {
                    "type": "string",
                    "description": "Brand slug (document name without .md, e.g. xiaomi_en)"
                },
                "query": {
                    "type": "string",
                    "description": "Filter by model name, codename, model number or variant name"
                },
                "cached_only": {
                    "type": "boolean",
                    "description": "Serve cached data only, never fetch",
                    "default": False
                }
            },
            "required": ["slug"]
        }
    },
    "search_models": {
        "name": "search_models",
        "description": """Search every cached brand for a model; falls back to brand names.

search_models("mn-200") → one row per matching variant
search_models("samsung") → brands named like "samsung" if no model matches

Run load_catalog first to populate the cache.
""",
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Case-insensitive substring"
                },
                "max_results": {
                    "type": "integer",
                    "description": "Maximum rows to return",
                    "default": 50
                }
            },
            "required": ["query"]
        }
    },
    "load_catalog": {
        "name": "load_catalog",
        "description": """Fetch and cache all brands with their models (slow on first run, cached after).

load_catalog() → brand and model counts
load_catalog(force_refetch=true) → refetch everything
""",
        "inputSchema": {
            "type": "object",
            "properties": {
                "force_refetch": {
                    "type": "boolean",
                    "description": "Ignore cached data",
                    "default": False
                }
            }
        }
    },
    "cache_status": {
        "name": "cache_status",
        "description": """Cache age, expiry and which brands have cached data.""",
        "inputSchema": {
            "type": "object",
            "properties": {
                "key": {
                    "type": "string",
                    "description": "Cache key to inspect (default: all_models_global_data)"
                }
            }
        }
    },
    "refresh_cache": {
        "name": "refresh_cache",
        "description": """Drop catalog caches so the next load refetches from upstream.""",
        "inputSchema": {
            "type": "object",
            "properties": {}
        }
    }
}
