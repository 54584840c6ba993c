"""
Plain-text formatters for MCP tool results

Format handler results as compact terminal-style text.
Used by both CLI and MCP adapters for consistent presentation.
"""

from typing import Any, Optional

OTHER_MODELS = "Other Models"


def _error(result: dict[str, Any]) -> str:
    return f"ERROR: {result.get('error', 'Unknown error')}"


def format_duration(ms: Optional[int]) -> str:
    """Human-friendly duration: 45s, 12m, 3h 5m, 2d 4h"""
    if ms is None:
        return "N/A"
    seconds = abs(int(ms)) // 1000
    sign = "-" if ms < 0 else ""
    if seconds < 60:
        return f"{sign}{seconds}s"
    minutes = seconds // 60
    if minutes < 60:
        return f"{sign}{minutes}m"
    hours, minutes = divmod(minutes, 60)
    if hours < 24:
        return f"{sign}{hours}h {minutes}m"
    days, hours = divmod(hours, 24)
    return f"{sign}{days}d {hours}h"


def format_cache_line(info: Optional[dict[str, Any]]) -> str:
    """"UPDATED 12m ago | EXPIRES in 23h 48m" """
    if not info or not info.get("exists"):
        return "NOT CACHED"
    expires_in = info.get("expires_in_ms")
    if expires_in is not None and expires_in < 0:
        expiry = f"EXPIRED {format_duration(-expires_in)} ago"
    else:
        expiry = f"EXPIRES in {format_duration(expires_in)}"
    return f"UPDATED {format_duration(info.get('age_ms'))} ago | {expiry}"


def format_list_brands(result: dict[str, Any]) -> str:
    """Format list_brands result.

    Example output:
        BRANDS (3 of 120 matching "xiaomi")
        ──────────────────────────────────────────────────────────────────────
        NAME                          SLUG
        Xiaomi (China)                xiaomi_cn
        Xiaomi (Global)               xiaomi_global_en
    """
    if not result.get("success"):
        return _error(result)

    lines = []
    if result.get("query"):
        lines.append(f"BRANDS ({result['count']} of {result['total']} matching \"{result['query']}\")")
    else:
        lines.append(f"BRANDS ({result['total']})")
    lines.append("─" * 70)

    if not result["brands"]:
        lines.append("NO BRANDS FOUND")
        return "\n".join(lines)

    lines.append(f"{'NAME':<30}SLUG")
    for brand in result["brands"]:
        lines.append(f"{brand['name'][:29]:<30}{brand['slug']}")

    lines.append("")
    lines.append('Try: get_brand_models("SLUG") | search_models("MODEL")')
    return "\n".join(lines)


def format_brand_models(result: dict[str, Any]) -> str:
    """Format get_brand_models result, grouped by series.

    Example output:
        XIAOMI (GLOBAL) | 2 models | FRESH
        UPDATED 0s ago | EXPIRES in 24h 0m
        ──────────────────────────────────────────────────────────────────────
        ## Series A
        Phone One [COD1]
            MN-100        Base Edition
    """
    if not result.get("success"):
        return _error(result)

    brand = result["brand"]
    source = "CACHED" if result.get("from_cache") else "FRESH"
    count = f"{result['count']} of {result['total']} models" if result.get("query") else f"{result['total']} models"

    lines = [f"{brand['name'].upper()} | {count} | {source}"]
    lines.append(format_cache_line(result.get("cache_info")))
    lines.append("─" * 70)

    if not result["models"]:
        lines.append("NO MODELS FOUND")
        return "\n".join(lines)

    # Group by series, keeping first-seen order; unlabeled models go last
    groups: dict[str, list[dict[str, Any]]] = {}
    for model in result["models"]:
        groups.setdefault(model.get("series") or OTHER_MODELS, []).append(model)
    if OTHER_MODELS in groups:
        groups[OTHER_MODELS] = groups.pop(OTHER_MODELS)

    first = True
    for series, models in groups.items():
        if not first:
            lines.append("")
        first = False
        lines.append(f"## {series}")
        for model in models:
            codename = f" [{model['codename']}]" if model.get("codename") else ""
            lines.append(f"{model['main_model_name']}{codename}")
            for variant in model["variants"]:
                lines.append(f"    {variant['model_number']:<14}{variant['variant_name']}")

    return "\n".join(lines)


def format_search_models(result: dict[str, Any]) -> str:
    """Format search_models result.

    Example output:
        SEARCH "pro" | 2 model matches | CACHE: fresh
        ──────────────────────────────────────────────────────────────────────
        BRAND               MODEL                     NUMBER        VARIANT
        Acme                Phone One                 MN-101        Pro Edition
    """
    if not result.get("success"):
        return _error(result)

    query = result["query"]
    source = result.get("source", "unknown")

    if result["mode"] == "models":
        lines = [f"SEARCH \"{query}\" | {result['hit_count']} model matches | CACHE: {source}"]
        lines.append("─" * 90)
        lines.append(f"{'BRAND':<20}{'MODEL':<26}{'NUMBER':<14}VARIANT")
        for hit in result["hits"]:
            model = hit["main_model_name"]
            if hit.get("codename"):
                model = f"{model} [{hit['codename']}]"
            lines.append(f"{hit['brand'][:19]:<20}{model[:25]:<26}{hit['model_number'][:13]:<14}{hit['variant_name']}")
        if result["hit_count"] > len(result["hits"]):
            lines.append("")
            lines.append(f"More: search_models(..., max_results={result['hit_count']})")
        return "\n".join(lines)

    if not result["brands"]:
        hint = " (cache empty - run load_catalog)" if source == "empty" else ""
        return f"SEARCH \"{query}\" | NO BRANDS OR MODELS FOUND{hint}"

    lines = [f"SEARCH \"{query}\" | {result['brand_count']} brand matches | CACHE: {source}"]
    lines.append("─" * 70)
    for brand in result["brands"]:
        lines.append(f"{brand['name'][:29]:<30}{brand['slug']}")
    return "\n".join(lines)


def format_load_catalog(result: dict[str, Any]) -> str:
    if not result.get("success"):
        return _error(result)

    source = "FROM CACHE" if result.get("from_cache") else "FETCHED"
    lines = [f"CATALOG {source} | {result['brand_count']} brands | {result['model_count']} models"]
    lines.append(format_cache_line(result.get("cache_info")))
    if result.get("empty_brands"):
        lines.append(f"NO MODELS: {', '.join(result['empty_brands'])}")
    return "\n".join(lines)


def format_cache_status(result: dict[str, Any]) -> str:
    if not result.get("success"):
        return _error(result)

    lines = [f"CACHE {result['key']}", format_cache_line(result.get("cache_info"))]
    lines.append(f"DIR:     {result['cache_dir']} ({result['disk_usage_kb']} KB)")
    lines.append(f"BRANDS:  {result['cached_brand_count']} cached")
    if result["cached_brands"]:
        lines.append("         " + ", ".join(result["cached_brands"]))
    return "\n".join(lines)


def format_refresh_cache(result: dict[str, Any]) -> str:
    if not result.get("success"):
        return _error(result)
    return f"CLEARED {result['count']} cache keys"


FORMATTERS = {
    "list_brands": format_list_brands,
    "get_brand_models": format_brand_models,
    "search_models": format_search_models,
    "load_catalog": format_load_catalog,
    "cache_status": format_cache_status,
    "refresh_cache": format_refresh_cache,
}
