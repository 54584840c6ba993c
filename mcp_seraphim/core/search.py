"""
Catalog search

Case-insensitive substring matching over parsed records and brands.
Every filter returns a subsequence of its input in the original order.
"""
from typing import Iterable, Sequence

from .domain import Brand, GlobalSearchResult, ModelHit, ModelRecord


def _normalize(query: str) -> str:
    return query.strip().casefold()


def record_matches(record: ModelRecord, term: str) -> bool:
    """Match an already case-folded term against a record's fields"""
    if term in record.main_model_name.casefold():
        return True
    if record.codename is not None and term in record.codename.casefold():
        return True
    return any(
        term in v.model_number.casefold() or term in v.variant_name.casefold()
        for v in record.variants
    )


def filter_models(records: Sequence[ModelRecord], query: str) -> Sequence[ModelRecord]:
    """Records whose name, codename, model number or variant name contain query.

    An empty or whitespace-only query returns the input unchanged.
    """
    term = _normalize(query)
    if not term:
        return records
    return [r for r in records if record_matches(r, term)]


def match_brand(brand: Brand, query: str) -> bool:
    term = _normalize(query)
    return term in brand.name.casefold() or term in brand.slug.casefold()


def filter_brands(brands: Sequence[Brand], query: str) -> Sequence[Brand]:
    if not _normalize(query):
        return brands
    return [b for b in brands if match_brand(b, query)]


def model_hits(brands: Iterable[Brand], query: str) -> list[ModelHit]:
    """Flatten matching models of every brand into one row per variant"""
    term = _normalize(query)
    hits = []
    for brand in brands:
        for record in brand.models:
            if term and not record_matches(record, term):
                continue
            for variant in record.variants:
                hits.append(ModelHit(
                    brand=brand.name,
                    brand_slug=brand.slug,
                    main_model_name=record.main_model_name,
                    model_number=variant.model_number,
                    variant_name=variant.variant_name,
                    codename=record.codename,
                ))
    return hits


def global_search(brands: Sequence[Brand], query: str) -> GlobalSearchResult:
    """Search models across all brands, falling back to brand names.

    Model matches take precedence: a query matching both a model and a
    brand name returns only the model hits.
    """
    trimmed = query.strip()
    if not trimmed:
        return GlobalSearchResult(query=trimmed, mode="brands", brands=tuple(brands))

    hits = model_hits(brands, trimmed)
    if hits:
        return GlobalSearchResult(query=trimmed, mode="models", hits=tuple(hits))

    return GlobalSearchResult(
        query=trimmed,
        mode="brands",
        brands=tuple(filter_brands(brands, trimmed)),
    )
