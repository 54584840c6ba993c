"""
Brand name codec

Derives a display name and slug from an upstream filename.
"""
import re
from typing import Iterable

from .domain import Brand, BrandIdentity, RawEntry

DOCUMENT_EXTENSION = ".md"

# Longest first: "_global_en" also ends with "_en"
REGION_SUFFIXES = (
    ("_global_en", "Global"),
    ("_cn", "China"),
    ("_en", "English"),
    ("_all", None),
)

_WORD_SPLIT = re.compile(r"[-_\s]")


def is_document(name: str) -> bool:
    """True if a listing entry is a parseable brand document"""
    return name.endswith(DOCUMENT_EXTENSION)


def strip_extension(filename: str) -> str:
    if filename.endswith(DOCUMENT_EXTENSION):
        return filename[:-len(DOCUMENT_EXTENSION)]
    return filename


def capitalize_words(text: str) -> str:
    """"xiaomi-redmi_phones" -> "Xiaomi Redmi Phones" """
    words = [w for w in _WORD_SPLIT.split(text) if w]
    return " ".join(w[:1].upper() + w[1:].lower() for w in words)


def classify(filename: str) -> BrandIdentity:
    """Classify a filename into display name and slug.

    The slug is always the filename minus extension so it can be mapped
    back to the document; region suffixes only affect the display name.
    """
    slug = strip_extension(filename)

    for suffix, qualifier in REGION_SUFFIXES:
        if slug.endswith(suffix):
            name = capitalize_words(slug[:-len(suffix)])
            if qualifier:
                name = f"{name} ({qualifier})" if name else f"({qualifier})"
            return BrandIdentity(display_name=name, slug=slug)

    return BrandIdentity(display_name=capitalize_words(slug), slug=slug)


def classify_entries(entries: Iterable[RawEntry]) -> list[Brand]:
    """Turn a directory listing into brands (no models), sorted by name"""
    brands = []
    for entry in entries:
        if not is_document(entry.filename):
            continue
        identity = classify(entry.filename)
        brands.append(Brand(
            name=identity.display_name,
            slug=identity.slug,
            filename=entry.filename,
        ))

    brands.sort(key=lambda b: (b.name.casefold(), b.slug))
    return brands
