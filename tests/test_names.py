"""
Unit tests for brand name classification
"""
import pytest

from mcp_seraphim.core.domain import RawEntry
from mcp_seraphim.core.names import (
    capitalize_words,
    classify,
    classify_entries,
    is_document,
    strip_extension,
)


class TestClassify:
    """Test classify()."""

    def test_global_suffix(self):
        """Test the documented global example."""
        identity = classify("brand_global_en.md")
        assert identity.display_name == "Brand (Global)"
        assert identity.slug == "brand_global_en"

    @pytest.mark.parametrize("filename,display_name", [
        ("xiaomi_cn.md", "Xiaomi (China)"),
        ("oneplus_en.md", "Oneplus (English)"),
        ("huawei_global_en.md", "Huawei (Global)"),
        ("samsung_all.md", "Samsung"),
        ("apple.md", "Apple"),
    ])
    def test_region_suffixes(self, filename, display_name):
        """Test each region suffix maps to its qualifier."""
        identity = classify(filename)
        assert identity.display_name == display_name
        assert identity.slug == filename[:-3]

    @pytest.mark.parametrize("suffix,qualifier", [
        ("_global_en", "(Global)"),
        ("_cn", "(China)"),
        ("_en", "(English)"),
    ])
    def test_slug_keeps_suffix(self, suffix, qualifier):
        """Test suffix is kept in slug and only qualifies the display name."""
        identity = classify(f"motorola{suffix}.md")
        assert identity.slug == f"motorola{suffix}"
        assert qualifier in identity.display_name

        unrecognized = classify(f"motorola{suffix}_extra.md")
        assert "(" not in unrecognized.display_name

    def test_word_capitalization(self):
        """Test separators split words and case is normalized."""
        assert classify("SONY-mobile_phones.md").display_name == "Sony Mobile Phones"

    def test_empty_input(self):
        """Test empty filename gives an empty best-effort result."""
        identity = classify("")
        assert identity.display_name == ""
        assert identity.slug == ""

    def test_bare_suffix(self):
        """Test a filename that is only a suffix."""
        assert classify("_cn.md").display_name == "(China)"

    def test_extension_only_stripped_at_end(self):
        """Test ".md" inside the name is kept."""
        assert strip_extension("a.md.b.md") == "a.md.b"
        assert strip_extension("notes.txt") == "notes.txt"


class TestCapitalizeWords:
    """Test capitalize_words()."""

    def test_collapses_repeated_separators(self):
        assert capitalize_words("a__b--c  d") == "A B C D"

    def test_lowercases_rest(self):
        assert capitalize_words("iPHONE") == "Iphone"


class TestClassifyEntries:
    """Test classify_entries()."""

    def test_filters_and_sorts(self):
        """Test only .md entries are kept, sorted by display name."""
        entries = [
            RawEntry("zeta_cn.md"),
            RawEntry("image.png"),
            RawEntry("acme_en.md"),
            RawEntry("Beta.md"),
        ]
        brands = classify_entries(entries)

        assert [b.slug for b in brands] == ["acme_en", "Beta", "zeta_cn"]
        assert brands[0].filename == "acme_en.md"
        assert all(b.models == () for b in brands)

    def test_is_document(self):
        assert is_document("x.md")
        assert not is_document("x.mdx")
