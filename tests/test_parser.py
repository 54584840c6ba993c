"""
Unit tests for the brand document parser
"""
from mcp_seraphim.core.domain import ModelRecord, ModelVariant
from mcp_seraphim.core.parser import (
    LineKind,
    classify_line,
    parse_document,
    serialize_records,
    split_model_heading,
)

from .conftest import SAMPLE_DOC


class TestParseDocument:
    """Test parse_document()."""

    def test_sample_document(self):
        """Test the two-model example parses into typed records."""
        records = parse_document(SAMPLE_DOC)

        assert records == [
            ModelRecord(
                main_model_name="Phone One",
                codename="COD1",
                series="Series A",
                variants=(
                    ModelVariant("MN-100", "Base Edition"),
                    ModelVariant("MN-101", "Pro Edition"),
                ),
            ),
            ModelRecord(
                main_model_name="Phone Two",
                codename=None,
                series="Series A",
                variants=(ModelVariant("MN-200", "Standard"),),
            ),
        ]

    def test_empty(self):
        assert parse_document("") == []
        assert parse_document(None) == []

    def test_garbage_never_raises(self):
        """Test binary noise yields an empty list."""
        assert parse_document("\x00\xff**\n`\n##\n:**\n�") == []
        assert parse_document(b"\x89PNG\r\n\x1a\n\x00\x00") == []

    def test_model_without_variants_dropped(self):
        text = "**Empty:**\nsome note\n**Full:**\n`F-1`: One\n"
        records = parse_document(text)
        assert [r.main_model_name for r in records] == ["Full"]

    def test_no_series_before_first_heading(self):
        records = parse_document("**Solo:**\n`S-1`: One\n## Later\n**Next:**\n`N-1`: Two\n")
        assert records[0].series is None
        assert records[1].series == "Later"

    def test_series_carries_across_models(self):
        text = "## A\n**One:**\n`1`: x\n## B\n**Two:**\n`2`: y\n**Three:**\n`3`: z\n"
        assert [r.series for r in parse_document(text)] == ["A", "B", "B"]

    def test_variant_outside_model_ignored(self):
        text = "## A\n`LOOSE`: nobody owns me\n**One:**\n`1`: x\n"
        records = parse_document(text)
        assert len(records) == 1
        assert records[0].variants == (ModelVariant("1", "x"),)

    def test_other_heading_ends_model(self):
        """Test a deeper heading stops variant collection but keeps the series."""
        text = "## A\n**One:**\n`1`: x\n### Notes\n`2`: not a variant of One\n**Two:**\n`3`: y\n"
        records = parse_document(text)
        assert records[0].variants == (ModelVariant("1", "x"),)
        assert records[1].series == "A"

    def test_bold_line_ends_model(self):
        text = "**One:**\n`1`: x\n**Note** not a heading\n`2`: y\n"
        records = parse_document(text)
        assert records[0].variants == (ModelVariant("1", "x"),)

    def test_non_matching_lines_inside_model_skipped(self):
        text = "**One:**\n\n`1`: x\n- bullet\n`2`:   spaced   \n"
        records = parse_document(text)
        assert records[0].variants == (ModelVariant("1", "x"), ModelVariant("2", "spaced"))

    def test_crlf_and_indentation(self):
        text = "## A\r\n  **[C] One:**  \r\n\t`1`: x\r\n"
        records = parse_document(text)
        assert records == [ModelRecord("One", (ModelVariant("1", "x"),), codename="C", series="A")]

    def test_only_newlines_split_lines(self):
        """Test form feeds and unicode separators stay inside the line."""
        records = parse_document("## Series\x0bOne\n**Phone X:**\n`X-1`: Base\x0cEdition\x85\n")
        assert records == [ModelRecord(
            "Phone X",
            (ModelVariant("X-1", "Base\x0cEdition"),),
            series="Series\x0bOne",
        )]

    def test_bare_carriage_return_splits(self):
        records = parse_document("**One:**\r`1`: x\r**Two:**\r`2`: y")
        assert [r.main_model_name for r in records] == ["One", "Two"]

    def test_idempotent(self):
        assert parse_document(SAMPLE_DOC) == parse_document(SAMPLE_DOC)


class TestModelHeading:
    """Test codename extraction from model headings."""

    def test_bracket_codename(self):
        assert split_model_heading("[venus] Xiaomi 11") == ("venus", "Xiaomi 11")

    def test_paren_codename(self):
        assert split_model_heading("(star) Mi 11 Ultra") == ("star", "Mi 11 Ultra")

    def test_extra_groups_stripped(self):
        assert split_model_heading("[A] Phone [B] (5G) Max") == ("A", "Phone Max")
        assert split_model_heading("Phone (5G)") == (None, "Phone")

    def test_no_codename(self):
        assert split_model_heading("Plain Name") == (None, "Plain Name")


class TestClassifyLine:
    """Test classify_line() tags."""

    def test_kinds(self):
        assert classify_line("## Series").kind is LineKind.SECTION_HEADING
        assert classify_line("## Series").text == "Series"
        assert classify_line("**Name:**").kind is LineKind.MODEL_HEADING
        assert classify_line("`A1`: B").kind is LineKind.VARIANT
        assert classify_line("`A1`: B").model_number == "A1"
        assert classify_line("# Title").kind is LineKind.BREAK
        assert classify_line("**bold**").kind is LineKind.BREAK
        assert classify_line("plain text").kind is LineKind.OTHER
        assert classify_line("").kind is LineKind.OTHER


class TestSerializeRecords:
    """Test canonical emission round-trips through the parser."""

    def test_round_trip_sample(self):
        records = parse_document(SAMPLE_DOC)
        assert parse_document(serialize_records(records)) == records

    def test_round_trip_mixed(self):
        text = (
            "intro\n"
            "**(P) Unsorted [x]:**\n`U-1`: \n"
            "## First\n**[A] Alpha:**\n`A-1`: one\n`A-2`: two\n"
            "## Second\n**Beta (LTE):**\n`B-1`: b\n"
        )
        records = parse_document(text)
        assert len(records) == 3
        assert parse_document(serialize_records(records)) == records

    def test_round_trip_paren_codename_with_bracket(self):
        """Test a "(A]B)" codename is written back in paren form."""
        records = parse_document("**(A]B) Phone:**\n`X-1`: Base\n")
        assert records == [ModelRecord("Phone", (ModelVariant("X-1", "Base"),), codename="A]B")]

        text = serialize_records(records)
        assert text.startswith("**(A]B) Phone:**")
        assert parse_document(text) == records

    def test_round_trip_control_characters(self):
        records = parse_document("## S\x1cT\n**Phone X:**\n`X-1`: Base\x0cEdition\n")
        assert parse_document(serialize_records(records)) == records

    def test_empty(self):
        assert serialize_records([]) == ""
