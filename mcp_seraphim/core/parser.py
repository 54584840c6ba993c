"""
Brand document parser

Converts a brand markdown document into ModelRecords:

    ## Series A
    **[COD1] Phone One:**
    `MN-100`: Base Edition

Each line is classified first, then a two-state machine (outside a model /
collecting variants) builds the records. Parsing never raises: unknown
lines are skipped and the worst case is an empty list.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Union

from .domain import ModelRecord, ModelVariant

_BRACKET_CODENAME = re.compile(r"^\[([^\]]+)\]\s*(.*)$", re.DOTALL)
_PAREN_CODENAME = re.compile(r"^\(([^)]+)\)\s*(.*)$", re.DOTALL)
_GROUP = re.compile(r"\s*[\[(][^\])]*[\])]\s*")
_VARIANT = re.compile(r"^`([^`]+)`:\s*(.*)$", re.DOTALL)
_LINE_BREAK = re.compile(r"\r\n?|\n")


class LineKind(Enum):
    SECTION_HEADING = "section"
    MODEL_HEADING = "model"
    VARIANT = "variant"
    BREAK = "break"  # other heading or bold line, ends the current model
    OTHER = "other"


@dataclass(frozen=True)
class ParsedLine:
    kind: LineKind
    text: str = ""  # series, model name or variant name
    codename: Optional[str] = None
    model_number: Optional[str] = None


def split_model_heading(body: str) -> tuple[Optional[str], str]:
    """Split "[CODE] Name (extra)" into ("CODE", "Name").

    Bracket codenames are the documented form; a leading "(CODE)" is
    accepted too. Any further bracket or parenthesis groups are dropped
    from the name.
    """
    codename = None
    name = body

    match = _BRACKET_CODENAME.match(body) or _PAREN_CODENAME.match(body)
    if match:
        codename = match.group(1)
        name = match.group(2).strip()

    name, removed = _GROUP.subn(" ", name)
    if removed:
        name = " ".join(name.split())
    return codename, name.strip()


def classify_line(raw: str) -> ParsedLine:
    """Classify one line of a brand document"""
    line = raw.strip()

    if line.startswith("## "):
        return ParsedLine(LineKind.SECTION_HEADING, text=line[3:].strip())

    if line.startswith("**") and line.endswith(":**") and len(line) >= 5:
        codename, name = split_model_heading(line[2:-3])
        return ParsedLine(LineKind.MODEL_HEADING, text=name, codename=codename)

    if line.startswith("**") or line.startswith("#"):
        return ParsedLine(LineKind.BREAK)

    match = _VARIANT.match(line)
    if match:
        return ParsedLine(
            LineKind.VARIANT,
            text=match.group(2).strip(),
            model_number=match.group(1),
        )

    return ParsedLine(LineKind.OTHER)


class _ModelBuilder:
    """Variants collected for the model heading currently open"""

    def __init__(self, heading: ParsedLine, series: Optional[str]):
        self.name = heading.text
        self.codename = heading.codename
        self.series = series
        self.variants: list[ModelVariant] = []

    def build(self) -> Optional[ModelRecord]:
        if not self.variants:
            return None
        return ModelRecord(
            main_model_name=self.name,
            variants=tuple(self.variants),
            codename=self.codename,
            series=self.series,
        )


def parse_document(text: Union[str, bytes, None]) -> list[ModelRecord]:
    """Parse a brand document into model records, in source order"""
    if not text:
        return []
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")

    records: list[ModelRecord] = []
    series: Optional[str] = None
    current: Optional[_ModelBuilder] = None

    def close() -> None:
        if current is not None:
            record = current.build()
            if record is not None:
                records.append(record)

    # Only \n, \r\n and \r end a line; other separators stay in the text
    for raw in _LINE_BREAK.split(text):
        parsed = classify_line(raw)

        if parsed.kind is LineKind.SECTION_HEADING:
            close()
            current = None
            series = parsed.text
        elif parsed.kind is LineKind.MODEL_HEADING:
            close()
            current = _ModelBuilder(parsed, series)
        elif parsed.kind is LineKind.BREAK:
            close()
            current = None
        elif parsed.kind is LineKind.VARIANT and current is not None:
            current.variants.append(ModelVariant(
                model_number=parsed.model_number,
                variant_name=parsed.text,
            ))

    close()
    return records


def serialize_records(records: Iterable[ModelRecord]) -> str:
    """Emit records in canonical document form.

    parse_document(serialize_records(records)) == records holds for any
    list produced by parse_document.
    """
    lines = []
    series = None

    for record in records:
        if record.series is not None and record.series != series:
            if lines:
                lines.append("")
            lines.append(f"## {record.series}")
            series = record.series

        prefix = ""
        if record.codename:
            # A "]" can only come from the paren form, which can't hold ")"
            if "]" in record.codename:
                prefix = f"({record.codename}) "
            else:
                prefix = f"[{record.codename}] "
        lines.append(f"**{prefix}{record.main_model_name}:**")
        for variant in record.variants:
            lines.append(f"`{variant.model_number}`: {variant.variant_name}")

    return "\n".join(lines) + ("\n" if lines else "")
