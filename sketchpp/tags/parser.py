"""Parsing of ctags tab-separated output into tag records."""

from __future__ import annotations

from typing import Iterable, List, Optional

from ..errors import RecordParseError
from ..logging import get_logger
from ..models import TagKind, TagRecord

_FIELDS = ("kind", "line", "typeref", "signature", "returntype")
_PATTERN_START = "/^"
_PATTERN_END = "/;"


def _unescape(pattern: str) -> str:
    return pattern.replace("\\/", "/").replace("\\\\", "\\")


def _declarator(column: str) -> Optional[str]:
    """Cut the declarator out of a ``/^...$/;"`` search pattern."""
    start = column.index(_PATTERN_START) + len(_PATTERN_START)
    brace = column.find("{", start)
    if brace != -1:
        text = column[start:brace]
    else:
        paren = column.rfind(")")
        if paren < start:
            return None
        text = column[start : paren + 1]
    return _unescape(text).strip()


def _as_line(value: str) -> Optional[int]:
    try:
        return int(value)
    except ValueError:
        return None


class TagParser:
    """Turns extractor lines into :class:`TagRecord` objects."""

    def __init__(self) -> None:
        self.logger = get_logger("tags.parser")

    def parse(self, lines: Iterable[str]) -> List[TagRecord]:
        records: List[TagRecord] = []
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                records.append(self.parse_line(line))
            except RecordParseError as exc:
                self.logger.debug("Skipping tag line %d: %s", number, exc)
        self.logger.debug("Parsed %d tag record(s)", len(records))
        return records

    def parse_line(self, line: str) -> TagRecord:
        columns = line.rstrip("\r\n").split("\t")
        name = columns[0].strip()
        if not name:
            raise RecordParseError(f"missing symbol name in {line!r}")

        record = TagRecord(name=name)
        for column in columns[1:]:
            if _PATTERN_START in column and _PATTERN_END in column:
                code = _declarator(column)
                if code is not None:
                    record.code = code
                continue
            if ":" not in column:
                continue
            field_name, value = column.split(":", 1)
            if field_name not in _FIELDS:
                continue
            value = value.strip()
            if field_name == "kind":
                record.kind = TagKind.parse(value)
            elif field_name == "line":
                record.line = _as_line(value)
            else:
                setattr(record, field_name, value)
        return record


__all__ = ["TagParser"]
