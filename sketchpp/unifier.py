"""Concatenation of sketch files into one translation unit."""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .logging import get_logger
from .models import SourceFile

LINE_MARKER_FMT = '#line 1 "{basename}"\n'


@dataclass(frozen=True)
class FileSegment:
    """Position of one source file inside the unified buffer."""

    basename: str
    marker_offset: Optional[int]
    content_offset: int
    first_line: int
    line_count: int


@dataclass
class UnifiedBuffer:
    """Unified sketch text plus the bookkeeping needed to map it back."""

    text: str
    segments: List[FileSegment] = field(default_factory=list)
    _inserted: bool = field(default=False, repr=False)

    def origin(self, line: int) -> Optional[Tuple[str, int]]:
        """Map a 1-based unified line to ``(basename, original line)``."""
        for segment in self.segments:
            if segment.first_line <= line < segment.first_line + segment.line_count:
                return segment.basename, line - segment.first_line + 1
        return None

    def markers_before(self, offset: int) -> int:
        """Count the synthetic line markers that start before ``offset``."""
        starts = [s.marker_offset for s in self.segments if s.marker_offset is not None]
        return bisect.bisect_left(starts, offset)

    def segment_at(self, offset: int) -> Optional[FileSegment]:
        """Return the segment whose content starts at or before ``offset``."""
        found: Optional[FileSegment] = None
        for segment in self.segments:
            if segment.content_offset > offset:
                break
            found = segment
        return found

    def insert(self, offset: int, block: str) -> None:
        """Insert ``block`` at ``offset``. A buffer accepts a single insertion."""
        if self._inserted:
            raise RuntimeError("Unified buffer has already been composed")
        if not 0 <= offset <= len(self.text):
            raise ValueError(f"Insertion offset {offset} outside buffer of length {len(self.text)}")
        self.text = self.text[:offset] + block + self.text[offset:]
        self._inserted = True


class SourceUnifier:
    """Joins ordered sketch files, each preceded by a line-reset marker."""

    def __init__(self, line_markers: bool = True) -> None:
        self.line_markers = line_markers
        self.logger = get_logger("unifier")

    def unify(self, files: Sequence[SourceFile]) -> UnifiedBuffer:
        parts: List[str] = []
        segments: List[FileSegment] = []
        offset = 0
        line = 1
        for source in files:
            marker_offset: Optional[int] = None
            if self.line_markers:
                marker = LINE_MARKER_FMT.format(basename=source.basename)
                marker_offset = offset
                parts.append(marker)
                offset += len(marker)
                line += 1
            content = source.content
            if content and not content.endswith("\n"):
                content += "\n"
            line_count = content.count("\n")
            segments.append(
                FileSegment(
                    basename=source.basename,
                    marker_offset=marker_offset,
                    content_offset=offset,
                    first_line=line,
                    line_count=line_count,
                )
            )
            parts.append(content)
            offset += len(content)
            line += line_count
            self.logger.debug("Unified %s (%d lines)", source.basename, line_count)
        return UnifiedBuffer(text="".join(parts), segments=segments)


__all__ = ["FileSegment", "LINE_MARKER_FMT", "SourceUnifier", "UnifiedBuffer"]
