"""Insertion of synthesized prototypes into the unified buffer."""

from __future__ import annotations

from typing import Sequence

from .logging import get_logger
from .unifier import UnifiedBuffer

LINE_CORRECTION_FMT = "#line {line}\n"


def insertion_line(buffer: UnifiedBuffer, offset: int) -> int:
    """Return the 1-based line of ``offset`` in the original numbering.

    With line markers, numbering restarts after each marker, so lines are
    counted from the start of the segment holding the offset. Without them,
    newlines before the offset are counted minus any synthetic marker lines.
    """
    segment = buffer.segment_at(offset)
    if segment is not None and segment.marker_offset is not None:
        return buffer.text.count("\n", segment.content_offset, offset) + 1
    return buffer.text.count("\n", 0, offset) - buffer.markers_before(offset) + 1


class DocumentComposer:
    """Builds the prototype block and splices it into the unified buffer."""

    def __init__(self, line_correction: bool = True) -> None:
        self.line_correction = line_correction
        self.logger = get_logger("composer")

    def build_block(self, buffer: UnifiedBuffer, offset: int, prototypes: Sequence[str]) -> str:
        if not prototypes:
            return ""
        block = "\n".join(prototypes) + "\n"
        if self.line_correction:
            block += LINE_CORRECTION_FMT.format(line=insertion_line(buffer, offset))
        return block

    def compose(self, buffer: UnifiedBuffer, offset: int, prototypes: Sequence[str]) -> str:
        block = self.build_block(buffer, offset, prototypes)
        if block:
            buffer.insert(offset, block)
            self.logger.debug("Inserted %d prototype(s) at offset %d", len(prototypes), offset)
        else:
            self.logger.debug("No prototypes to insert")
        return buffer.text


__all__ = ["DocumentComposer", "LINE_CORRECTION_FMT", "insertion_line"]
