"""Forward declaration synthesis from parsed tag records."""

from __future__ import annotations

from typing import Iterable, List, Optional, Set

from ..errors import SynthesisSkip
from ..logging import get_logger
from ..models import TagKind, TagRecord
from ..unifier import UnifiedBuffer
from .defaults import strip_default_arguments

_KNOWN_KINDS = (TagKind.PROTOTYPE, TagKind.FUNCTION)
_TEMPLATE_TOKEN = "template"


def is_template(record: TagRecord) -> bool:
    return any(
        value is not None and value.startswith(_TEMPLATE_TOKEN)
        for value in (record.returntype, record.code)
    )


def build_prototype(record: TagRecord) -> str:
    """Return the forward declaration text for ``record``.

    Templates cannot be rebuilt from return type, name and signature alone, so
    their declarator is reused as captured. Everything else becomes
    ``returntype name(signature);``.
    """
    if is_template(record) and record.code is not None:
        return record.code
    missing = [
        field_name
        for field_name in ("returntype", "name", "signature")
        if not getattr(record, field_name)
    ]
    if missing:
        raise SynthesisSkip(f"{record.name or '<unnamed>'} lacks {', '.join(missing)}")
    return f"{record.returntype} {record.name}{record.signature};"


class PrototypeSynthesizer:
    """Filters tag records and attaches a forward declaration to each survivor."""

    def __init__(self, buffer: Optional[UnifiedBuffer] = None) -> None:
        self.buffer = buffer
        self.logger = get_logger("prototypes")

    def synthesize(self, records: Iterable[TagRecord]) -> List[TagRecord]:
        candidates = [record for record in records if record.kind in _KNOWN_KINDS]

        declared: Set[str] = {
            record.name for record in candidates if record.kind is TagKind.PROTOTYPE
        }
        # A name that is already declared gets nothing new, including a second
        # copy of its existing declaration.
        candidates = [record for record in candidates if record.name not in declared]

        synthesized: List[TagRecord] = []
        for record in candidates:
            try:
                prototype = build_prototype(record)
            except SynthesisSkip as exc:
                self.logger.warning("Skipping prototype at %s: %s", self._where(record), exc)
                continue
            record.prototype = strip_default_arguments(prototype)
            synthesized.append(record)

        synthesized.sort(key=lambda record: record.line or 0)
        self.logger.debug(
            "Synthesized %d prototype(s); %d name(s) already declared",
            len(synthesized),
            len(declared),
        )
        return synthesized

    def _where(self, record: TagRecord) -> str:
        if record.line is None:
            return "unknown line"
        if self.buffer is not None:
            origin = self.buffer.origin(record.line)
            if origin is not None:
                return f"{origin[0]}:{origin[1]}"
        return f"unified line {record.line}"


__all__ = ["PrototypeSynthesizer", "build_prototype", "is_template"]
