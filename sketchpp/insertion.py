"""Location of the first real statement in a unified sketch."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Sequence, Tuple

from .logging import get_logger


@dataclass(frozen=True)
class TriviaRule:
    """A lexical rule recognising one kind of leading trivia."""

    kind: str
    pattern: Pattern[str]


TRIVIA_RULES: Tuple[TriviaRule, ...] = (
    # Directive lines, including backslash continuations and any comment that
    # opens on the line, even one that spans the following lines.
    TriviaRule(
        "directive",
        re.compile(r"[ \t]*#(?:\\\r?\n|//[^\n]*|/\*[^*]*\*+(?:[^/*][^*]*\*+)*/|[^\n])*"),
    ),
    TriviaRule("line_comment", re.compile(r"//[^\n]*")),
    # Unterminated block comments do not match.
    TriviaRule("block_comment", re.compile(r"/\*[^*]*\*+(?:[^/*][^*]*\*+)*/")),
    TriviaRule("whitespace", re.compile(r"\s+")),
)


class InsertionPointLocator:
    """Scans leading trivia and reports where prototypes may be inserted."""

    def __init__(self, rules: Sequence[TriviaRule] = TRIVIA_RULES) -> None:
        self.rules = tuple(rules)
        self.logger = get_logger("insertion")

    def scan(self, text: str) -> List[Tuple[str, int, int]]:
        """Return the consecutive ``(kind, start, end)`` trivia spans from offset 0."""
        spans: List[Tuple[str, int, int]] = []
        position = 0
        while position < len(text):
            best = self._longest_match(text, position)
            if best is None:
                break
            kind, end = best
            spans.append((kind, position, end))
            position = end
        return spans

    def locate(self, text: str) -> int:
        spans = self.scan(text)
        offset = spans[-1][2] if spans else 0
        self.logger.debug("Insertion point at offset %d after %d trivia span(s)", offset, len(spans))
        return offset

    def _longest_match(self, text: str, position: int) -> Optional[Tuple[str, int]]:
        best: Optional[Tuple[str, int]] = None
        for rule in self.rules:
            match = rule.pattern.match(text, position)
            if match is None or match.end() == position:
                continue
            if best is None or match.end() > best[1]:
                best = (rule.kind, match.end())
        return best


__all__ = ["InsertionPointLocator", "TRIVIA_RULES", "TriviaRule"]
