"""Removal of default argument values from forward declarations."""

from __future__ import annotations

from typing import List, Optional, Tuple

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = set(_OPENERS.values())


def parameter_span(prototype: str) -> Optional[Tuple[int, int]]:
    """Return the bounds of the text between the first ``(`` and its matching ``)``."""
    start = prototype.find("(")
    if start == -1:
        return None
    depth = 0
    for index in range(start, len(prototype)):
        char = prototype[index]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return start + 1, index
    return None


def split_parameters(parameters: str) -> List[str]:
    """Split a parameter list on commas that are not nested in brackets."""
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for char in parameters:
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
        elif char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


def strip_default_arguments(prototype: str) -> str:
    """Drop ``= value`` suffixes from every parameter, keeping count and order."""
    span = parameter_span(prototype)
    if span is None:
        return prototype
    start, end = span
    parameters = prototype[start:end]
    if "=" not in parameters:
        return prototype

    cleaned = []
    for parameter in split_parameters(parameters):
        if "=" in parameter:
            parameter = parameter[: parameter.index("=")]
        cleaned.append(parameter.strip())
    return prototype[:start] + ", ".join(cleaned) + prototype[end:]


__all__ = ["parameter_span", "split_parameters", "strip_default_arguments"]
