"""Error taxonomy for preprocessing runs."""

from __future__ import annotations


class SketchError(RuntimeError):
    """Base class for errors that abort a preprocessing run."""


class UsageError(SketchError):
    """Raised when the command line is missing required arguments."""


class InvalidInputError(SketchError):
    """Raised when a folder argument is unusable or is not a sketch project."""


class ExtractionError(SketchError):
    """Raised when the tag extraction tool fails.

    ``diagnostics`` holds whatever the tool wrote to stderr so the caller can
    surface it verbatim.
    """

    def __init__(
        self, message: str, *, returncode: int | None = None, diagnostics: str = ""
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.diagnostics = diagnostics

    def __str__(self) -> str:
        message = super().__str__()
        if self.diagnostics:
            return f"{message}: {self.diagnostics}"
        return message


class RecordParseError(ValueError):
    """Raised for a single tag line that cannot be decomposed."""


class SynthesisSkip(ValueError):
    """Raised when a tag record lacks the fields needed for a prototype."""


__all__ = [
    "ExtractionError",
    "InvalidInputError",
    "RecordParseError",
    "SketchError",
    "SynthesisSkip",
    "UsageError",
]
