"""Out-of-process tag extraction."""

from __future__ import annotations

import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Sequence

from ..config import VARIANTS
from ..errors import ExtractionError
from ..logging import get_logger


@dataclass(frozen=True)
class ExtractorOutput:
    """Captured result of one extractor process."""

    returncode: int
    stdout: str
    stderr: str


class TagExtractor(ABC):
    """Contract for tools that report function symbols in a source file."""

    @abstractmethod
    def extract(self, source_path: Path) -> List[str]:
        """Return the raw tab-separated tag lines for ``source_path``."""


class CtagsExtractor(TagExtractor):
    """Runs ctags against a file and returns its tag lines."""

    def __init__(
        self,
        executable: str = "ctags",
        arguments: Sequence[str] = VARIANTS["default"].extractor_arguments,
        runner: Callable[[Sequence[str]], ExtractorOutput] | None = None,
    ) -> None:
        self.executable = executable
        self.arguments = tuple(arguments)
        self._runner = runner or self._default_runner
        self.logger = get_logger("tags.extractor")

    def command(self, source_path: Path) -> List[str]:
        return [self.executable, *self.arguments, str(source_path)]

    def extract(self, source_path: Path) -> List[str]:
        args = self.command(source_path)
        self.logger.debug("Running %s", " ".join(args))
        try:
            result = self._runner(args)
        except FileNotFoundError as exc:
            raise ExtractionError(
                f"Unable to locate '{self.executable}'. Install ctags or point SKETCHPP_CTAGS at it."
            ) from exc

        diagnostics = result.stderr.strip()
        if result.returncode != 0:
            raise ExtractionError(
                f"{self.executable} exited with status {result.returncode}",
                returncode=result.returncode,
                diagnostics=diagnostics,
            )
        if not result.stdout.strip() and diagnostics:
            raise ExtractionError(
                f"{self.executable} produced no tags",
                returncode=result.returncode,
                diagnostics=diagnostics,
            )
        if diagnostics:
            self.logger.warning("%s: %s", self.executable, diagnostics)
        return result.stdout.splitlines()

    @staticmethod
    def _default_runner(args: Sequence[str]) -> ExtractorOutput:
        completed = subprocess.run(
            list(args),
            check=False,
            capture_output=True,
            encoding="utf-8",
            errors="surrogateescape",
        )
        return ExtractorOutput(
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )


__all__ = ["CtagsExtractor", "ExtractorOutput", "TagExtractor"]
