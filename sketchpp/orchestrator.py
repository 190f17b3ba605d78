"""Pipeline orchestration for a single preprocessing run."""

from __future__ import annotations

import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List

from .composer import DocumentComposer
from .config import PipelineVariant, SketchConfig, load_config
from .errors import SketchError
from .insertion import InsertionPointLocator
from .logging import get_logger, set_stage
from .models import SketchProject, TagRecord
from .project import ProjectScanner
from .prototypes import PrototypeSynthesizer
from .tags import CtagsExtractor, TagExtractor, TagParser
from .unifier import SourceUnifier, UnifiedBuffer


class PipelineStage(str, Enum):
    START = "start"
    UNIFIED = "unified"
    EXTRACTED = "extracted"
    PARSED = "parsed"
    SYNTHESIZED = "synthesized"
    LOCATED = "located"
    COMPOSED = "composed"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PreprocessResult:
    """Outcome of a completed run."""

    output_path: Path
    prototypes: List[str]
    copied: List[Path] = field(default_factory=list)
    stage: PipelineStage = PipelineStage.DONE


class Orchestrator:
    """Runs the unify, extract, synthesize and compose stages in order."""

    def __init__(
        self,
        extractor: TagExtractor | None = None,
        parser: TagParser | None = None,
        locator: InsertionPointLocator | None = None,
        *,
        variant: str | None = None,
        executable: str | None = None,
    ) -> None:
        self._extractor_override = extractor
        self.parser = parser or TagParser()
        self.locator = locator or InsertionPointLocator()
        self._variant_override = variant
        self._executable_override = executable
        self.stage = PipelineStage.START
        self.logger = get_logger("orchestrator")

    def run(self, project_folder: str | Path, output_folder: str | Path) -> PreprocessResult:
        """Preprocess ``project_folder`` into ``output_folder``."""
        self.stage = PipelineStage.START
        set_stage(self.stage.value)
        try:
            return self._run(project_folder, output_folder)
        except Exception as exc:
            self._advance(PipelineStage.FAILED)
            if isinstance(exc, SketchError):
                self.logger.debug("Run aborted: %s", exc)
            else:
                self.logger.exception("Run aborted by unexpected error")
            raise

    def _run(self, project_folder: str | Path, output_folder: str | Path) -> PreprocessResult:
        bootstrap = ProjectScanner()
        project_root, output_root = bootstrap.validate_folders(project_folder, output_folder)
        config = load_config(project_root)
        variant = config.resolve_variant(self._variant_override)
        self.logger.info("Preprocessing %s with the %s pipeline", project_root.name, variant.name)

        scanner = ProjectScanner(config.sketch_extensions, config.companion_extensions)
        project = scanner.scan(project_root)
        scanner.clear_output(output_root)
        copied = scanner.copy_companions(project, output_root)

        buffer = SourceUnifier(line_markers=variant.line_markers).unify(project.sketch_files)
        self._advance(PipelineStage.UNIFIED)

        lines = self._extract(project, buffer, self._resolve_extractor(config, variant))
        self._advance(PipelineStage.EXTRACTED)

        records = self.parser.parse(lines)
        self._advance(PipelineStage.PARSED)

        synthesized = PrototypeSynthesizer(buffer).synthesize(records)
        prototypes = _prototype_lines(synthesized)
        self._advance(PipelineStage.SYNTHESIZED)

        offset = self.locator.locate(buffer.text)
        self._advance(PipelineStage.LOCATED)

        text = DocumentComposer(line_correction=variant.line_correction).compose(
            buffer, offset, prototypes
        )
        self._advance(PipelineStage.COMPOSED)

        output_path = output_root / f"{project.name}{config.sketch_extensions[0]}"
        output_path.write_text(text, encoding="utf-8", errors="surrogateescape")
        self._advance(PipelineStage.DONE)
        self.logger.info("Wrote %s with %d prototype(s)", output_path, len(prototypes))
        return PreprocessResult(output_path=output_path, prototypes=prototypes, copied=copied)

    def _resolve_extractor(self, config: SketchConfig, variant: PipelineVariant) -> TagExtractor:
        if self._extractor_override is not None:
            return self._extractor_override
        return CtagsExtractor(
            executable=config.resolve_executable(self._executable_override),
            arguments=variant.extractor_arguments,
        )

    def _extract(
        self, project: SketchProject, buffer: UnifiedBuffer, extractor: TagExtractor
    ) -> List[str]:
        # The extractor reads from disk; keep that copy out of the output folder
        # so a failed run leaves no primary file behind.
        with tempfile.TemporaryDirectory(prefix="sketchpp-") as workdir:
            source_path = Path(workdir) / f"{project.name}.ino"
            source_path.write_text(buffer.text, encoding="utf-8", errors="surrogateescape")
            return extractor.extract(source_path)

    def _advance(self, stage: PipelineStage) -> None:
        self.logger.debug("Stage %s -> %s", self.stage.value, stage.value)
        self.stage = stage
        set_stage(stage.value)


def _prototype_lines(records: List[TagRecord]) -> List[str]:
    return [record.prototype for record in records if record.prototype]


__all__ = ["Orchestrator", "PipelineStage", "PreprocessResult"]
