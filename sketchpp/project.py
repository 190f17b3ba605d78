"""Sketch project discovery and output folder housekeeping."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from .config import COMPANION_EXTENSIONS, SKETCH_EXTENSIONS
from .errors import InvalidInputError
from .logging import get_logger
from .models import SketchProject, SourceFile


def _require_directory(path: str | Path, label: str) -> Path:
    candidate = Path(path).expanduser()
    if not candidate.is_dir():
        raise InvalidInputError(f"{label} is not a directory: {path}")
    return candidate.resolve()


def _iter_matching(folder: Path, extensions: Sequence[str]) -> Iterator[Path]:
    # Non-recursive and case-sensitive, like a shell glob.
    for entry in folder.iterdir():
        if entry.is_file() and entry.suffix in extensions:
            yield entry


def sort_sketch_files(files: Iterable[SourceFile], project_name: str) -> List[SourceFile]:
    """Return files with the main sketch first and the rest by basename."""
    return sorted(files, key=lambda source: (source.stem != project_name, source.basename))


def read_source(path: Path) -> SourceFile:
    content = path.read_text(encoding="utf-8", errors="surrogateescape")
    return SourceFile(path=path, basename=path.name, content=content)


class ProjectScanner:
    """Validates a sketch folder and gathers the files a run needs."""

    def __init__(
        self,
        sketch_extensions: Sequence[str] = SKETCH_EXTENSIONS,
        companion_extensions: Sequence[str] = COMPANION_EXTENSIONS,
    ) -> None:
        self.sketch_extensions = tuple(sketch_extensions)
        self.companion_extensions = tuple(companion_extensions)
        self.logger = get_logger("project")

    def validate_folders(self, project_folder: str | Path, output_folder: str | Path) -> tuple[Path, Path]:
        """Return resolved folders, raising before anything is touched on disk."""
        project_root = _require_directory(project_folder, "Project folder")
        output_root = _require_directory(output_folder, "Output folder")
        if project_root == output_root:
            # Clearing the output folder would delete the project sources.
            raise InvalidInputError("Output folder must differ from the project folder")
        return project_root, output_root

    def scan(self, project_folder: str | Path) -> SketchProject:
        """Return the ordered sketch files and companion sources of a project."""
        root = _require_directory(project_folder, "Project folder")
        name = root.name
        if not any(
            (root / f"{name}{extension}").is_file() for extension in self.sketch_extensions
        ):
            expected = " or ".join(f"{name}{extension}" for extension in self.sketch_extensions)
            raise InvalidInputError(
                f"Project folder doesn't look like a sketch project (expected {expected} in {root})"
            )

        sources = [read_source(path) for path in _iter_matching(root, self.sketch_extensions)]
        ordered = sort_sketch_files(sources, name)
        companions = sorted(_iter_matching(root, self.companion_extensions), key=lambda p: p.name)
        self.logger.debug(
            "Project %s: %d sketch file(s), %d companion file(s)",
            name,
            len(ordered),
            len(companions),
        )
        return SketchProject(name=name, root=root, sketch_files=ordered, companion_files=companions)

    def clear_output(self, output_folder: Path) -> List[Path]:
        """Delete artifacts a previous run may have left in the output folder."""
        removed: List[Path] = []
        for path in _iter_matching(output_folder, self.sketch_extensions + self.companion_extensions):
            path.unlink()
            removed.append(path)
        if removed:
            self.logger.debug("Removed %d stale artifact(s) from %s", len(removed), output_folder)
        return removed

    def copy_companions(self, project: SketchProject, output_folder: Path) -> List[Path]:
        """Copy companion sources into the output folder unchanged."""
        copied: List[Path] = []
        for source in project.companion_files:
            target = output_folder / source.name
            shutil.copyfile(source, target)
            copied.append(target)
        return copied


__all__ = ["ProjectScanner", "read_source", "sort_sketch_files"]
