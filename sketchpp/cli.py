"""CLI entrypoint for sketchpp."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import VARIANTS
from .errors import ExtractionError, InvalidInputError, UsageError
from .logging import configure_logging
from .orchestrator import Orchestrator


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports bad invocations as :class:`UsageError`."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="sketchpp",
        description=(
            "Merge the sketch files of a project into one translation unit and "
            "add forward declarations for every function."
        ),
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    parser.add_argument(
        "--variant",
        choices=sorted(VARIANTS),
        default=None,
        help="Pipeline variant (overrides .sketchpp.yml).",
    )
    parser.add_argument(
        "--ctags",
        default=None,
        help="Path to the ctags executable (overrides SKETCHPP_CTAGS and .sketchpp.yml).",
    )
    parser.add_argument("project_folder", help="Folder holding <folder name>.ino and its siblings.")
    parser.add_argument("output_folder", help="Folder that receives the preprocessed sources.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for sketchpp."""
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        parser.print_usage(sys.stderr)
        parser.exit(2, f"{parser.prog}: error: {exc}\n")

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    orchestrator = Orchestrator(variant=args.variant, executable=args.ctags)
    try:
        result = orchestrator.run(args.project_folder, args.output_folder)
    except InvalidInputError as exc:
        parser.exit(1, f"{exc}\n")
    except ExtractionError as exc:
        parser.exit(1, f"sketchpp failed: {exc}\nRun with --verbose for more details.\n")
    except Exception as exc:  # pragma: no cover - defensive guard
        parser.exit(1, f"sketchpp failed: {exc}\nRun with --verbose for more details.\n")
    print(f"Preprocessed sketch written to {_relativize(result.output_path)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
