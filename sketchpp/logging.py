"""Logging utilities for sketchpp runs."""

from __future__ import annotations

import logging
from contextvars import ContextVar
from pathlib import Path

_LOGGER_NAME = "sketchpp"
_CONSOLE_FORMAT = "[sketchpp] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(stage)s]: %(message)s"

_current_stage: ContextVar[str] = ContextVar("sketchpp_stage", default="-")


class StageFilter(logging.Filter):
    """Stamps each record with the pipeline stage active when it was logged."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.stage = _current_stage.get()
        return True


def set_stage(stage: str) -> None:
    """Record ``stage`` as the pipeline stage for subsequent log records."""
    _current_stage.set(stage)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the sketchpp hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure console output, plus a stage-annotated file sink when requested."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated CLI invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.addFilter(StageFilter())
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["StageFilter", "configure_logging", "get_logger", "set_stage"]
