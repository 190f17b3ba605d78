"""Configuration loading for sketchpp (.sketchpp.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from .errors import InvalidInputError

CONFIG_FILENAME = ".sketchpp.yml"
CTAGS_ENV_KEY = "SKETCHPP_CTAGS"
DEFAULT_EXECUTABLE = "ctags"

SKETCH_EXTENSIONS: Tuple[str, ...] = (".ino", ".pde")
COMPANION_EXTENSIONS: Tuple[str, ...] = (".cpp", ".c", ".h", ".S")


class ConfigError(InvalidInputError):
    """Raised when the configuration file cannot be parsed."""


@dataclass(frozen=True)
class PipelineVariant:
    """Knobs that distinguish the flavours of the preprocessing pipeline."""

    name: str
    line_markers: bool
    line_correction: bool
    extractor_arguments: Tuple[str, ...]


VARIANTS: Dict[str, PipelineVariant] = {
    "default": PipelineVariant(
        name="default",
        line_markers=True,
        line_correction=True,
        extractor_arguments=(
            "--language-force=c++",
            "-f",
            "-",
            "--c++-kinds=pf",
            "--fields=KSTtzn",
        ),
    ),
    "plain": PipelineVariant(
        name="plain",
        line_markers=False,
        line_correction=False,
        extractor_arguments=(
            "--language-force=c++",
            "-f",
            "-",
            "--c++-kinds=svpf",
            "--fields=KSTtzn",
        ),
    ),
}

DEFAULT_VARIANT = "default"


@dataclass
class ExtractorConfig:
    """Tag extractor settings from .sketchpp.yml."""

    executable: Optional[str] = None
    arguments: Optional[List[str]] = None


@dataclass
class SketchConfig:
    """Represents the settings defined in .sketchpp.yml."""

    root: Path
    variant: str = DEFAULT_VARIANT
    line_markers: Optional[bool] = None
    line_correction: Optional[bool] = None
    extractor: ExtractorConfig = field(default_factory=ExtractorConfig)
    sketch_extensions: Tuple[str, ...] = SKETCH_EXTENSIONS
    companion_extensions: Tuple[str, ...] = COMPANION_EXTENSIONS

    def resolve_variant(self, override: str | None = None) -> PipelineVariant:
        """Return the effective pipeline variant with file-level overrides applied."""
        name = override or self.variant
        base = VARIANTS.get(name)
        if base is None:
            known = ", ".join(sorted(VARIANTS))
            raise ConfigError(f"Unknown pipeline variant '{name}' (expected one of: {known})")
        changes: Dict[str, Any] = {}
        if self.line_markers is not None:
            changes["line_markers"] = self.line_markers
        if self.line_correction is not None:
            changes["line_correction"] = self.line_correction
        if self.extractor.arguments is not None:
            changes["extractor_arguments"] = tuple(self.extractor.arguments)
        return replace(base, **changes) if changes else base

    def resolve_executable(
        self,
        override: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> str:
        """Pick the extractor binary: flag, then environment, then file, then PATH."""
        if override:
            return override
        env = os.environ if environ is None else environ
        from_env = env.get(CTAGS_ENV_KEY, "").strip()
        if from_env:
            return from_env
        if self.extractor.executable:
            return self.extractor.executable
        return DEFAULT_EXECUTABLE


def load_config(config_path: Path) -> SketchConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return SketchConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    variant = _as_str(data.get("variant")) or DEFAULT_VARIANT
    if variant not in VARIANTS:
        known = ", ".join(sorted(VARIANTS))
        raise ConfigError(f"Unknown pipeline variant '{variant}' (expected one of: {known})")

    extractor_data = _as_dict(data.get("extractor"))
    extractor = ExtractorConfig()
    if extractor_data:
        extractor.executable = _as_str(extractor_data.get("executable"))
        if "arguments" in extractor_data:
            extractor.arguments = _as_str_list(extractor_data.get("arguments"))

    extensions_data = _as_dict(data.get("extensions"))
    sketch_extensions = SKETCH_EXTENSIONS
    companion_extensions = COMPANION_EXTENSIONS
    if extensions_data:
        if "sketch" in extensions_data:
            sketch_extensions = _as_extensions(extensions_data.get("sketch"))
            if not sketch_extensions:
                raise ConfigError("extensions.sketch must list at least one extension")
        if "companion" in extensions_data:
            companion_extensions = _as_extensions(extensions_data.get("companion"))

    return SketchConfig(
        root=root,
        variant=variant,
        line_markers=_as_bool(data.get("line_markers")),
        line_correction=_as_bool(data.get("line_correction")),
        extractor=extractor,
        sketch_extensions=sketch_extensions,
        companion_extensions=companion_extensions,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return value.split()
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    return []


def _as_extensions(value: Any) -> Tuple[str, ...]:
    extensions: List[str] = []
    for item in _as_str_list(value):
        item = item.strip()
        if not item:
            continue
        extensions.append(item if item.startswith(".") else f".{item}")
    return tuple(extensions)


__all__ = [
    "COMPANION_EXTENSIONS",
    "CONFIG_FILENAME",
    "ConfigError",
    "ExtractorConfig",
    "PipelineVariant",
    "SKETCH_EXTENSIONS",
    "SketchConfig",
    "VARIANTS",
    "load_config",
]
