"""Core data models shared across sketchpp components."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class SourceFile:
    """A sketch file read from the project folder."""

    path: Path
    basename: str
    content: str

    @property
    def stem(self) -> str:
        return Path(self.basename).stem


@dataclass
class SketchProject:
    """Normalized view of a sketch project folder."""

    name: str
    root: Path
    sketch_files: List[SourceFile]
    companion_files: List[Path] = field(default_factory=list)


class TagKind(str, Enum):
    """Symbol kinds reported by the tag extractor."""

    PROTOTYPE = "prototype"
    FUNCTION = "function"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Optional[str]) -> "TagKind":
        if value is None:
            return cls.OTHER
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


@dataclass
class TagRecord:
    """One symbol occurrence reported by the tag extractor."""

    name: str
    kind: TagKind = TagKind.OTHER
    line: Optional[int] = None
    typeref: Optional[str] = None
    signature: Optional[str] = None
    returntype: Optional[str] = None
    code: Optional[str] = None
    prototype: Optional[str] = None
