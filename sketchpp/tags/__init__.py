"""Tag extraction and parsing."""

from .extractor import CtagsExtractor, ExtractorOutput, TagExtractor
from .parser import TagParser

__all__ = ["CtagsExtractor", "ExtractorOutput", "TagExtractor", "TagParser"]
