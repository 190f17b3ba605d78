"""Prototype synthesis."""

from .defaults import strip_default_arguments
from .synthesizer import PrototypeSynthesizer, build_prototype

__all__ = ["PrototypeSynthesizer", "build_prototype", "strip_default_arguments"]
