"""Sketch preprocessor: single translation unit plus forward declarations."""

__version__ = "0.1.0"
