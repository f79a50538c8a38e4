"""Error types raised by the cross-reference pipeline."""

from __future__ import annotations


class XrefError(RuntimeError):
    """Base error for all cross-reference failures."""


class SourceReadError(XrefError):
    """Raised when a source file cannot be read or decoded."""


class SourceNotFoundError(SourceReadError):
    """Raised when a source file does not exist."""


class OutputWriteError(XrefError):
    """Raised when a destination directory or file cannot be written."""


class IndexingError(XrefError):
    """Raised when the navigation pages cannot be generated."""


class TemplateResolutionError(IndexingError):
    """Raised when a named template is missing from the configured location."""


__all__ = [
    "IndexingError",
    "OutputWriteError",
    "SourceNotFoundError",
    "SourceReadError",
    "TemplateResolutionError",
    "XrefError",
]
