"""Per-run stores shared by the pipeline stages."""

from .file_cache import SourceFileCache

__all__ = ["SourceFileCache"]
