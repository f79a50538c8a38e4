"""In-memory cache of parsed source files for one run."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterator, Optional

from ..languages import JAVA, LanguageRegistry, SourceLanguage
from ..logging import get_logger
from ..models import SourceFile
from ..parsing import parse_source

_LOGGER = get_logger("stores.file_cache")


class SourceFileCache:
    """Parses each path at most once and hands out the same SourceFile afterwards."""

    def __init__(
        self,
        encoding: str | None = None,
        *,
        languages: LanguageRegistry | None = None,
    ) -> None:
        self.encoding = encoding
        self._languages = languages or LanguageRegistry()
        self._files: Dict[Path, SourceFile] = {}

    @property
    def languages(self) -> LanguageRegistry:
        return self._languages

    def get(self, path: Path) -> SourceFile:
        key = self._key(path)
        cached = self._files.get(key)
        if cached is not None:
            return cached
        _LOGGER.debug("parsing... %s", key)
        parsed = parse_source(key, self.encoding, self._language_for(key))
        self._files[key] = parsed
        return parsed

    def peek(self, path: Path) -> Optional[SourceFile]:
        return self._files.get(self._key(path))

    def clear(self) -> None:
        self._files.clear()

    def __contains__(self, path: object) -> bool:
        return isinstance(path, Path) and self._key(path) in self._files

    def __iter__(self) -> Iterator[SourceFile]:
        return iter(list(self._files.values()))

    def __len__(self) -> int:
        return len(self._files)

    # ------------------------------------------------------------------
    # Internal helpers

    def _language_for(self, path: Path) -> SourceLanguage:
        return self._languages.for_path(path) or JAVA

    @staticmethod
    def _key(path: Path) -> Path:
        # symlinked or ".." spellings of one file share an entry
        return Path(path).expanduser().resolve()


__all__ = ["SourceFileCache"]
