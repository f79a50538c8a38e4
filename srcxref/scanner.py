"""Directory scanning with Ant-style include/exclude patterns."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Pattern, Sequence

from .errors import SourceNotFoundError

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".bzr",
    "CVS",
    "_darcs",
}

DEFAULT_EXCLUDES: tuple[str, ...] = (
    "**/*~",
    "**/#*#",
    "**/.#*",
    "**/%*%",
    "**/._*",
    "**/.DS_Store",
)


@dataclass
class GlobPattern:
    """An Ant-style pattern matched against ``/``-separated relative paths."""

    pattern: str
    regex: Pattern[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.regex = _compile_pattern(self.pattern)

    def matches(self, rel_path: str) -> bool:
        return self.regex.fullmatch(rel_path.replace("\\", "/")) is not None


def _compile_pattern(pattern: str) -> Pattern[str]:
    normalized = pattern.strip().replace("\\", "/").lstrip("/")
    if normalized.endswith("/"):
        normalized += "**"
    parts = normalized.split("/")
    pieces: List[str] = []
    for index, part in enumerate(parts):
        last = index == len(parts) - 1
        if part == "**":
            pieces.append(".*" if last else "(?:[^/]*/)*")
            continue
        pieces.append(_translate_segment(part))
        if not last:
            pieces.append("/")
    return re.compile("".join(pieces))


def _translate_segment(segment: str) -> str:
    out: List[str] = []
    for char in segment:
        if char == "*":
            out.append("[^/]*")
        elif char == "?":
            out.append("[^/]")
        else:
            out.append(re.escape(char))
    return "".join(out)


class DirectoryScanner:
    """Lists the files below a root that match the includes and none of the excludes."""

    def __init__(
        self,
        includes: Sequence[str] | None = None,
        excludes: Sequence[str] | None = None,
        *,
        default_excludes: bool = True,
    ) -> None:
        self.includes = [GlobPattern(p) for p in (includes or ["**"])]
        combined = list(excludes or [])
        if default_excludes:
            combined.extend(DEFAULT_EXCLUDES)
        self.excludes = [GlobPattern(p) for p in combined]

    def scan(self, root: Path) -> List[str]:
        """Return the sorted relative paths of the included files."""
        root_path = Path(root).expanduser()
        if not root_path.exists():
            raise SourceNotFoundError(f"Source directory not found: {root}")
        if not root_path.is_dir():
            raise SourceNotFoundError(f"Source path is not a directory: {root}")
        return sorted(
            rel_path for rel_path in _iter_files(root_path) if self.is_included(rel_path)
        )

    def is_included(self, rel_path: str) -> bool:
        if not any(pattern.matches(rel_path) for pattern in self.includes):
            return False
        return not any(pattern.matches(rel_path) for pattern in self.excludes)


def _iter_files(root: Path) -> Iterator[str]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""
        dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)
        for filename in filenames:
            yield f"{rel_dir}/{filename}" if rel_dir else filename


def has_sources(directory: Path, extensions: Iterable[str]) -> bool:
    """Return True when ``directory`` holds a matching file at any depth."""
    suffixes = tuple(extensions)
    if not directory.is_dir():
        return False
    for child in sorted(directory.iterdir()):
        if child.is_file():
            if child.name.endswith(suffixes):
                return True
        elif _looks_like_package_dir(child.name) and has_sources(child, suffixes):
            return True
    return False


def _looks_like_package_dir(name: str) -> bool:
    # skips .svn, .git and friends
    return bool(name) and (name[0].isalpha() or name[0] in "_$")


def prune_source_dirs(source_dirs: Iterable[str | Path], extensions: Iterable[str]) -> List[Path]:
    """Drop duplicate roots and roots that contain no source files."""
    suffixes = tuple(extensions)
    pruned: List[Path] = []
    for raw in source_dirs:
        directory = Path(raw).expanduser()
        if directory in pruned:
            continue
        if has_sources(directory, suffixes):
            pruned.append(directory)
    return pruned


__all__ = [
    "DEFAULT_EXCLUDES",
    "DirectoryScanner",
    "GlobPattern",
    "has_sources",
    "prune_source_dirs",
]
