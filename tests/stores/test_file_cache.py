"""Tests for the parsed source file cache."""

from __future__ import annotations

from pathlib import Path

import pytest

from srcxref.errors import SourceNotFoundError, SourceReadError
from srcxref.stores import SourceFileCache


def _write(path: Path, content: str, encoding: str = "utf-8") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding=encoding)
    return path


def test_file_cache_parses_once(tmp_path: Path) -> None:
    path = _write(tmp_path / "a" / "Foo.java", "package a;\nclass Foo {}\n")
    cache = SourceFileCache()

    first = cache.get(path)
    path.write_text("package changed;\nclass Other {}\n", encoding="utf-8")
    second = cache.get(path)

    assert first is second
    assert second.package == "a"
    assert path in cache
    assert len(cache) == 1


def test_file_cache_clear_forces_reparse(tmp_path: Path) -> None:
    path = _write(tmp_path / "Foo.java", "class Foo {}\n")
    cache = SourceFileCache()
    cache.get(path)
    path.write_text("class Bar {}\n", encoding="utf-8")

    cache.clear()

    assert cache.peek(path) is None
    assert [t.name for t in cache.get(path).types] == ["Bar"]


def test_file_cache_uses_configured_encoding(tmp_path: Path) -> None:
    path = _write(tmp_path / "Caf.java", "package café;\nclass Caf {}\n", encoding="latin-1")

    assert SourceFileCache("latin-1").get(path).package == "café"
    with pytest.raises(SourceReadError):
        SourceFileCache("utf-8").get(path)


def test_file_cache_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SourceNotFoundError):
        SourceFileCache().get(tmp_path / "Nope.java")


def test_file_cache_shares_entry_through_symlink(tmp_path: Path) -> None:
    path = _write(tmp_path / "real" / "p" / "A.java", "package p;\nclass A {}\n")
    link = tmp_path / "link"
    try:
        link.symlink_to(tmp_path / "real", target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks are not available")
    cache = SourceFileCache()

    first = cache.get(path)
    second = cache.get(link / "p" / "A.java")

    assert first is second
    assert len(cache) == 1
