"""Source language profiles and their discovery."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from importlib import metadata
from pathlib import Path
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

_ENTRY_POINT_GROUP = "srcxref.languages"

# Kept as data: several entries predate current language revisions and newer
# contextual keywords are missing.
JAVA_RESERVED_WORDS: FrozenSet[str] = frozenset(
    {
        "abstract",
        "boolean",
        "break",
        "byvalue",
        "case",
        "cast",
        "catch",
        "char",
        "class",
        "const",
        "continue",
        "default",
        "do",
        "double",
        "else",
        "extends",
        "final",
        "finally",
        "float",
        "for",
        "generic",
        "goto",
        "if",
        "implements",
        "import",
        "inner",
        "int",
        "interface",
        "long",
        "native",
        "new",
        "null",
        "operator",
        "outer",
        "package",
        "private",
        "protected",
        "public",
        "rest",
        "return",
        "short",
        "static",
        "super",
        "switch",
        "synchronized",
        "this",
        "throw",
        "throws",
        "transient",
        "true",
        "try",
        "var",
        "void",
        "volatile",
        "while",
    }
)


@dataclass(frozen=True)
class SourceLanguage:
    """Everything the parser and highlighter need to know about one language."""

    name: str
    extensions: Tuple[str, ...]
    type_keywords: FrozenSet[str]
    reserved_words: FrozenSet[str]
    implicit_imports: Tuple[str, ...] = ()
    package_marker: Optional[str] = None
    default_includes: Tuple[str, ...] = field(default=())

    def strip_extension(self, filename: str) -> str:
        """Return ``filename`` without this language's extension (or its last suffix)."""
        for extension in self.extensions:
            if filename.endswith(extension):
                return filename[: -len(extension)]
        stem, dot, _ = filename.rpartition(".")
        return stem if dot and stem else filename

    @property
    def default_excludes(self) -> Tuple[str, ...]:
        if not self.package_marker:
            return ()
        return (f"**/{self.package_marker}",)

    def with_reserved_words(self, words: Iterable[str]) -> "SourceLanguage":
        return replace(self, reserved_words=frozenset(words))


JAVA = SourceLanguage(
    name="java",
    extensions=(".java",),
    type_keywords=frozenset({"class", "interface", "enum", "record"}),
    reserved_words=JAVA_RESERVED_WORDS,
    implicit_imports=("java.lang.*",),
    package_marker="package-info.java",
    default_includes=("**/*.java",),
)

_BUILTIN_FACTORIES: dict[str, Callable[[], SourceLanguage]] = {
    "java": lambda: JAVA,
}


def discover_languages(enabled: Sequence[str] | None = None) -> List[SourceLanguage]:
    """Return the built-in languages plus any registered through entry points."""
    enabled_set = {name.lower() for name in enabled} if enabled is not None else None
    languages: List[SourceLanguage] = []
    seen: set[str] = set()

    def _add(name: str, factory: Callable[[], object]) -> None:
        key = name.lower()
        if key in seen:
            return
        if enabled_set is not None and key not in enabled_set:
            return
        instance = factory()
        if not isinstance(instance, SourceLanguage):
            raise TypeError(f"Language factory for '{name}' did not return a SourceLanguage")
        languages.append(instance)
        seen.add(key)

    for name, factory in _BUILTIN_FACTORIES.items():
        _add(name, factory)

    for entry in _iter_entry_points():
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - depends on installed plugins
            raise RuntimeError(f"Failed to load language entry point '{entry.name}': {exc}") from exc
        _add(entry.name, loaded if callable(loaded) else (lambda obj=loaded: obj))

    if enabled_set:
        missing = enabled_set - seen
        if missing:
            raise ValueError(f"Unknown languages requested: {', '.join(sorted(missing))}")

    return languages


class LanguageRegistry:
    """Maps file extensions to language profiles, caching each decision."""

    def __init__(self, languages: Iterable[SourceLanguage] | None = None) -> None:
        self._languages = list(languages) if languages is not None else discover_languages()
        self._by_extension: Dict[str, Optional[SourceLanguage]] = {}

    @property
    def languages(self) -> List[SourceLanguage]:
        return list(self._languages)

    def for_path(self, path: Path | str) -> Optional[SourceLanguage]:
        suffix = Path(path).suffix.lower()
        if suffix not in self._by_extension:
            self._by_extension[suffix] = next(
                (language for language in self._languages if suffix in language.extensions),
                None,
            )
        return self._by_extension[suffix]

    def default_includes(self) -> List[str]:
        includes: List[str] = []
        for language in self._languages:
            includes.extend(language.default_includes)
        return includes

    def default_excludes(self) -> List[str]:
        excludes: List[str] = []
        for language in self._languages:
            excludes.extend(language.default_excludes)
        return excludes


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    try:
        entry_points = metadata.entry_points()
    except Exception:  # pragma: no cover - broken installed metadata
        return []
    return entry_points.select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "JAVA",
    "JAVA_RESERVED_WORDS",
    "LanguageRegistry",
    "SourceLanguage",
    "discover_languages",
]
