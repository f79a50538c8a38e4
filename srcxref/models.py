"""Core data models shared across srcxref components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple


@dataclass(frozen=True)
class ImportSpec:
    """A single import statement: either ``a.b.C`` or the wildcard ``a.b.*``."""

    name: str

    @property
    def is_wildcard(self) -> bool:
        return self.name.endswith(".*")

    @property
    def package(self) -> str:
        """Return the package portion of the import."""
        if self.is_wildcard:
            return self.name[:-2]
        head, _, _ = self.name.rpartition(".")
        return head

    @property
    def class_name(self) -> Optional[str]:
        """Return the imported simple class name, or None for wildcard imports."""
        if self.is_wildcard:
            return None
        return self.name.rpartition(".")[2]


@dataclass(frozen=True)
class TypeDeclaration:
    """A class, interface, enum or record declared in a source file.

    ``name`` carries the enclosing types as a dotted prefix (``Outer.Inner``)
    and ``filename`` is the declaring file without its extension, so every
    type declared in one file links to that file's page.
    """

    name: str
    filename: str
    line: int = 0

    @property
    def simple_name(self) -> str:
        return self.name.rpartition(".")[2]


@dataclass(frozen=True)
class SourceFile:
    """Parsed view of one source file."""

    path: Path
    package: str = ""
    imports: Tuple[ImportSpec, ...] = ()
    types: Tuple[TypeDeclaration, ...] = ()
    encoding: Optional[str] = None
    filename: str = ""

    @property
    def primary_type(self) -> Optional[TypeDeclaration]:
        return self.types[0] if self.types else None

    @property
    def display_name(self) -> str:
        """Name used for page titles and javadoc links."""
        primary = self.primary_type
        if primary is not None and primary.filename:
            return primary.filename
        return self.filename

    @property
    def package_depth(self) -> int:
        return len(self.package.split(".")) if self.package else 0

    @property
    def root_ref(self) -> str:
        """Relative path from this file's output directory back to the destination root."""
        return "../" * self.package_depth


@dataclass
class Package:
    """Named bucket of declared types sharing a dotted namespace."""

    name: str = ""
    types: Dict[str, TypeDeclaration] = field(default_factory=dict)

    def add_type(self, declaration: TypeDeclaration) -> None:
        self.types[declaration.name] = declaration

    def get_type(self, name: str) -> Optional[TypeDeclaration]:
        return self.types.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.types

    def __iter__(self) -> Iterator[TypeDeclaration]:
        return iter(self.types.values())

    @property
    def directory(self) -> str:
        return self.name.replace(".", "/")
