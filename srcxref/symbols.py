"""Project-wide symbol table: package name to declared types."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Set

from .logging import get_logger
from .models import Package, SourceFile, TypeDeclaration
from .scanner import DirectoryScanner
from .stores import SourceFileCache


class SymbolTable:
    """Aggregates parsed files into packages, scanning each root only once."""

    def __init__(
        self,
        cache: SourceFileCache | None = None,
        *,
        includes: Sequence[str] | None = None,
        excludes: Sequence[str] | None = None,
    ) -> None:
        self.cache = cache or SourceFileCache()
        self.includes: List[str] = list(includes) if includes else self.cache.languages.default_includes()
        self.excludes: List[str] = list(excludes or [])
        self._packages: Dict[str, Package] = {}
        self._default_package = Package()
        self._roots: Set[Path] = set()
        self.logger = get_logger("symbols")

    def add_package(self, package: Package) -> None:
        self._packages[package.name] = package

    def get_package(self, name: str | None) -> Optional[Package]:
        if name is None:
            return self._default_package
        return self._packages.get(name)

    def packages(self) -> List[Package]:
        return [self._packages[name] for name in sorted(self._packages)]

    def __iter__(self) -> Iterator[Package]:
        return iter(self.packages())

    def __contains__(self, name: object) -> bool:
        return name in self._packages

    def find_type(self, package_name: str, type_name: str) -> Optional[TypeDeclaration]:
        package = self._packages.get(package_name)
        if package is None:
            return None
        return package.get_type(type_name)

    def process(self, root: Path) -> bool:
        """Scan ``root`` unless it was already processed. Returns True when it was scanned."""
        key = Path(root).expanduser().resolve()
        if key in self._roots:
            return False
        self._roots.add(key)
        self._parse(key)
        return True

    def register(self, source: SourceFile) -> Package:
        """Merge one parsed file into the package of its declared name."""
        package = self._packages.get(source.package)
        if package is None:
            package = Package(source.package)
            self.add_package(package)
        for declaration in source.types:
            package.add_type(declaration)
        return package

    def dump(self) -> None:
        self.logger.debug("Dumping out symbol table structure")
        for package in self.packages():
            self.logger.debug(package.name)
            for declaration in package:
                self.logger.debug("\t%s", declaration.name)

    def source_paths(self, root: Path) -> List[str]:
        """Relative paths below ``root`` that this table reads, sorted."""
        # the language marker files (package-info.java) are never scanned
        excludes = self.excludes + self.cache.languages.default_excludes()
        return DirectoryScanner(self.includes, excludes).scan(root)

    def _parse(self, base_dir: Path) -> None:
        self.logger.debug("Scanning %s", base_dir)
        for rel_path in self.source_paths(base_dir):
            source = self.cache.get(base_dir / rel_path)
            self.register(source)


__all__ = ["SymbolTable"]
