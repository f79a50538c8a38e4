"""Navigation pages (overview, package lists, class lists) built from the symbol table."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from ..errors import OutputWriteError
from ..logging import get_logger
from ..symbols import SymbolTable
from .rendering import TemplateRenderer

INDEX = "package-summary.html"
DEFAULT_PACKAGE_NAME = "(default package)"

ROOT_PAGES = ("index", "overview-frame", "allclasses-frame", "overview-summary")
PACKAGE_PAGES = ("package-summary", "package-frame")


@dataclass(frozen=True)
class ClassInfo:
    name: str
    dir: str
    filename: str


@dataclass
class PackageInfo:
    name: str
    dir: str
    root_ref: str
    classes: Dict[str, ClassInfo] = field(default_factory=dict)


@dataclass
class ProjectInfo:
    """Name-sorted packages and classes as seen by the templates."""

    all_packages: Dict[str, PackageInfo] = field(default_factory=dict)
    all_classes: Dict[str, ClassInfo] = field(default_factory=dict)


def build_project_info(table: SymbolTable) -> ProjectInfo:
    packages: Dict[str, PackageInfo] = {}
    classes: Dict[str, ClassInfo] = {}
    for package in table.packages():
        name = package.name
        directory = package.directory
        root_ref = "../" * len(name.split(".")) if name else ""
        if not name:
            # the default package has no directory of its own
            name, directory, root_ref = DEFAULT_PACKAGE_NAME, ".", "./"

        package_classes: Dict[str, ClassInfo] = {}
        for declaration in sorted(package, key=lambda d: d.name):
            info = ClassInfo(declaration.name, directory, declaration.filename)
            package_classes[declaration.name] = info
            # keyed with the package so equal class names in different packages all survive
            classes[f"{declaration.name}#{name}"] = info

        packages[name] = PackageInfo(name, directory, root_ref, package_classes)

    return ProjectInfo(
        all_packages={key: packages[key] for key in sorted(packages)},
        all_classes={key: classes[key] for key in sorted(classes)},
    )


class DirectoryIndexer:
    """Writes the root navigation pages and one summary and frame per package."""

    def __init__(
        self,
        table: SymbolTable,
        root: Path,
        renderer: TemplateRenderer | None = None,
        *,
        window_title: str = "",
        doc_title: str = "",
        bottom: str = "",
        output_encoding: str = "utf-8",
    ) -> None:
        self.table = table
        self.root = Path(root)
        self.renderer = renderer or TemplateRenderer()
        self.window_title = window_title
        self.doc_title = doc_title
        self.bottom = bottom
        self.output_encoding = output_encoding
        self.logger = get_logger("indexing.indexer")

    def process(self) -> List[Path]:
        """Render every page; returns the written paths."""
        info = build_project_info(self.table)
        context: Dict[str, object] = {
            "output_encoding": self.output_encoding,
            "window_title": self.window_title,
            "doc_title": self.doc_title,
            "bottom": self.bottom,
            "info": info,
            "root_ref": "",
            "index_page": INDEX,
        }
        written = [self._write(name, self.root, context) for name in ROOT_PAGES]
        for package_info in info.all_packages.values():
            package_context = dict(context, pkg_info=package_info, root_ref=package_info.root_ref)
            out_dir = self.root / package_info.dir
            written.extend(self._write(name, out_dir, package_context) for name in PACKAGE_PAGES)
        self.logger.info("Wrote %d index pages for %d packages", len(written), len(info.all_packages))
        return written

    def _write(self, name: str, out_dir: Path, context: Dict[str, object]) -> Path:
        content = self.renderer.render(name, context)
        target = out_dir / f"{name}.html"
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
            with target.open(
                "w", encoding=self.output_encoding, errors="xmlcharrefreplace", newline="\n"
            ) as handle:
                handle.write(content)
        except (OSError, LookupError) as exc:
            raise OutputWriteError(f"Unable to write {target}: {exc}") from exc
        self.logger.debug("Wrote %s", target)
        return target


__all__ = [
    "DEFAULT_PACKAGE_NAME",
    "INDEX",
    "ClassInfo",
    "DirectoryIndexer",
    "PackageInfo",
    "ProjectInfo",
    "build_project_info",
]
