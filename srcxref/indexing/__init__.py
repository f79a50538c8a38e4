"""Navigation page generation."""

from .indexer import ClassInfo, DirectoryIndexer, PackageInfo, ProjectInfo, build_project_info
from .rendering import TemplateRenderer, detect_javadoc_version, select_template_generation

__all__ = [
    "ClassInfo",
    "DirectoryIndexer",
    "PackageInfo",
    "ProjectInfo",
    "TemplateRenderer",
    "build_project_info",
    "detect_javadoc_version",
    "select_template_generation",
]
