"""Template lookup and rendering for the navigation pages."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from jinja2 import Environment, FileSystemLoader, TemplateError, TemplateNotFound

from ..errors import IndexingError, TemplateResolutionError
from ..logging import get_logger

_LOGGER = get_logger("indexing.rendering")

DEFAULT_TEMPLATES_DIR = Path(__file__).with_name("templates")
BASE_GENERATION = "base"
DEFAULT_JAVADOC_VERSION = "1.8"
TEMPLATE_SUFFIX = ".j2"

# newest first: the first threshold the version reaches wins
_GENERATIONS: Tuple[Tuple[Tuple[int, ...], str], ...] = (
    ((1, 8), "jdk8"),
    ((1, 7), "jdk7"),
    ((1, 4), "jdk4"),
)

_VERSION_NUMBER = re.compile(r"\d+(?:\.\d+)*")


def parse_version(text: str | None) -> Tuple[int, ...]:
    """Return the leading dotted number of ``text`` as a tuple, ``()`` if there is none."""
    if not text:
        return ()
    match = _VERSION_NUMBER.search(str(text))
    if match is None:
        return ()
    return tuple(int(part) for part in match.group(0).split("."))


def select_template_generation(version: str | None) -> str:
    parsed = parse_version(version)
    for threshold, generation in _GENERATIONS:
        if parsed >= threshold:
            return generation
    _LOGGER.warning("Unsupported javadoc version '%s', using the %s templates", version, BASE_GENERATION)
    return BASE_GENERATION


def detect_javadoc_version(executable: str = "javadoc", *, timeout: float = 30.0) -> str:
    """Ask the installed javadoc tool for its version; fall back to 1.8."""
    try:
        completed = subprocess.run(
            [executable, "--version"],
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        _LOGGER.debug("javadoc version detection failed: %s", exc)
        return DEFAULT_JAVADOC_VERSION
    match = None
    if completed.returncode == 0:
        match = _VERSION_NUMBER.search(f"{completed.stdout}\n{completed.stderr}")
    if match is None:
        _LOGGER.debug("javadoc reported no usable version, assuming %s", DEFAULT_JAVADOC_VERSION)
        return DEFAULT_JAVADOC_VERSION
    return match.group(0)


class TemplateRenderer:
    """Renders named pages from a search path of template directories.

    Built-in generations fall back to the ``base`` directory for any page
    they do not override. A custom ``template_dir`` is used on its own.
    """

    def __init__(
        self, template_dir: Path | None = None, *, generation: str | None = None
    ) -> None:
        self.template_dir = template_dir
        self.generation = generation or BASE_GENERATION
        self.search_path = self._search_path(template_dir, self.generation)
        self._env = self._create_env(self.search_path)

    @classmethod
    def for_version(
        cls, javadoc_version: str | None, template_dir: Path | None = None
    ) -> "TemplateRenderer":
        if template_dir is not None:
            return cls(template_dir)
        return cls(generation=select_template_generation(javadoc_version))

    def render(self, name: str, context: Dict[str, object]) -> str:
        template_name = f"{name}{TEMPLATE_SUFFIX}"
        try:
            template = self._env.get_template(template_name)
        except TemplateNotFound as exc:
            locations = ", ".join(str(path) for path in self.search_path)
            raise TemplateResolutionError(
                f"Template '{template_name}' not found in {locations}"
            ) from exc
        except TemplateError as exc:
            raise IndexingError(f"Unable to load template '{template_name}': {exc}") from exc
        try:
            return template.render(**context)
        except TemplateError as exc:
            raise IndexingError(f"Unable to render template '{template_name}': {exc}") from exc

    def stylesheet(self) -> Optional[Path]:
        """Return the first ``stylesheet.css`` on the search path."""
        for directory in self.search_path:
            candidate = directory / "stylesheet.css"
            if candidate.is_file():
                return candidate
        return None

    @staticmethod
    def _search_path(template_dir: Path | None, generation: str) -> List[Path]:
        if template_dir is not None:
            return [Path(template_dir)]
        directories = [DEFAULT_TEMPLATES_DIR / generation, DEFAULT_TEMPLATES_DIR / BASE_GENERATION]
        # ensure uniqueness preserving order
        seen: set[Path] = set()
        ordered: List[Path] = []
        for directory in directories:
            if directory not in seen:
                seen.add(directory)
                ordered.append(directory)
        return ordered

    @staticmethod
    def _create_env(directories: List[Path]) -> Environment:
        loader = FileSystemLoader([str(directory) for directory in directories])
        return Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )


__all__ = [
    "BASE_GENERATION",
    "DEFAULT_JAVADOC_VERSION",
    "DEFAULT_TEMPLATES_DIR",
    "TemplateRenderer",
    "detect_javadoc_version",
    "parse_version",
    "select_template_generation",
]
