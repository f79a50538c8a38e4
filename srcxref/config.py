"""Configuration loading for srcxref (.srcxref.yml)."""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".srcxref.yml"
DEFAULT_BOTTOM = "\u00a9 {inceptionYear}\u2013{currentYear} {organizationName}"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class OrganizationConfig:
    """Who owns the sources, used in the page footer."""

    name: Optional[str] = None
    url: Optional[str] = None


@dataclass
class JavadocConfig:
    """Where the matching API documentation lives, if anywhere."""

    enabled: bool = True
    dir: Optional[Path] = None
    version: Optional[str] = None


@dataclass
class XrefConfig:
    """Represents the settings defined in .srcxref.yml."""

    root: Path
    source_dirs: List[Path] = field(default_factory=list)
    destination: Optional[Path] = None
    includes: List[str] = field(default_factory=list)
    excludes: List[str] = field(default_factory=list)
    window_title: str = "Cross Reference"
    doc_title: str = "Cross Reference"
    bottom: str = DEFAULT_BOTTOM
    inception_year: Optional[str] = None
    organization: OrganizationConfig = field(default_factory=OrganizationConfig)
    input_encoding: Optional[str] = None
    output_encoding: str = "utf-8"
    locale: str = "en"
    javadoc: JavadocConfig = field(default_factory=JavadocConfig)
    template_dir: Optional[Path] = None
    stylesheet: Optional[Path] = None
    revision: Optional[str] = None
    keywords: List[str] = field(default_factory=list)

    @property
    def source_roots(self) -> List[Path]:
        return list(self.source_dirs) or [self.root / "src" / "main" / "java"]

    @property
    def destination_dir(self) -> Path:
        return self.destination or self.root / "target" / "xref"


def load_config(config_path: Path) -> XrefConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return _defaults(root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = _defaults(root)
    config.source_dirs = [_as_path(root, item) for item in _as_str_list(data.get("source_dirs"))]
    destination = _as_str(data.get("destination"))
    config.destination = _as_path(root, destination) if destination else None
    config.includes = _as_str_list(data.get("includes"))
    config.excludes = _as_str_list(data.get("excludes"))
    config.window_title = _as_str(data.get("window_title")) or config.window_title
    config.doc_title = _as_str(data.get("doc_title")) or config.doc_title
    bottom = _as_str(data.get("bottom"))
    config.bottom = bottom if bottom is not None else config.bottom
    config.inception_year = _as_str(data.get("inception_year"))

    organization_data = _as_dict(data.get("organization"))
    config.organization = OrganizationConfig(
        name=_as_str(organization_data.get("name")),
        url=_as_str(organization_data.get("url")),
    )

    config.input_encoding = _as_str(data.get("input_encoding"))
    config.output_encoding = _as_str(data.get("output_encoding")) or config.output_encoding
    config.locale = _as_str(data.get("locale")) or config.locale

    javadoc_data = _as_dict(data.get("javadoc"))
    javadoc_dir = _as_str(javadoc_data.get("dir"))
    enabled = _as_bool(javadoc_data.get("enabled"))
    config.javadoc = JavadocConfig(
        enabled=True if enabled is None else enabled,
        dir=_as_path(root, javadoc_dir) if javadoc_dir else None,
        version=_as_str(javadoc_data.get("version")),
    )

    template_dir = _as_str(data.get("template_dir"))
    config.template_dir = _as_path(root, template_dir) if template_dir else None
    stylesheet = _as_str(data.get("stylesheet"))
    config.stylesheet = _as_path(root, stylesheet) if stylesheet else None
    config.revision = _as_str(data.get("revision"))
    config.keywords = _as_str_list(data.get("keywords"))
    return config


def resolve_bottom_text(
    bottom: str,
    *,
    inception_year: str | None = None,
    organization_name: str | None = None,
    organization_url: str | None = None,
    current_year: int | None = None,
) -> str:
    """Fill the ``{currentYear}``, ``{inceptionYear}`` and ``{organizationName}`` placeholders."""
    year = str(current_year if current_year is not None else _dt.date.today().year)
    text = bottom.replace("{currentYear}", year)

    if not inception_year or inception_year == year:
        text = text.replace("{inceptionYear}\u2013", "").replace("{inceptionYear}-", "")
        text = text.replace("{inceptionYear}", "")
    else:
        text = text.replace("{inceptionYear}", inception_year)

    if organization_name:
        if organization_url:
            text = text.replace(
                "{organizationName}", f'<a href="{organization_url}">{organization_name}</a>'
            )
        else:
            text = text.replace("{organizationName}", organization_name)
    else:
        text = text.replace(" {organizationName}", "").replace("{organizationName}", "")
    return text


def _defaults(root: Path) -> XrefConfig:
    title = f"{root.name} Reference" if root.name else "Cross Reference"
    return XrefConfig(root=root, window_title=title, doc_title=title)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_path(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else root / path


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "JavadocConfig",
    "OrganizationConfig",
    "XrefConfig",
    "load_config",
    "resolve_bottom_text",
]
