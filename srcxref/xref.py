"""Pipeline orchestration: scan every root, transform every file, write the index."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .config import XrefConfig, resolve_bottom_text
from .errors import XrefError
from .highlight import CodeTransformer, TransformOptions
from .highlight.transform import STYLESHEET_FILENAME
from .indexing import DirectoryIndexer, TemplateRenderer, detect_javadoc_version
from .languages import JAVA, LanguageRegistry, SourceLanguage, discover_languages
from .logging import get_logger
from .scanner import prune_source_dirs
from .stores import SourceFileCache
from .symbols import SymbolTable


@dataclass
class XrefResult:
    """What one run wrote below the destination directory."""

    destination: Path
    source_roots: List[Path] = field(default_factory=list)
    pages: List[Path] = field(default_factory=list)
    index_pages: List[Path] = field(default_factory=list)
    stylesheet: Optional[Path] = None


class XRef:
    """Coordinates parsing, highlighting and indexing for one configuration."""

    def __init__(
        self,
        languages: LanguageRegistry | None = None,
        renderer: TemplateRenderer | None = None,
        version_detector: Callable[[], str] | None = None,
    ) -> None:
        self._languages = languages
        self._renderer = renderer
        self._detect_version = version_detector or detect_javadoc_version
        self._transformers: Dict[str, CodeTransformer] = {}
        self.logger = get_logger("xref")

    def run(self, config: XrefConfig) -> XrefResult:
        """Generate the cross-reference; any failure surfaces as a single XrefError."""
        try:
            return self._run(config)
        except (XrefError, OSError) as exc:
            raise XrefError(f"Cross-reference generation failed: {exc}") from exc

    def _run(self, config: XrefConfig) -> XrefResult:
        registry = self._registry(config)
        destination = config.destination_dir
        result = XrefResult(destination=destination)

        roots = prune_source_dirs(config.source_roots, source_suffixes(config, registry))
        if not roots:
            self.logger.warning("No source directories with sources found")
            return result

        cache = SourceFileCache(config.input_encoding, languages=registry)
        table = SymbolTable(cache, includes=config.includes or None, excludes=config.excludes)
        self._transformers.clear()

        self.logger.info("Scanning %d source root(s)", len(roots))
        # a root reached through two spellings is only scanned and transformed once
        roots = [root for root in roots if table.process(root)]
        table.dump()
        result.source_roots = roots

        bottom = resolve_bottom_text(
            config.bottom,
            inception_year=config.inception_year,
            organization_name=config.organization.name,
            organization_url=config.organization.url,
        )
        options = TransformOptions(
            locale=config.locale,
            input_encoding=config.input_encoding,
            output_encoding=config.output_encoding,
            javadoc_dir=self._javadoc_location(config),
            revision=config.revision,
            bottom=bottom,
        )

        for root in roots:
            for rel_path in table.source_paths(root):
                source_path = root / rel_path
                language = registry.for_path(source_path) or JAVA
                page_name = f"{language.strip_extension(source_path.name)}.html"
                dest = destination / Path(rel_path).parent / page_name
                transformer = self._transformer_for(source_path.suffix, table, language)
                result.pages.append(transformer.transform(source_path, dest, options))
        self.logger.info("Transformed %d file(s) into %s", len(result.pages), destination)

        renderer = self._renderer or self._select_renderer(config)
        indexer = DirectoryIndexer(
            table,
            destination,
            renderer,
            window_title=config.window_title,
            doc_title=config.doc_title,
            bottom=bottom,
            output_encoding=config.output_encoding,
        )
        result.index_pages = indexer.process()
        result.stylesheet = self._copy_stylesheet(config, renderer, destination)
        return result

    def _registry(self, config: XrefConfig) -> LanguageRegistry:
        if self._languages is not None and not config.keywords:
            return self._languages
        languages: List[SourceLanguage] = (
            self._languages.languages if self._languages is not None else discover_languages()
        )
        if config.keywords:
            languages = [language.with_reserved_words(config.keywords) for language in languages]
        return LanguageRegistry(languages)

    def _transformer_for(
        self, extension: str, table: SymbolTable, language: SourceLanguage
    ) -> CodeTransformer:
        key = extension.lower()
        transformer = self._transformers.get(key)
        if transformer is None:
            transformer = CodeTransformer(table, language)
            self._transformers[key] = transformer
        return transformer

    def _select_renderer(self, config: XrefConfig) -> TemplateRenderer:
        if config.template_dir is not None:
            return TemplateRenderer(config.template_dir)
        version = config.javadoc.version or self._detect_version()
        self.logger.debug("Using templates for javadoc version %s", version)
        return TemplateRenderer.for_version(version)

    def _javadoc_location(self, config: XrefConfig) -> Optional[Path]:
        if not config.javadoc.enabled:
            return None
        if config.javadoc.dir is not None:
            if config.javadoc.dir.is_dir():
                return config.javadoc.dir
            self.logger.warning("Unable to locate Javadoc at %s", config.javadoc.dir)
            return None
        default_dir = config.destination_dir.parent / "apidocs"
        return default_dir if default_dir.is_dir() else None

    def _copy_stylesheet(
        self, config: XrefConfig, renderer: TemplateRenderer, destination: Path
    ) -> Optional[Path]:
        source = config.stylesheet
        if source is not None and not source.is_file():
            self.logger.warning("Stylesheet %s not found, using the default", source)
            source = None
        if source is None:
            source = renderer.stylesheet()
        if source is None:
            self.logger.warning("No stylesheet available to copy")
            return None
        target = destination / STYLESHEET_FILENAME
        try:
            destination.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
        except OSError as exc:
            self.logger.warning("Unable to copy stylesheet %s: %s", source, exc)
            return None
        return target


def source_suffixes(config: XrefConfig, registry: LanguageRegistry) -> List[str]:
    """Suffixes that make a directory worth scanning; ``""`` accepts any file."""
    if not config.includes:
        return [ext for language in registry.languages for ext in language.extensions]
    suffixes = []
    for pattern in config.includes:
        suffix = Path(pattern).suffix
        suffixes.append("" if "*" in suffix or "?" in suffix else suffix)
    return suffixes


__all__ = ["XRef", "XrefResult", "source_suffixes"]
