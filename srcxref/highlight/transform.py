"""Turns one parsed source file into its cross-referenced HTML page."""

from __future__ import annotations

import html
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from ..errors import OutputWriteError, SourceReadError
from ..languages import JAVA, SourceLanguage
from ..logging import get_logger
from ..models import SourceFile
from ..symbols import SymbolTable
from .filters import CommentState, LineContext, highlight_line

STYLESHEET_FILENAME = "stylesheet.css"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass
class TransformOptions:
    """Per-run page settings shared by every transformed file."""

    locale: str = "en"
    input_encoding: Optional[str] = None
    output_encoding: str = "utf-8"
    javadoc_dir: Optional[Path] = None
    revision: Optional[str] = None
    bottom: str = ""


def split_lines(text: str) -> List[str]:
    lines = _LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def line_number_padding(number: int) -> str:
    if number < 10:
        return "   "
    if number < 100:
        return "  "
    return " "


class CodeTransformer:
    """Writes highlighted, linked pages for the files of one language."""

    def __init__(self, table: SymbolTable, language: SourceLanguage = JAVA) -> None:
        self.table = table
        self.language = language
        self.logger = get_logger("highlight.transform")

    def transform(
        self, source_path: Path, dest: Path, options: TransformOptions | None = None
    ) -> Path:
        options = options or TransformOptions()
        source = self.table.cache.get(source_path)
        encoding = options.input_encoding or self.table.cache.encoding or "utf-8"
        try:
            text = Path(source_path).read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError, LookupError) as exc:
            raise SourceReadError(f"Unable to read {source_path}: {exc}") from exc

        self.logger.debug("Transforming %s -> %s", source_path, dest)
        page = self.render(source, split_lines(text), options, dest_dir=dest.parent)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            with dest.open(
                "w", encoding=options.output_encoding, errors="xmlcharrefreplace", newline="\n"
            ) as handle:
                handle.write(page)
        except (OSError, LookupError) as exc:
            raise OutputWriteError(f"Unable to write {dest}: {exc}") from exc
        return dest

    def render(
        self,
        source: SourceFile,
        lines: Sequence[str],
        options: TransformOptions,
        *,
        dest_dir: Path | None = None,
    ) -> str:
        """Assemble the full page for ``source`` from its raw ``lines``."""
        context = LineContext.for_source(source, self.table, self.language)
        state = CommentState.CODE
        parts = self._header(source, options, dest_dir)
        for number, line in enumerate(lines, start=1):
            context.line_number = number
            rendered, state = highlight_line(line, state, context)
            parts.append(
                f'<a class="jxr_linenumber" id="L{number}" href="#L{number}">{number}</a>'
                f"{line_number_padding(number)}{self._unplaced_ids(context, number)}{rendered}\n"
            )
        leftover = self._unplaced_ids(context, None)
        if leftover:
            parts.append(leftover + "\n")
        parts.extend(self._footer(options))
        return "".join(parts)

    def _header(
        self, source: SourceFile, options: TransformOptions, dest_dir: Path | None
    ) -> List[str]:
        header = [
            "<!DOCTYPE html>\n",
            f'<html lang="{html.escape(options.locale.replace("_", "-"))}">\n',
            "<head>\n",
            f'<meta charset="{html.escape(options.output_encoding)}" />\n',
        ]
        if options.revision:
            header.append(f'<meta name="revision" content="{html.escape(options.revision)}" />\n')
        header.extend(
            [
                f"<title>{html.escape(source.display_name)} xref</title>\n",
                f'<link type="text/css" rel="stylesheet" href="{source.root_ref}{STYLESHEET_FILENAME}" />\n',
                "</head>\n",
                "<body>\n",
            ]
        )
        overview = self._javadoc_link(source, options, dest_dir)
        if overview:
            header.append(f'<div id="overview"><a href="{html.escape(overview)}">View Javadoc</a></div>\n')
        header.append("<pre>\n")
        return header

    @staticmethod
    def _footer(options: TransformOptions) -> List[str]:
        return [
            "</pre>\n",
            "<hr/>\n",
            f'<div id="footer">{options.bottom}</div>\n',
            "</body>\n",
            "</html>\n",
        ]

    @staticmethod
    def _javadoc_link(
        source: SourceFile, options: TransformOptions, dest_dir: Path | None
    ) -> Optional[str]:
        if options.javadoc_dir is None:
            return None
        if dest_dir is None:
            base = str(options.javadoc_dir).replace(os.sep, "/")
        else:
            base = os.path.relpath(options.javadoc_dir, dest_dir).replace(os.sep, "/")
        package_dir = source.package.replace(".", "/")
        parts = [base.rstrip("/")] if base not in ("", ".") else []
        if package_dir:
            parts.append(package_dir)
        parts.append(f"{source.display_name}.html")
        return "/".join(parts)

    @staticmethod
    def _unplaced_ids(context: LineContext, number: int | None) -> str:
        """Empty anchors for declarations whose id was not placed on their name."""
        if number is None:
            pending = [d for d in context.source.types if d.name not in context.emitted_ids]
        else:
            pending = [
                d for d in context.declarations_on(number) if d.name not in context.emitted_ids
            ]
        anchors = []
        for declaration in pending:
            context.emitted_ids.add(declaration.name)
            anchors.append(f'<a id="{html.escape(declaration.name)}"></a>')
        return "".join(anchors)


__all__ = [
    "STYLESHEET_FILENAME",
    "CodeTransformer",
    "TransformOptions",
    "line_number_padding",
    "split_lines",
]
