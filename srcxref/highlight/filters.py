"""Per-line HTML rewriting: escaping, comments, strings, keywords, URIs and links.

Every function here works on one already-read source line. The only state
that crosses line boundaries is the :class:`CommentState`, which callers
pass in and get back from :func:`highlight_line`.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from ..indexing.indexer import INDEX
from ..languages import JAVA, SourceLanguage
from ..models import ImportSpec, SourceFile, TypeDeclaration
from ..symbols import SymbolTable
from .words import tokenize


class CommentState(Enum):
    CODE = "code"
    BLOCK = "block"
    DOC = "doc"


_COMMENT_CLASSES = {
    CommentState.CODE: "jxr_comment",
    CommentState.BLOCK: "jxr_comment",
    CommentState.DOC: "jxr_javadoccomment",
}

_COMMENT_MARKER = re.compile(r"//|/\*")
_URI_CHARS = r"(?:[A-Za-z0-9?+%:/.@_;=$,!~*'()\-]|&(?!(?:lt|gt|quot|#92);))"
_URI = re.compile(r"(?:https?://|mailto:)" + _URI_CHARS + "+")
# a URI run is matched first so that its words never become keywords
_KEYWORD_OR_URI = re.compile(
    r"(?P<uri>(?:https?://|mailto:)" + _URI_CHARS + r"+)|(?<![\w$])(?P<word>[A-Za-z_$][\w$]*)"
)
_QUALIFIED = re.compile(r"[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*")
_STATEMENT = re.compile(
    r"^(?P<indent>\s*)(?P<keyword>package|import)(?P<gap>\s+)"
    r"(?P<static>static\s+)?"
    r"(?P<name>[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*)"
    r"(?P<wildcard>\.\*)?(?P<tail>\s*;.*)$",
    re.DOTALL,
)
# what may follow a name inside one word: "Bar;", "Bar,", "List&lt;T&gt;", "Bar.class"
_NAME_TAILS = (";", ",", ".", ":", "]", "&lt;", "&gt;")
_TAG_REMAINDER = re.compile(r"^[^<>]*>")
_TAG = re.compile(r"<[^>]*>")
_OPEN_TAG = re.compile(r"<[^>]*$")


@dataclass
class LineContext:
    """What the linker knows about the file being highlighted."""

    source: SourceFile
    table: SymbolTable
    reserved_words: FrozenSet[str] = JAVA.reserved_words
    type_keywords: FrozenSet[str] = JAVA.type_keywords
    line_number: int = 0
    emitted_ids: Set[str] = field(default_factory=set)
    _declarations: Dict[int, List[TypeDeclaration]] = field(default_factory=dict, init=False, repr=False)
    _resolved: Dict[str, Optional[Tuple[str, TypeDeclaration]]] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        for declaration in self.source.types:
            self._declarations.setdefault(declaration.line, []).append(declaration)

    @classmethod
    def for_source(
        cls, source: SourceFile, table: SymbolTable, language: SourceLanguage = JAVA
    ) -> "LineContext":
        return cls(
            source=source,
            table=table,
            reserved_words=language.reserved_words,
            type_keywords=language.type_keywords,
        )

    @property
    def root_ref(self) -> str:
        return self.source.root_ref

    def declarations_on(self, line_number: int) -> List[TypeDeclaration]:
        return list(self._declarations.get(line_number, []))

    def claim_declaration(self, token: str) -> Optional[TypeDeclaration]:
        """Return the unplaced declaration of ``token`` on the current line, marking its id used."""
        for declaration in self._declarations.get(self.line_number, []):
            if declaration.simple_name == token and declaration.name not in self.emitted_ids:
                self.emitted_ids.add(declaration.name)
                return declaration
        return None

    def scope(self) -> List[str]:
        """Current package first, then every imported package in import order."""
        packages = [self.source.package]
        for spec in self.source.imports:
            if spec.package not in packages:
                packages.append(spec.package)
        return packages

    def resolve(self, token: str) -> Optional[Tuple[str, TypeDeclaration]]:
        if token not in self._resolved:
            self._resolved[token] = self._qualified(token) or self._simple(token)
        return self._resolved[token]

    def type_href(self, package: str, declaration: TypeDeclaration) -> str:
        directory = package.replace(".", "/")
        prefix = f"{directory}/" if directory else ""
        return f"{self.root_ref}{prefix}{declaration.filename}.html#{declaration.name}"

    def package_href(self, package: str) -> str:
        return f"{self.root_ref}{package.replace('.', '/')}/{INDEX}"

    def _qualified(self, token: str) -> Optional[Tuple[str, TypeDeclaration]]:
        # longest known package prefix first: a.b.C before a with b.C
        index = token.rfind(".")
        while index > 0:
            package_name, type_name = token[:index], token[index + 1 :]
            declaration = self.table.find_type(package_name, type_name)
            if declaration is not None:
                return package_name, declaration
            index = token.rfind(".", 0, index)
        return None

    def _simple(self, token: str) -> Optional[Tuple[str, TypeDeclaration]]:
        candidates: List[str] = []
        for spec in self.source.imports:
            if spec.class_name == token:
                candidates.append(spec.package)
        candidates.extend(self.scope())
        for package_name in candidates:
            declaration = self.table.find_type(package_name, token)
            if declaration is not None:
                return package_name, declaration
        return None


def escape(line: str) -> str:
    line = line.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    line = line.replace("\\\\", "&#92;&#92;")
    line = line.replace('\\"', "\\&quot;")
    return line.replace("'\"'", "'&quot;'")


def highlight_line(
    line: str, state: CommentState, context: LineContext
) -> Tuple[str, CommentState]:
    """Rewrite one raw source line as HTML and return it with the state for the next line."""
    return _process(escape(line), state, context)


def _process(text: str, state: CommentState, context: LineContext) -> Tuple[str, CommentState]:
    if state is CommentState.CODE:
        return _code(text, context)
    return _ongoing_comment(text, state, context)


def _ongoing_comment(
    text: str, state: CommentState, context: LineContext, search_from: int = 0
) -> Tuple[str, CommentState]:
    end = text.find("*/", search_from)
    if end < 0:
        return _comment(text, state), state
    rendered = _comment(text[: end + 2], state)
    remainder, state = _process(text[end + 2 :], CommentState.CODE, context)
    return rendered + remainder, state


def _code(text: str, context: LineContext) -> Tuple[str, CommentState]:
    position = find_comment_marker(text)
    if position < 0:
        return _code_fragment(text, context), CommentState.CODE

    before = _code_fragment(text[:position], context)
    if text.startswith("//", position):
        return before + _comment(text[position:], CommentState.CODE), CommentState.CODE

    opener = text[position:]
    if opener.startswith("/**") and not opener.startswith("/**/"):
        state = CommentState.DOC
    else:
        state = CommentState.BLOCK
    rendered, state = _ongoing_comment(opener, state, context, search_from=2)
    return before + rendered, state


def find_comment_marker(text: str) -> int:
    """Offset of the first ``//`` or ``/*`` outside a string literal, or -1."""
    for match in _COMMENT_MARKER.finditer(text):
        position = match.start()
        before = text.count('"', 0, position)
        after = text.count('"', position)
        if before % 2 == 1 and after % 2 == 1:
            continue
        return position
    return -1


def _comment(text: str, state: CommentState) -> str:
    if not text:
        return ""
    return f'<em class="{_COMMENT_CLASSES[state]}">{link_uris(text)}</em>'


def _code_fragment(text: str, context: LineContext) -> str:
    statement = _STATEMENT.match(text)
    if statement is not None:
        return _statement(statement, context)
    return _strings(text, context)


def _strings(text: str, context: LineContext) -> str:
    parts = text.split('"')
    rendered: List[str] = []
    for index, part in enumerate(parts):
        if index % 2 == 0:
            rendered.append(_plain(part, context))
            continue
        closing = '"' if index < len(parts) - 1 else ""
        rendered.append(f'<span class="jxr_string">"{link_uris(part)}{closing}</span>')
    return "".join(rendered)


def _plain(text: str, context: LineContext) -> str:
    if not text:
        return ""
    return link_types(link_uris(keywords(text, context.reserved_words)), context)


def keywords(text: str, reserved_words: FrozenSet[str]) -> str:
    def _replace(match: re.Match[str]) -> str:
        word = match.group("word")
        if word is None or word not in reserved_words:
            return match.group(0)
        if word == "class" and text.startswith("=", match.end()):
            return word
        return f'<strong class="jxr_keyword">{word}</strong>'

    return _KEYWORD_OR_URI.sub(_replace, text)


def link_uris(text: str) -> str:
    def _anchor(match: re.Match[str]) -> str:
        uri = match.group(0)
        return f'<a href="{uri}" target="alexandria_uri">{uri}</a>'

    return _URI.sub(_anchor, text)


def link_types(text: str, context: LineContext) -> str:
    """Link every resolvable type token; the declaring token gets the anchor id instead."""
    replacements: Dict[int, Tuple[int, str]] = {}
    previous = ""
    for word in tokenize(text):
        replacement = None
        candidates = _name_candidates(word.text)
        if candidates and previous in context.type_keywords:
            declaration = context.claim_declaration(candidates[0])
            if declaration is not None:
                anchor = f'<a id="{_attr(declaration.name)}" class="jxr_declaration">{candidates[0]}</a>'
                replacement = (len(candidates[0]), anchor)
        if replacement is None:
            replacement = _type_link(candidates, context)
        if replacement is not None:
            replacements[word.index] = replacement
        visible = _visible(word.text)
        if visible:
            previous = visible

    # later words first so earlier offsets stay valid
    for word in tokenize(text).reversed():
        if word.index in replacements:
            length, anchor = replacements[word.index]
            text = text[: word.index] + anchor + text[word.index + length :]
    return text


def _type_link(candidates: List[str], context: LineContext) -> Optional[Tuple[int, str]]:
    for name in candidates:
        target = context.resolve(name)
        if target is not None:
            href = context.type_href(*target)
            return len(name), f'<a href="{_attr(href)}">{name}</a>'
    return None


def _name_candidates(token: str) -> List[str]:
    """Names a word may refer to, longest first: ``a.B.c;`` gives ``a.B.c``, ``a.B``, ``a``."""
    match = _QUALIFIED.match(token)
    if match is None:
        return []
    if match.end() < len(token) and not token.startswith(_NAME_TAILS, match.end()):
        return []
    name = match.group(0)
    names = [name]
    while "." in name:
        name = name.rpartition(".")[0]
        names.append(name)
    return names


def _statement(match: re.Match[str], context: LineContext) -> str:
    keyword = match.group("keyword")
    name = match.group("name")
    wildcard = match.group("wildcard") or ""
    static = match.group("static") or ""

    if keyword == "package":
        linked = f'<a href="{_attr(context.package_href(name))}">{name}</a>'
    elif wildcard:
        linked = _package_link(name, context)
    else:
        linked = _import_link(ImportSpec(name), context)

    return "".join(
        [
            match.group("indent"),
            keywords(keyword, context.reserved_words),
            match.group("gap"),
            keywords(static, context.reserved_words),
            linked,
            wildcard,
            _strings(match.group("tail"), context),
        ]
    )


def _package_link(package_name: str, context: LineContext) -> str:
    if context.table.get_package(package_name) is None:
        return package_name
    return f'<a href="{_attr(context.package_href(package_name))}">{package_name}</a>'


def _import_link(spec: ImportSpec, context: LineContext) -> str:
    class_name = spec.class_name or ""
    if not spec.package:
        return class_name
    declaration = context.table.find_type(spec.package, class_name)
    if declaration is None:
        class_html = class_name
    else:
        class_html = f'<a href="{_attr(context.type_href(spec.package, declaration))}">{class_name}</a>'
    return f"{_package_link(spec.package, context)}.{class_html}"


def _visible(token: str) -> str:
    token = _TAG_REMAINDER.sub("", token)
    token = _TAG.sub("", token)
    return _OPEN_TAG.sub("", token)


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


__all__ = [
    "CommentState",
    "LineContext",
    "escape",
    "find_comment_marker",
    "highlight_line",
    "keywords",
    "link_types",
    "link_uris",
]
