"""Lightweight source parser: package, imports and nested type declarations."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional

from ..errors import SourceNotFoundError, SourceReadError
from ..languages import JAVA, SourceLanguage
from ..models import ImportSpec, SourceFile, TypeDeclaration
from .tokenizer import QUOTE, Token, tokenize


class _ParseState:
    """Mutable accumulator for a single parse call."""

    def __init__(self, filename: str, language: SourceLanguage) -> None:
        self.filename = filename
        self.language = language
        self.package = ""
        self.imports: List[ImportSpec] = [ImportSpec(name) for name in language.implicit_imports]
        self.types: List[TypeDeclaration] = []
        self.in_text_block = False
        self.previous: Optional[Token] = None

    def add_import(self, name: str) -> None:
        spec = ImportSpec(name)
        if spec not in self.imports:
            self.imports.append(spec)


class _TokenStream:
    """Token iterator with single-token push back."""

    def __init__(self, tokens: Iterator[Token]) -> None:
        self._tokens = tokens
        self._pending: Optional[Token] = None

    def __iter__(self) -> "_TokenStream":
        return self

    def __next__(self) -> Token:
        if self._pending is not None:
            token, self._pending = self._pending, None
            return token
        return next(self._tokens)

    def push_back(self, token: Token) -> None:
        self._pending = token

    def next_or_none(self) -> Optional[Token]:
        return next(self, None)


def parse_source(
    path: Path, encoding: str | None = None, language: SourceLanguage = JAVA
) -> SourceFile:
    """Read and parse ``path``; raises SourceNotFoundError / SourceReadError."""
    if not path.exists():
        raise SourceNotFoundError(f"{path} does not exist!")
    try:
        text = path.read_text(encoding=encoding or "utf-8")
    except (OSError, UnicodeDecodeError, LookupError) as exc:
        raise SourceReadError(f"Unable to read {path}: {exc}") from exc
    return parse_text(text, path, language=language, encoding=encoding)


def parse_text(
    text: str,
    path: Path,
    *,
    language: SourceLanguage = JAVA,
    encoding: str | None = None,
) -> SourceFile:
    """Parse already-decoded source text. Never raises on odd input."""
    filename = language.strip_extension(path.name)
    state = _ParseState(filename, language)
    _parse_recursive("", _TokenStream(tokenize(text)), state, nested=False)
    return SourceFile(
        path=path,
        package=state.package,
        imports=tuple(state.imports),
        types=tuple(state.types),
        encoding=encoding,
        filename=filename,
    )


def _parse_recursive(
    prefix: str, stream: _TokenStream, state: _ParseState, *, nested: bool = True
) -> None:
    open_braces = 0
    for token in stream:
        if _skip_text_block(token, state):
            continue

        if token.is_char("{"):
            open_braces += 1
            continue
        if token.is_char("}"):
            open_braces -= 1
            if nested and open_braces <= 0:
                return
            # stray braces outside any type (annotation arrays) never end the file
            open_braces = max(open_braces, 0)
            continue
        if not token.is_word:
            continue

        keyword = token.value
        if keyword == "package":
            name = _next_word(stream, state)
            if name is not None:
                state.package = name.value
        elif keyword == "import":
            name = _next_word(stream, state)
            if name is not None and name.value == "static":
                name = _next_word(stream, state)
            if name is not None:
                value = name.value
                if value.endswith("."):
                    value += "*"
                state.add_import(value)
        elif keyword in state.language.type_keywords:
            name = _next_word(stream, state)
            if name is not None:
                state.types.append(
                    TypeDeclaration(name=prefix + name.value, filename=state.filename, line=name.line)
                )
                _parse_recursive(f"{prefix}{name.value}.", stream, state)


def _next_word(stream: _TokenStream, state: _ParseState) -> Optional[Token]:
    """Consume the next token when it is a word; otherwise leave it for the caller."""
    token = stream.next_or_none()
    if token is None:
        return None
    if token.is_word:
        state.previous = token
        return token
    stream.push_back(token)
    return None


def _skip_text_block(token: Token, state: _ParseState) -> bool:
    previous = state.previous
    state.previous = token
    if (
        token.kind == QUOTE
        and token.char == '"'
        and previous is not None
        and previous.kind == QUOTE
        and previous.char == '"'
        and previous.value == ""
    ):
        state.in_text_block = not state.in_text_block
        # the closing delimiter must not pair up with the next literal
        state.previous = None
        return True
    if token.kind == QUOTE:
        return True
    return state.in_text_block


__all__ = ["parse_source", "parse_text"]
