"""Stream tokenizer used by the source parser.

The rules follow the classic configurable stream tokenizer: whitespace
separates tokens, ``//`` and ``/* */`` comments are skipped, ``*`` starts a
comment running to the end of the line, quoted literals are atomic tokens
and every other character stands for itself. Word tokens may contain
``.`` and ``-`` after their first character, so dotted names such as
``java.util.List`` come out as one word.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

WORD = "word"
NUMBER = "number"
QUOTE = "quote"
ORDINARY = "ordinary"

_QUOTES = "\"'"


@dataclass(frozen=True)
class Token:
    """One token: ``kind`` plus its text (``None`` for ordinary and numeric tokens)."""

    kind: str
    value: Optional[str]
    line: int
    char: str = ""

    @property
    def is_word(self) -> bool:
        return self.kind == WORD

    def is_char(self, char: str) -> bool:
        return self.kind == ORDINARY and self.char == char


def _is_word_start(char: str) -> bool:
    return char.isalpha() or char in "_$" or ord(char) >= 128


def _is_word_part(char: str) -> bool:
    return _is_word_start(char) or char.isdigit() or char in ".-"


def tokenize(text: str) -> Iterator[Token]:
    """Yield the tokens of ``text`` lazily."""
    length = len(text)
    line = 1
    pos = 0
    while pos < length:
        char = text[pos]

        if char == "\n":
            line += 1
            pos += 1
            continue
        if char <= " ":
            pos += 1
            continue

        if char == "/" and pos + 1 < length and text[pos + 1] == "/":
            pos = _skip_to_eol(text, pos)
            continue
        if char == "/" and pos + 1 < length and text[pos + 1] == "*":
            end = text.find("*/", pos + 2)
            stop = length if end < 0 else end + 2
            line += text.count("\n", pos, stop)
            pos = stop
            continue
        if char == "*":
            pos = _skip_to_eol(text, pos)
            continue

        if _is_word_start(char):
            start = pos
            pos += 1
            while pos < length and _is_word_part(text[pos]):
                pos += 1
            yield Token(WORD, text[start:pos], line)
            continue

        if char.isdigit() or (char == "." and pos + 1 < length and text[pos + 1].isdigit()):
            pos += 1
            while pos < length and (text[pos].isdigit() or text[pos] == "."):
                pos += 1
            yield Token(NUMBER, None, line)
            continue

        if char in _QUOTES:
            value, pos = _read_quoted(text, pos + 1, char)
            yield Token(QUOTE, value, line, char)
            continue

        yield Token(ORDINARY, None, line, char)
        pos += 1


def _skip_to_eol(text: str, pos: int) -> int:
    end = text.find("\n", pos)
    return len(text) if end < 0 else end


def _read_quoted(text: str, pos: int, quote: str) -> tuple[str, int]:
    chars = []
    length = len(text)
    while pos < length:
        char = text[pos]
        if char == quote:
            return "".join(chars), pos + 1
        if char == "\n":
            # unterminated literal ends at the line break, which is left for the caller
            return "".join(chars), pos
        if char == "\\" and pos + 1 < length and text[pos + 1] != "\n":
            chars.append(text[pos + 1])
            pos += 2
            continue
        chars.append(char)
        pos += 1
    return "".join(chars), pos


__all__ = ["NUMBER", "ORDINARY", "QUOTE", "WORD", "Token", "tokenize"]
