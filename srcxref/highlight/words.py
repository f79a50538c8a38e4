"""Breaker-delimited word tokenizer used for in-place link insertion."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional

# words break on whitespace and on ( ) [ { }
_WORD = re.compile(r"[^\s()\[{}]+")


@dataclass(frozen=True)
class Word:
    """A token and its character offset within the line."""

    text: str
    index: int

    @property
    def end(self) -> int:
        return self.index + len(self.text)

    def __str__(self) -> str:
        return self.text


class WordSequence:
    """Lazy, restartable sequence of the words of one line.

    Iterating yields words in ascending offset order. Use ``reversed()`` when
    rewriting the line in place so that replacing a later word never shifts
    the offset of an earlier one.
    """

    def __init__(self, line: str, find: Optional[str] = None) -> None:
        self.line = line or ""
        self.find = find

    def __iter__(self) -> Iterator[Word]:
        for match in _WORD.finditer(self.line):
            if self.find is None or match.group(0) == self.find:
                yield Word(match.group(0), match.start())

    def __reversed__(self) -> Iterator[Word]:
        return iter(self.to_list()[::-1])

    def reversed(self) -> Iterator[Word]:
        return reversed(self)

    def to_list(self) -> List[Word]:
        return list(self)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return next(iter(self), None) is not None


def tokenize(line: str, find: Optional[str] = None) -> WordSequence:
    """Return the words of ``line``, optionally only those equal to ``find``."""
    return WordSequence(line, find)


def replace_words(line: str, find: str, replacement: str) -> str:
    """Replace every word equal to ``find`` with ``replacement``, last occurrence first."""
    for word in tokenize(line, find).reversed():
        line = line[: word.index] + replacement + line[word.end :]
    return line


__all__ = ["Word", "WordSequence", "replace_words", "tokenize"]
