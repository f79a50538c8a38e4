"""Source parsing: stream tokenizer and declaration extraction."""

from .parser import parse_source, parse_text
from .tokenizer import Token, tokenize

__all__ = ["Token", "parse_source", "parse_text", "tokenize"]
