"""Syntax highlighting and cross-reference linking of source lines."""

from .filters import CommentState, LineContext, highlight_line
from .transform import CodeTransformer, TransformOptions
from .words import Word, tokenize

__all__ = [
    "CodeTransformer",
    "CommentState",
    "LineContext",
    "TransformOptions",
    "Word",
    "highlight_line",
    "tokenize",
]
