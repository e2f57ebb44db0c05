# patchforge/utils/__init__.py
from .text import (
    LineSpan,
    collapse_whitespace,
    detect_eol,
    indent_width,
    leading_ws,
    line_number_at,
    line_spans,
    preview,
    split_block_lines,
)

__all__ = [
    "LineSpan",
    "collapse_whitespace",
    "detect_eol",
    "indent_width",
    "leading_ws",
    "line_number_at",
    "line_spans",
    "preview",
    "split_block_lines",
]
