from .markers import (
    REPLACE_MARKER,
    SEARCH_MARKER,
    SEPARATOR_MARKER,
    parse_diff,
    render_diff,
)

__all__ = [
    "parse_diff",
    "render_diff",
    "SEARCH_MARKER",
    "SEPARATOR_MARKER",
    "REPLACE_MARKER",
]
