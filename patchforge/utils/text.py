# patchforge/utils/text.py
from __future__ import annotations

import re
from typing import List, NamedTuple, Tuple

_EOL_RE = re.compile(r"\r\n|\r|\n")
_WS_RUN_RE = re.compile(r"\s+")
_LEADING_WS_RE = re.compile(r"^[\t ]*")


class LineSpan(NamedTuple):
    start: int  # offset of the first character of the line
    end: int    # offset just before the line break
    stop: int   # offset just after the line break (== end on the last line)


def detect_eol(s: str) -> str:
    if "\r\n" in s:
        return "\r\n"
    if "\r" in s:
        return "\r"
    return "\n"


def line_spans(text: str) -> List[LineSpan]:
    """
    Offsets of every line in `text`. A trailing line break does not open an
    extra empty line, so "a\\nb\\n" has two spans.
    """
    spans: List[LineSpan] = []
    pos = 0
    for m in _EOL_RE.finditer(text):
        spans.append(LineSpan(pos, m.start(), m.end()))
        pos = m.end()
    if pos < len(text) or not spans:
        spans.append(LineSpan(pos, len(text), len(text)))
    return spans


def split_block_lines(text: str) -> Tuple[List[str], bool]:
    """Split search text into lines; also report whether it ended with a line break."""
    lines = _EOL_RE.split(text)
    ends_with_eol = len(lines) > 1 and lines[-1] == ""
    if ends_with_eol:
        lines.pop()
    return lines, ends_with_eol


def line_number_at(text: str, offset: int) -> int:
    """1-based line number of the character at `offset`."""
    if offset <= 0:
        return 1
    head = text[:offset]
    return len(_EOL_RE.findall(head)) + 1


def collapse_whitespace(s: str) -> str:
    """Collapse every whitespace run (line breaks included) to one space and trim."""
    return _WS_RUN_RE.sub(" ", s).strip()


def leading_ws(s: str) -> str:
    """Return the exact leading whitespace (tabs/spaces)."""
    m = _LEADING_WS_RE.match(s)
    return m.group(0) if m else ""


def indent_width(s: str) -> int:
    """Count leading spaces/tabs as indentation depth (tabs count as 4)."""
    width = 0
    for ch in s:
        if ch == " ":
            width += 1
        elif ch == "\t":
            width += 4
        else:
            break
    return width


def preview(text: str, limit: int = 200) -> str:
    """Bounded preview of a (search) text for error reports."""
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + f"... [{len(text) - limit} more chars]"
