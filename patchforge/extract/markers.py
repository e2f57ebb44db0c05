# patchforge/extract/markers.py
from __future__ import annotations

import re
from typing import Iterable, List, Optional

from ..errors.parse import ParseError
from ..models.blocks import DiffBlock
from ..utils.text import line_spans

SEARCH_MARKER = "<<<<<<< SEARCH"
SEPARATOR_MARKER = "======="
REPLACE_MARKER = ">>>>>>> REPLACE"

_MARKERS = (SEARCH_MARKER, SEPARATOR_MARKER, REPLACE_MARKER)

# A file path on its own line, optionally inside a one-line comment
# (`src/app.ts`, `// src/app.ts`, `# pkg/mod.py`).
_PATH_LINE_RE = re.compile(
    r"^\s*(?:(?://|#|--|/\*|<!--)\s*)?(?P<path>[\w./\\-]+\.\w+)[\s*/>-]*$"
)
_FENCE_RE = re.compile(r"^\s*(```|~~~)")

_OUTSIDE, _IN_SEARCH, _IN_REPLACE = range(3)


def _marker(line: str) -> Optional[str]:
    stripped = line.rstrip()
    return stripped if stripped in _MARKERS else None


def _split_preamble(free_text: List[str]) -> tuple[Optional[str], Optional[str]]:
    """Turn the free text preceding a block into (comment, file_path)."""
    lines = [ln.strip() for ln in free_text if ln.strip() and not _FENCE_RE.match(ln)]
    file_path = None
    if lines:
        m = _PATH_LINE_RE.match(lines[-1])
        if m:
            file_path = m.group("path").replace("\\", "/")
            lines.pop()
    comment = "\n".join(lines) if lines else None
    return comment, file_path


def parse_diff(diff_text: str) -> List[DiffBlock]:
    """
    Tokenize SEARCH/REPLACE diff text into ordered DiffBlocks.

    Format (one or more blocks, free text allowed between them):

        optional commentary / file path
        <<<<<<< SEARCH
        text to find
        =======
        text to put in its place
        >>>>>>> REPLACE

    Marker lines must equal the marker exactly (trailing whitespace aside);
    leniency belongs to the matching strategies, not to the parser. Text
    between blocks is never an error and becomes the next block's `comment`.
    The last line of that text is taken as the block's `file_path` when it
    looks like a path.

    Raises:
        ParseError: when a block is missing its separator or closing marker.
    """
    blocks: List[DiffBlock] = []
    if not diff_text:
        return blocks

    state = _OUTSIDE
    free_text: List[str] = []
    search_lines: List[str] = []
    replace_lines: List[str] = []
    open_line = open_offset = 0
    comment: Optional[str] = None
    file_path: Optional[str] = None

    for lineno, span in enumerate(line_spans(diff_text), start=1):
        line = diff_text[span.start:span.end]
        marker = _marker(line)

        if state == _OUTSIDE:
            if marker == SEARCH_MARKER:
                comment, file_path = _split_preamble(free_text)
                free_text = []
                search_lines, replace_lines = [], []
                open_line, open_offset = lineno, span.start
                state = _IN_SEARCH
            elif marker is None:
                free_text.append(line)
            # Stray separator/closing markers outside a block are commentary noise.
            continue

        if state == _IN_SEARCH:
            if marker == SEPARATOR_MARKER:
                state = _IN_REPLACE
            elif marker is not None:
                raise ParseError(
                    f"expected '{SEPARATOR_MARKER}' before '{marker}' "
                    f"in block opened at line {open_line}",
                    line=lineno,
                    offset=span.start,
                    block_index=len(blocks),
                )
            else:
                search_lines.append(line)
            continue

        # _IN_REPLACE
        if marker == REPLACE_MARKER:
            blocks.append(
                DiffBlock(
                    index=len(blocks),
                    search_text="\n".join(search_lines),
                    replace_text="\n".join(replace_lines),
                    comment=comment,
                    file_path=file_path,
                    line=open_line,
                )
            )
            state = _OUTSIDE
        elif marker == SEARCH_MARKER:
            raise ParseError(
                f"expected '{REPLACE_MARKER}' before a new '{SEARCH_MARKER}' "
                f"in block opened at line {open_line}",
                line=lineno,
                offset=span.start,
                block_index=len(blocks),
            )
        else:
            # A bare '=======' inside the replacement is content (e.g. a
            # markdown underline), not a second separator.
            replace_lines.append(line)

    if state != _OUTSIDE:
        missing = SEPARATOR_MARKER if state == _IN_SEARCH else REPLACE_MARKER
        raise ParseError(
            f"unterminated block: missing '{missing}' for block opened at line {open_line}",
            line=open_line,
            offset=open_offset,
            block_index=len(blocks),
        )
    return blocks


def render_diff(blocks: Iterable[DiffBlock]) -> str:
    """Serialize blocks back to marker text that parse_diff() reads unchanged."""
    chunks: List[str] = []
    for block in blocks:
        lines: List[str] = []
        if block.comment:
            lines.extend(block.comment.splitlines())
        if block.file_path:
            lines.append(block.file_path)
        lines.append(SEARCH_MARKER)
        if block.search_text:
            lines.append(block.search_text)
        lines.append(SEPARATOR_MARKER)
        if block.replace_text:
            lines.append(block.replace_text)
        lines.append(REPLACE_MARKER)
        chunks.append("\n".join(lines))
    return "\n\n".join(chunks) + ("\n" if chunks else "")
