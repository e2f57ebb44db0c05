# patchforge/commit/splice.py
from __future__ import annotations

from functools import reduce
from math import gcd
from typing import List, NamedTuple

from ..models.blocks import DiffBlock, MatchCandidate
from ..utils.text import detect_eol, indent_width, leading_ws, split_block_lines

NOOP_WARNING = "no-op replacement: the matched text already equals the replacement"


class Splice(NamedTuple):
    content: str
    start: int
    replacement: str
    warnings: List[str]


def _indent_unit(lines: List[str]) -> str:
    """
    One nesting step of `lines` as text: a tab if tabs indent them, else
    the gcd of the space-indent steps. "" when every line sits at one level.
    """
    indents = [leading_ws(ln) for ln in lines if ln.strip()]
    if any("\t" in ws for ws in indents):
        return "\t"
    widths = [len(ws) for ws in indents]
    if not widths:
        return ""
    base = min(widths)
    return " " * reduce(gcd, (w - base for w in widths), 0)


def _dedent_by(ws: str, width: int) -> str:
    while ws and width > 0:
        width -= indent_width(ws[-1])
        ws = ws[:-1]
    return ws


def _reindent_relative(
    new_lines: List[str], ref_in: str, ref_out: str, unit_in: str = "", unit_out: str = ""
) -> List[str]:
    """
    Move the replacement from its base indentation `ref_in` to the file's
    `ref_out`, keeping each line's depth relative to that base. When the two
    sides nest with different units (4 spaces vs a tab, 2 vs 4 spaces) the
    relative part is converted level by level. Blank lines stay blank.
    """
    convert = bool(unit_in and unit_out and unit_in != unit_out)
    if ref_in == ref_out and not convert:
        return new_lines
    adjusted: List[str] = []
    for ln in new_lines:
        if not ln.strip():
            adjusted.append(ln)
            continue
        ws = leading_ws(ln)
        body = ln[len(ws):]
        if not convert and ws.startswith(ref_in):
            adjusted.append(ref_out + ws[len(ref_in):] + body)
            continue
        depth = indent_width(ws) - indent_width(ref_in)
        if convert:
            levels, rest = divmod(abs(depth), indent_width(unit_in))
            if depth >= 0:
                new_ws = ref_out + unit_out * levels + " " * rest
            else:
                new_ws = _dedent_by(ref_out, levels * indent_width(unit_out) + rest)
        elif depth >= 0:
            new_ws = ref_out + " " * depth
        else:
            new_ws = _dedent_by(ref_out, -depth)
        adjusted.append(new_ws + body)
    return adjusted


def _first_nonblank(lines: List[str]) -> str:
    return next((ln for ln in lines if ln.strip()), "")


def _units_differ(unit_in: str, unit_out: str, search_lines: List[str], matched_lines: List[str]) -> bool:
    """
    Whether the search text and the file nest with different units. Tabs vs
    spaces always differ. Two space units only differ when every matched line
    sits at its search line's relative width scaled by the unit ratio; stray
    or hand-mangled indentation keeps the plain shift.
    """
    if not unit_in or not unit_out or unit_in == unit_out:
        return False
    if "\t" in unit_in + unit_out:
        return True
    if len(search_lines) != len(matched_lines):
        return False
    pairs = [
        (indent_width(s), indent_width(m))
        for s, m in zip(search_lines, matched_lines)
        if s.strip() and m.strip()
    ]
    if not pairs:
        return False
    base_in, base_out = pairs[0]
    return all((m - base_out) * len(unit_in) == (s - base_in) * len(unit_out) for s, m in pairs)


def realign_replacement(content: str, search_text: str, candidate: MatchCandidate, replace_text: str) -> str:
    """
    Translate the replacement's indentation to the file's when a lenient
    strategy matched the search text at a different indentation.
    """
    if not replace_text or not candidate.matched_text:
        return replace_text
    start = candidate.start_offset
    line_start = max(content.rfind("\n", 0, start), content.rfind("\r", 0, start)) + 1
    prefix = content[line_start:start]
    if prefix.strip():
        # The match begins mid-line after code; there is no indentation to align.
        return replace_text

    search_lines, _ = split_block_lines(search_text)
    matched_lines, _ = split_block_lines(candidate.matched_text)
    matched_lines[0] = prefix + matched_lines[0]
    lines, with_eol = split_block_lines(replace_text)

    ref_in = leading_ws(_first_nonblank(search_lines))
    ref_out = leading_ws(_first_nonblank(matched_lines))
    unit_in = _indent_unit(search_lines + lines) or ("\t" if "\t" in ref_in else "")
    unit_out = _indent_unit(matched_lines) or ("\t" if "\t" in ref_out else "")
    if not _units_differ(unit_in, unit_out, search_lines, matched_lines):
        unit_in = unit_out = ""
    if ref_in == ref_out and not unit_in:
        return replace_text

    eol = detect_eol(replace_text)
    lines = _reindent_relative(lines, ref_in, ref_out, unit_in, unit_out)
    # The part of the indentation that precedes the span is already in the file.
    if prefix and lines and lines[0].startswith(prefix):
        lines[0] = lines[0][len(prefix):]
    return eol.join(lines) + (eol if with_eol else "")


def apply_candidate(
    content: str,
    block: DiffBlock,
    candidate: MatchCandidate,
    *,
    reindent: bool = True,
) -> Splice:
    """
    Splice the block's replacement into `content` over the accepted span.

    Offsets are only valid for the `content` the candidate was computed
    against; callers rescan the returned content for the next block.
    """
    replacement = block.replace_text
    warnings: List[str] = []

    if block.is_insertion:
        if content and replacement and not content.endswith(("\n", "\r")):
            replacement = detect_eol(content) + replacement
    elif reindent and candidate.matched_text != block.search_text:
        replacement = realign_replacement(content, block.search_text, candidate, replacement)

    if replacement == candidate.matched_text:
        warnings.append(NOOP_WARNING)

    new_content = content[:candidate.start_offset] + replacement + content[candidate.end_offset:]
    return Splice(new_content, candidate.start_offset, replacement, warnings)
