# patchforge/match/strategies.py
"""
Matching strategies, from literal to lenient.

Each strategy implements `produce_candidates(content, search_text, *,
position_hint=None)` and returns every span of `content` it considers a
match, unranked. The chain decides which strategies run; nothing here knows
about other strategies.

Cost: Exact and Whitespace-Insensitive are linear scans. Indentation-
Preserving compares O(lines) windows of the search block's height. Fuzzy
computes an edit distance for every window, i.e. O(windows x L x S) for
window length L and search length S, which is quadratic per block on large
files. `FuzzyStrategy(scan_radius=N)` limits the scan to windows starting
within N lines of the position hint.
"""
from __future__ import annotations

import bisect
import re
from abc import ABC, abstractmethod
from functools import reduce
from math import gcd
from typing import List, Optional, Sequence, Tuple

from rapidfuzz.distance import Levenshtein

from ..models.blocks import MatchCandidate
from ..models.enums import StrategyId
from ..models.options import ApplyOptions
from ..utils.text import (
    LineSpan,
    collapse_whitespace,
    indent_width,
    line_spans,
    split_block_lines,
)

_TOKEN_RE = re.compile(r"\s+|\S+")
_TIE_EPSILON = 1e-9


def _line_range(starts: Sequence[int], start: int, end: int) -> Tuple[int, int]:
    """1-based inclusive line range covered by content[start:end]."""
    first = bisect.bisect_right(starts, start) - 1
    last = bisect.bisect_right(starts, max(start, end - 1)) - 1
    return first + 1, last + 1


def _window_end(spans: Sequence[LineSpan], last: int, with_eol: bool) -> int:
    return spans[last].stop if with_eol else spans[last].end


class MatchStrategy(ABC):
    """Capability shared by every matcher."""

    strategy_id: StrategyId

    @classmethod
    def from_options(cls, options: ApplyOptions) -> "MatchStrategy":
        return cls()

    @abstractmethod
    def produce_candidates(
        self, content: str, search_text: str, *, position_hint: Optional[int] = None
    ) -> List[MatchCandidate]:
        raise NotImplementedError

    def _candidate(
        self, content: str, starts: Sequence[int], start: int, end: int, similarity: float
    ) -> MatchCandidate:
        first, last = _line_range(starts, start, end)
        return MatchCandidate(
            strategy=self.strategy_id,
            start_offset=start,
            end_offset=end,
            matched_text=content[start:end],
            similarity=similarity,
            start_line=first,
            end_line=last,
        )


class ExactStrategy(MatchStrategy):
    """Literal substring search; overlapping occurrences are all reported."""

    strategy_id = StrategyId.EXACT

    def produce_candidates(self, content, search_text, *, position_hint=None):
        if not search_text:
            return []
        starts = [s.start for s in line_spans(content)]
        out: List[MatchCandidate] = []
        pos = content.find(search_text)
        while pos != -1:
            out.append(self._candidate(content, starts, pos, pos + len(search_text), 1.0))
            pos = content.find(search_text, pos + 1)
        return out


class WhitespaceInsensitiveStrategy(MatchStrategy):
    """
    Compare with every whitespace run (line breaks included) collapsed to a
    single space, then map the hit back to offsets in the real content.

    The collapsed search text is trimmed, so a hit starts and ends on
    non-whitespace. If the search text itself starts with indentation the
    span is widened back to the start of its line, and if it ends with a line
    break the span is widened through the line break, so replacing the span
    swaps whole lines as the author intended.
    """

    strategy_id = StrategyId.WHITESPACE_INSENSITIVE

    @staticmethod
    def _normalize(content: str) -> Tuple[str, List[int]]:
        chars: List[str] = []
        index: List[int] = []
        for m in _TOKEN_RE.finditer(content):
            tok = m.group(0)
            if tok[0].isspace():
                chars.append(" ")
                index.append(m.start())
            else:
                chars.append(tok)
                index.extend(range(m.start(), m.end()))
        return "".join(chars), index

    @staticmethod
    def _widen(content: str, search_text: str, start: int, end: int) -> Tuple[int, int]:
        if search_text[:1] in (" ", "\t"):
            s = start
            while s > 0 and content[s - 1] in " \t":
                s -= 1
            if s == 0 or content[s - 1] in "\r\n":
                start = s
        if search_text.rstrip(" \t").endswith(("\n", "\r")):
            e = end
            while e < len(content) and content[e] in " \t":
                e += 1
            if content.startswith("\r\n", e):
                end = e + 2
            elif e < len(content) and content[e] in "\r\n":
                end = e + 1
        return start, end

    def produce_candidates(self, content, search_text, *, position_hint=None):
        needle = collapse_whitespace(search_text)
        if not needle:
            return []
        haystack, index = self._normalize(content)
        starts = [s.start for s in line_spans(content)]
        out: List[MatchCandidate] = []
        pos = haystack.find(needle)
        while pos != -1:
            start = index[pos]
            end = index[pos + len(needle) - 1] + 1
            start, end = self._widen(content, search_text, start, end)
            out.append(self._candidate(content, starts, start, end, 1.0))
            pos = haystack.find(needle, pos + 1)
        return out


def _canonical_indentation(lines: Sequence[str]) -> Tuple[Tuple[int, str], ...]:
    """
    Rewrite each line as (relative indent level, body). Levels count steps of
    the block's own indentation unit above its least-indented line, so a block
    indented with 2 spaces and one indented with a tab compare equal when
    their nesting matches. Blank lines become (0, "").
    """
    widths = [indent_width(ln) for ln in lines if ln.strip()]
    if not widths:
        return tuple((0, "") for _ in lines)
    base = min(widths)
    unit = reduce(gcd, (w - base for w in widths), 0) or 1
    out = []
    for ln in lines:
        body = ln.strip()
        if not body:
            out.append((0, ""))
            continue
        out.append(((indent_width(ln) - base) // unit, ln.lstrip(" \t").rstrip()))
    return tuple(out)


class IndentationPreservingStrategy(MatchStrategy):
    """Line-for-line comparison with leading indentation canonicalized."""

    strategy_id = StrategyId.INDENTATION_PRESERVING

    def produce_candidates(self, content, search_text, *, position_hint=None):
        lines, with_eol = split_block_lines(search_text)
        if not any(ln.strip() for ln in lines):
            return []
        spans = line_spans(content)
        m = len(lines)
        if m > len(spans):
            return []
        want = _canonical_indentation(lines)
        want_bodies = [body for _, body in want]
        content_lines = [content[s.start:s.end] for s in spans]
        bodies = [ln.lstrip(" \t").rstrip() if ln.strip() else "" for ln in content_lines]
        starts = [s.start for s in spans]

        out: List[MatchCandidate] = []
        for i in range(len(spans) - m + 1):
            if bodies[i:i + m] != want_bodies:
                continue
            if _canonical_indentation(content_lines[i:i + m]) != want:
                continue
            start = spans[i].start
            end = _window_end(spans, i + m - 1, with_eol)
            out.append(self._candidate(content, starts, start, end, 1.0))
        return out


def _collapse_overlaps(scored: Sequence[Tuple[int, float]], height: int) -> List[Tuple[int, float]]:
    """
    Keep the best window of each run of overlapping windows. A window is
    dropped when an overlapping one scores strictly higher; equal scores
    both survive so the resolver still sees a real tie.
    """
    kept: List[Tuple[int, float]] = []
    for i, score in sorted(scored, key=lambda p: (-p[1], p[0])):
        if all(abs(i - j) >= height or best - score <= _TIE_EPSILON for j, best in kept):
            kept.append((i, score))
    return sorted(kept)


class FuzzyStrategy(MatchStrategy):
    """
    Edit-distance similarity over same-height line windows.

    similarity = (max_len - distance) / max_len on whitespace-collapsed text,
    where distance is the unit-cost Levenshtein distance. Windows scoring at
    least `threshold` are returned, except that overlapping windows collapse
    to the best scorer among them (one edit region, one candidate). Search
    blocks with fewer than `min_lines` non-blank lines are not scored at all.
    """

    strategy_id = StrategyId.FUZZY

    def __init__(self, threshold: float = 0.8, scan_radius: Optional[int] = None, min_lines: int = 1):
        self.threshold = threshold
        self.scan_radius = scan_radius
        self.min_lines = min_lines

    @classmethod
    def from_options(cls, options: ApplyOptions) -> "FuzzyStrategy":
        return cls(options.fuzzy_threshold, options.fuzzy_scan_radius, options.fuzzy_min_lines)

    def _scan_range(self, spans: Sequence[LineSpan], m: int, position_hint: Optional[int]) -> range:
        last = len(spans) - m
        if self.scan_radius is None or position_hint is None:
            return range(0, last + 1)
        starts = [s.start for s in spans]
        hint_line = max(0, bisect.bisect_right(starts, position_hint) - 1)
        lo = max(0, hint_line - self.scan_radius)
        hi = min(last, hint_line + self.scan_radius)
        return range(lo, hi + 1)

    def similarity(self, needle: str, window: str) -> float:
        """Score two already-normalized strings; returns < threshold early on hopeless pairs."""
        max_len = max(len(needle), len(window))
        if max_len == 0:
            return 1.0
        # Any distance above the cutoff already puts the score under threshold.
        cutoff = int(max_len * (1.0 - self.threshold)) + 1
        if abs(len(needle) - len(window)) > cutoff:
            return 0.0
        distance = Levenshtein.distance(needle, window, score_cutoff=cutoff)
        return (max_len - distance) / max_len

    def produce_candidates(self, content, search_text, *, position_hint=None):
        needle = collapse_whitespace(search_text)
        if not needle:
            return []
        lines, with_eol = split_block_lines(search_text)
        if sum(1 for line in lines if line.strip()) < self.min_lines:
            return []
        spans = line_spans(content)
        m = len(lines)
        if m > len(spans):
            return []
        starts = [s.start for s in spans]

        scored: List[Tuple[int, float]] = []
        for i in self._scan_range(spans, m, position_hint):
            window = collapse_whitespace(content[spans[i].start:spans[i + m - 1].end])
            score = self.similarity(needle, window)
            if score >= self.threshold:
                scored.append((i, score))

        out: List[MatchCandidate] = []
        for i, score in _collapse_overlaps(scored, m):
            start = spans[i].start
            end = _window_end(spans, i + m - 1, with_eol)
            out.append(self._candidate(content, starts, start, end, score))
        return out


STRATEGY_CLASSES = {
    StrategyId.EXACT: ExactStrategy,
    StrategyId.WHITESPACE_INSENSITIVE: WhitespaceInsensitiveStrategy,
    StrategyId.INDENTATION_PRESERVING: IndentationPreservingStrategy,
    StrategyId.FUZZY: FuzzyStrategy,
}
