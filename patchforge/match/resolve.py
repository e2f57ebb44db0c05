# patchforge/match/resolve.py
from __future__ import annotations

from typing import Callable, List, NamedTuple, Optional, Sequence

from ..models.blocks import MatchCandidate
from ..models.enums import ErrorKind, StrategyId

AMBIGUITY_MARGIN = 0.05
# Similarities are ratios of small integers; absorb float noise at the margin.
_EPSILON = 1e-9


class Resolution(NamedTuple):
    accepted: Optional[MatchCandidate]
    error_kind: Optional[ErrorKind]
    # For Ambiguous: every candidate tied with the top one (top included).
    contenders: List[MatchCandidate]


def resolve_candidates(
    ranked: Sequence[MatchCandidate],
    priority: Callable[[StrategyId], int],
    *,
    margin: float = AMBIGUITY_MARGIN,
) -> Resolution:
    """
    Decide whether a block can be applied from its ranked candidates.

    - no candidates: NoMatchFound
    - one candidate: accept it
    - several: accept the top one only if it beats the runner-up by at least
      `margin`, or if it comes from a strictly more literal strategy than all
      the others (`priority` returns lower numbers for more literal
      strategies). Otherwise Ambiguous; no candidate is picked arbitrarily.
    """
    if not ranked:
        return Resolution(None, ErrorKind.NO_MATCH_FOUND, [])
    top = ranked[0]
    if len(ranked) == 1:
        return Resolution(top, None, [top])

    rest = ranked[1:]
    if top.similarity - rest[0].similarity >= margin - _EPSILON:
        return Resolution(top, None, [top])
    top_priority = priority(top.strategy)
    if all(top_priority < priority(c.strategy) for c in rest):
        return Resolution(top, None, [top])

    tied = [c for c in ranked if top.similarity - c.similarity < margin - _EPSILON]
    return Resolution(None, ErrorKind.AMBIGUOUS, tied)
