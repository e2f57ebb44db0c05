# patchforge/match/chain.py
from __future__ import annotations

import logging
from typing import List, NamedTuple, Optional, Sequence

from .._logging import NoopLogger
from ..models.blocks import MatchCandidate
from ..models.enums import StrategyId
from ..models.options import ApplyOptions
from ..utils.text import line_number_at
from .strategies import STRATEGY_CLASSES, MatchStrategy


class ChainMatch(NamedTuple):
    """Ranked candidates from the first strategy that produced any."""

    candidates: List[MatchCandidate]
    strategy: Optional[StrategyId]
    tried: List[StrategyId]


def rank_candidates(
    candidates: Sequence[MatchCandidate], position_hint: Optional[int] = None
) -> List[MatchCandidate]:
    """Similarity desc, then closeness to the hint, then document order."""

    def key(c: MatchCandidate):
        distance = abs(c.start_offset - position_hint) if position_hint is not None else 0
        return (-c.similarity, distance, c.start_offset)

    return sorted(candidates, key=key)


class MatchingStrategyChain:
    """
    Runs strategies in priority order and stops at the first one that finds
    anything, so an exact hit is never diluted by fuzzy near-misses.
    """

    def __init__(self, strategies: Sequence[MatchStrategy]):
        if not strategies:
            raise ValueError("a strategy chain needs at least one strategy")
        self.strategies = list(strategies)

    @classmethod
    def from_options(cls, options: ApplyOptions) -> "MatchingStrategyChain":
        return cls([STRATEGY_CLASSES[sid].from_options(options) for sid in options.matching_strategies])

    @property
    def strategy_ids(self) -> List[StrategyId]:
        return [s.strategy_id for s in self.strategies]

    def find(
        self,
        content: str,
        search_text: str,
        *,
        position_hint: Optional[int] = None,
        log: logging.Logger | NoopLogger | None = None,
    ) -> ChainMatch:
        log = log or NoopLogger()
        if not search_text:
            # Pure insertion: the only sensible place is the end of the content.
            end = len(content)
            line = line_number_at(content, end)
            insertion = MatchCandidate(
                strategy=self.strategies[0].strategy_id,
                start_offset=end,
                end_offset=end,
                matched_text="",
                similarity=1.0,
                start_line=line,
                end_line=line,
            )
            return ChainMatch([insertion], insertion.strategy, [insertion.strategy])

        tried: List[StrategyId] = []
        for strategy in self.strategies:
            tried.append(strategy.strategy_id)
            found = strategy.produce_candidates(content, search_text, position_hint=position_hint)
            log.debug(f"strategy {strategy.strategy_id.value}: {len(found)} candidate(s)")
            if found:
                return ChainMatch(rank_candidates(found, position_hint), strategy.strategy_id, tried)
        return ChainMatch([], None, tried)
