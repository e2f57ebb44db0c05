from .chain import ChainMatch, MatchingStrategyChain, rank_candidates
from .resolve import AMBIGUITY_MARGIN, Resolution, resolve_candidates
from .strategies import (
    STRATEGY_CLASSES,
    ExactStrategy,
    FuzzyStrategy,
    IndentationPreservingStrategy,
    MatchStrategy,
    WhitespaceInsensitiveStrategy,
)

__all__ = [
    "MatchStrategy",
    "ExactStrategy",
    "WhitespaceInsensitiveStrategy",
    "IndentationPreservingStrategy",
    "FuzzyStrategy",
    "STRATEGY_CLASSES",
    "MatchingStrategyChain",
    "ChainMatch",
    "rank_candidates",
    "resolve_candidates",
    "Resolution",
    "AMBIGUITY_MARGIN",
]
