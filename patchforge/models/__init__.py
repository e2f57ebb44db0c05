# Enums first: the errors package imports them while models is initializing.
from .enums import BlockStatus, ErrorKind, StrategyId
from .blocks import CandidatePreview, DiffBlock, MatchCandidate
from .options import DEFAULT_STRATEGIES, ApplyOptions
from .results import ApplyDiffResult, ApplySummary, BlockResult, TelemetryEntry

__all__ = [
    "StrategyId",
    "BlockStatus",
    "ErrorKind",
    "DiffBlock",
    "MatchCandidate",
    "CandidatePreview",
    "ApplyOptions",
    "DEFAULT_STRATEGIES",
    "BlockResult",
    "TelemetryEntry",
    "ApplySummary",
    "ApplyDiffResult",
]
