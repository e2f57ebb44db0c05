from .core import apply_diff, apply_multi_file_diff
from .errors import (
    AmbiguousMatchError,
    BlockApplyError,
    DiffError,
    InvalidOptionsError,
    NoMatchFoundError,
    ParseError,
)
from .extract import parse_diff, render_diff
from .match import (
    ExactStrategy,
    FuzzyStrategy,
    IndentationPreservingStrategy,
    MatchingStrategyChain,
    MatchStrategy,
    WhitespaceInsensitiveStrategy,
    resolve_candidates,
)
from .models import (
    ApplyDiffResult,
    ApplyOptions,
    ApplySummary,
    BlockResult,
    BlockStatus,
    CandidatePreview,
    DiffBlock,
    ErrorKind,
    MatchCandidate,
    StrategyId,
    TelemetryEntry,
)
from .report import format_failure_feedback

__all__ = [
    "apply_diff",
    "apply_multi_file_diff",
    "parse_diff",
    "render_diff",
    "format_failure_feedback",
    "MatchingStrategyChain",
    "MatchStrategy",
    "ExactStrategy",
    "WhitespaceInsensitiveStrategy",
    "IndentationPreservingStrategy",
    "FuzzyStrategy",
    "resolve_candidates",
    "ApplyOptions",
    "ApplyDiffResult",
    "ApplySummary",
    "BlockResult",
    "BlockStatus",
    "CandidatePreview",
    "DiffBlock",
    "ErrorKind",
    "MatchCandidate",
    "StrategyId",
    "TelemetryEntry",
    "DiffError",
    "ParseError",
    "InvalidOptionsError",
    "BlockApplyError",
    "NoMatchFoundError",
    "AmbiguousMatchError",
]
