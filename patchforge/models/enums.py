# patchforge/models/enums.py
from enum import Enum


class StrategyId(str, Enum):
    """Matching strategies, listed from most literal to most lenient."""

    EXACT = "exact"
    WHITESPACE_INSENSITIVE = "whitespace_insensitive"
    INDENTATION_PRESERVING = "indentation_preserving"
    FUZZY = "fuzzy"


class BlockStatus(str, Enum):
    APPLIED = "applied"
    FAILED = "failed"


class ErrorKind(str, Enum):
    PARSE_ERROR = "ParseError"
    NO_MATCH_FOUND = "NoMatchFound"
    AMBIGUOUS = "Ambiguous"
    INVALID_OPTIONS = "InvalidOptions"
