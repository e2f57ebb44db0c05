# patchforge/models/blocks.py
from dataclasses import dataclass
from typing import Optional

from .enums import StrategyId


@dataclass(frozen=True)
class DiffBlock:
    """One SEARCH/REPLACE instruction, in diff order."""

    index: int
    search_text: str
    replace_text: str
    comment: Optional[str] = None
    file_path: Optional[str] = None
    line: int = 1  # 1-based line of the SEARCH marker in the diff text

    @property
    def is_insertion(self) -> bool:
        return self.search_text == ""


@dataclass(frozen=True)
class MatchCandidate:
    """A span of the current content that a block's search text may refer to."""

    strategy: StrategyId
    start_offset: int
    end_offset: int
    matched_text: str
    similarity: float
    start_line: int  # 1-based, inclusive
    end_line: int    # 1-based, inclusive

    def __post_init__(self):
        if self.end_offset < self.start_offset:
            raise ValueError("candidate end precedes its start")
        if len(self.matched_text) != self.end_offset - self.start_offset:
            raise ValueError("matched_text does not span start_offset..end_offset")


@dataclass(frozen=True)
class CandidatePreview:
    """Diagnostic view of a candidate, reported for ambiguous blocks."""

    strategy: StrategyId
    start_line: int
    end_line: int
    similarity: float
    preview: str

    @property
    def location(self) -> str:
        if self.start_line == self.end_line:
            return f"line {self.start_line}"
        return f"lines {self.start_line}-{self.end_line}"

    def to_dict(self) -> dict:
        return {
            "strategy": self.strategy.value,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "similarity": self.similarity,
            "preview": self.preview,
        }
