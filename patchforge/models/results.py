# patchforge/models/results.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .blocks import CandidatePreview
from .enums import BlockStatus, ErrorKind, StrategyId


@dataclass(frozen=True)
class BlockResult:
    """Outcome of a single block."""

    index: int
    status: BlockStatus
    strategy_used: Optional[StrategyId] = None
    similarity: Optional[float] = None
    error_kind: Optional[ErrorKind] = None
    candidate_previews: List[CandidatePreview] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    search_preview: str = ""
    message: str = ""

    @property
    def applied(self) -> bool:
        return self.status is BlockStatus.APPLIED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "status": self.status.value,
            "strategy_used": self.strategy_used.value if self.strategy_used else None,
            "similarity": self.similarity,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "candidate_previews": [p.to_dict() for p in self.candidate_previews],
            "warnings": list(self.warnings),
            "search_preview": self.search_preview,
            "message": self.message,
        }


@dataclass(frozen=True)
class TelemetryEntry:
    block_index: int
    status: BlockStatus
    strategy: Optional[StrategyId]
    candidates_considered: int
    similarity: Optional[float]
    elapsed_ms: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "block_index": self.block_index,
            "status": self.status.value,
            "strategy": self.strategy.value if self.strategy else None,
            "candidates_considered": self.candidates_considered,
            "similarity": self.similarity,
            "elapsed_ms": self.elapsed_ms,
        }


@dataclass(frozen=True)
class ApplySummary:
    blocks_total: int
    blocks_applied: int
    blocks_failed: int
    failed_blocks: List[BlockResult] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.blocks_total != self.blocks_applied + self.blocks_failed:
            raise ValueError("blocks_total must equal blocks_applied + blocks_failed")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "blocks_total": self.blocks_total,
            "blocks_applied": self.blocks_applied,
            "blocks_failed": self.blocks_failed,
            "failed_blocks": [r.to_dict() for r in self.failed_blocks],
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class ApplyDiffResult:
    """Final content plus the per-call report."""

    content: str
    results: ApplySummary
    telemetry: Optional[List[TelemetryEntry]] = None
    block_results: List[BlockResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.results.blocks_failed == 0

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "content": self.content,
            "results": self.results.to_dict(),
        }
        if self.telemetry is not None:
            out["telemetry"] = [t.to_dict() for t in self.telemetry]
        return out
