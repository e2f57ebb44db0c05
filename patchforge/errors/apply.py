# patchforge/errors/apply.py
from __future__ import annotations

from typing import TYPE_CHECKING

from ..models.enums import ErrorKind
from .base import DiffError

if TYPE_CHECKING:
    from ..models.results import BlockResult


class BlockApplyError(DiffError):
    """
    A block could not be applied in strict mode.

    `content` is always the untouched source: strict application is
    all-or-nothing, so no partially patched text is ever exposed.
    """

    def __init__(self, result: "BlockResult", content: str) -> None:
        super().__init__(f"Block {result.index + 1}: {result.message}")
        self.result = result
        self.block_index = result.index
        self.content = content


class NoMatchFoundError(BlockApplyError):
    kind = ErrorKind.NO_MATCH_FOUND


class AmbiguousMatchError(BlockApplyError):
    kind = ErrorKind.AMBIGUOUS
