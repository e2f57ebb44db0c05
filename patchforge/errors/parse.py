# patchforge/errors/parse.py
from __future__ import annotations

from typing import Optional

from ..models.enums import ErrorKind
from .base import DiffError


class ParseError(DiffError, ValueError):
    """Malformed SEARCH/REPLACE markers. Always fatal, raised before any block runs."""

    kind = ErrorKind.PARSE_ERROR

    def __init__(
        self,
        message: str,
        *,
        line: int,
        offset: int,
        block_index: Optional[int] = None,
    ) -> None:
        super().__init__(f"{message} (line {line})")
        self.reason = message
        self.line = line
        self.offset = offset
        self.block_index = block_index
