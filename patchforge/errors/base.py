# patchforge/errors/base.py
from __future__ import annotations

from ..models.enums import ErrorKind


class DiffError(Exception):
    """Base class for every error raised by the engine."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
