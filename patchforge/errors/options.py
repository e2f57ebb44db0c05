# patchforge/errors/options.py
from ..models.enums import ErrorKind
from .base import DiffError


class InvalidOptionsError(DiffError, ValueError):
    """Raised for unusable ApplyOptions, regardless of strict mode."""

    kind = ErrorKind.INVALID_OPTIONS
