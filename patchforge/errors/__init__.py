from .apply import AmbiguousMatchError, BlockApplyError, NoMatchFoundError
from .base import DiffError
from .options import InvalidOptionsError
from .parse import ParseError

__all__ = [
    "DiffError",
    "ParseError",
    "InvalidOptionsError",
    "BlockApplyError",
    "NoMatchFoundError",
    "AmbiguousMatchError",
]
