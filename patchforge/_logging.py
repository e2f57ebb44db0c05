"""
Lightweight, opt-in logging utilities for the library.

Usage in library code:
    from patchforge._logging import resolve_logger

    def apply_something(..., logger=None, log: bool = False):
        log = resolve_logger(logger=logger, enabled=log, name=__name__)
        log.debug("matching block %d", index)  # no-op unless enabled or logger passed

The engine is called once per file edit, often many times per request, so
nothing is emitted unless the caller opts in.
"""
from __future__ import annotations

import logging


class NoopLogger:
    def debug(self, *args, **kwargs):  # type: ignore[no-untyped-def]
        pass

    info = warning = error = exception = critical = debug


def resolve_logger(
    logger: logging.Logger | None = None,
    *,
    enabled: bool = False,
    name: str | None = None,
    level: int = logging.INFO,
) -> logging.Logger | NoopLogger:
    """
    Return a usable logger according to opt-in policy.

    - If `logger` is provided, use it.
    - Else if `enabled` is True, create/get a named logger that propagates
      to the root (so pytest's caplog sees it).
    - Else return a NoopLogger that ignores calls.
    """
    if logger is not None:
        return logger
    if enabled:
        lg = logging.getLogger(name or "patchforge")
        lg.setLevel(level)
        lg.propagate = True
        return lg
    return NoopLogger()


class BlockLogAdapter(logging.LoggerAdapter):
    """Prefix messages with the 1-based block number and tag records with `block`."""

    def process(self, msg, kwargs):  # type: ignore[no-untyped-def]
        kwargs.setdefault("extra", {}).update(self.extra)
        return f"Block #{self.extra['block']}: {msg}", kwargs


def for_block(log, index: int):  # type: ignore[no-untyped-def]
    """
    Scope `log` to the block at 0-based `index`. NoopLogger and duck-typed
    loggers are returned unchanged.
    """
    if isinstance(log, (logging.Logger, logging.LoggerAdapter)):
        return BlockLogAdapter(log, {"block": index + 1})
    return log
