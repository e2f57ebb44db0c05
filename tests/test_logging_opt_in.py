import logging

from patchforge import apply_diff
from patchforge._logging import BlockLogAdapter, NoopLogger, for_block, resolve_logger

DIFF = "<<<<<<< SEARCH\na = 1\n=======\na = 2\n>>>>>>> REPLACE\n"


def test_resolve_logger_default_noop():
    lg = resolve_logger()
    assert isinstance(lg, NoopLogger)
    # Should not raise:
    lg.debug("hello")
    lg.warning("world")


def test_resolve_logger_enabled_creates_logger(caplog):
    with caplog.at_level(logging.INFO):
        lg = resolve_logger(enabled=True, name="patchforge.test")
        lg.info("test message")
    assert any("test message" in rec.message for rec in caplog.records)


def test_resolve_logger_uses_passed_logger():
    custom = logging.getLogger("x")
    assert resolve_logger(logger=custom, enabled=False) is custom


def test_apply_diff_is_silent_by_default(caplog):
    with caplog.at_level(logging.DEBUG):
        apply_diff("a = 1\n", DIFF)
    assert not [r for r in caplog.records if r.name.startswith("patchforge")]


def test_apply_diff_logs_when_enabled(caplog):
    with caplog.at_level(logging.DEBUG):
        apply_diff("a = 1\n", DIFF, log=True)
    messages = [rec.message for rec in caplog.records if rec.name == "patchforge.core"]
    assert any("Parsed 1 block(s)" in m for m in messages)
    assert any("Applied 1/1 block(s); 0 failed" in m for m in messages)


def test_failed_block_is_logged_as_warning(caplog):
    custom = logging.getLogger("patchforge.test.custom")
    with caplog.at_level(logging.WARNING, logger="patchforge.test.custom"):
        apply_diff("b = 1\n", DIFF, logger=custom)
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert warnings and "NoMatchFound" in warnings[0].message


def test_block_messages_carry_block_number(caplog):
    """Records emitted while matching a block are prefixed and tagged with its 1-based number."""
    custom = logging.getLogger("patchforge.test.blocks")
    diff = DIFF + "<<<<<<< SEARCH\nmissing\n=======\nfound\n>>>>>>> REPLACE\n"
    with caplog.at_level(logging.DEBUG, logger="patchforge.test.blocks"):
        apply_diff("a = 1\n", diff, logger=custom)
    records = [r for r in caplog.records if r.name == "patchforge.test.blocks"]
    failed = [r for r in records if r.levelno == logging.WARNING]
    assert len(failed) == 1
    assert failed[0].getMessage().startswith("Block #2: failed [NoMatchFound]")
    assert failed[0].block == 2
    assert {r.block for r in records if hasattr(r, "block")} == {1, 2}


def test_for_block_leaves_noop_logger_alone():
    noop = NoopLogger()
    assert for_block(noop, 3) is noop
    adapter = for_block(logging.getLogger("patchforge.test.adapter"), 0)
    assert isinstance(adapter, BlockLogAdapter)
    assert adapter.extra == {"block": 1}
