import logging

import pytest

from patchforge.match import ExactStrategy, MatchingStrategyChain, rank_candidates
from patchforge.models import ApplyOptions, MatchCandidate, StrategyId

ALL = [
    StrategyId.EXACT,
    StrategyId.WHITESPACE_INSENSITIVE,
    StrategyId.INDENTATION_PRESERVING,
    StrategyId.FUZZY,
]


def _chain(**kwargs):
    return MatchingStrategyChain.from_options(ApplyOptions(**kwargs))


def test_chain_follows_configured_order():
    chain = _chain(matching_strategies=["fuzzy", "exact"])
    assert chain.strategy_ids == [StrategyId.FUZZY, StrategyId.EXACT]


def test_chain_stops_at_first_strategy_with_hits():
    """A literal hit is not diluted by a whitespace-insensitive near twin."""
    content = "foo(a,b)\nfoo(a, b)\n"

    match = _chain().find(content, "foo(a,b)")

    assert match.strategy is StrategyId.EXACT
    assert match.tried == [StrategyId.EXACT]
    assert len(match.candidates) == 1
    assert match.candidates[0].start_line == 1


def test_chain_falls_through_to_lenient_strategy():
    content = "foo(a,b)\nfoo(a, b)\n"

    match = _chain().find(content, "foo(a,  b)")

    assert match.strategy is StrategyId.WHITESPACE_INSENSITIVE
    assert match.tried == [StrategyId.EXACT, StrategyId.WHITESPACE_INSENSITIVE]
    assert [c.start_line for c in match.candidates] == [2]


def test_chain_reports_every_strategy_tried_when_nothing_matches():
    match = _chain().find("alpha\nbeta\n", "gamma\ndelta")
    assert match.candidates == []
    assert match.strategy is None
    assert match.tried == ALL


def test_empty_search_is_one_insertion_at_end():
    content = "a\nb\n"
    match = _chain().find(content, "")

    (c,) = match.candidates
    assert c.start_offset == c.end_offset == len(content)
    assert c.matched_text == ""
    assert c.similarity == 1.0


def test_chain_logs_each_strategy(caplog):
    log = logging.getLogger("patchforge.test.chain")
    with caplog.at_level(logging.DEBUG, logger="patchforge.test.chain"):
        _chain().find("x\n", "nope\nnothing", log=log)
    messages = [rec.message for rec in caplog.records]
    assert any("strategy exact: 0 candidate(s)" in m for m in messages)
    assert any("strategy fuzzy" in m for m in messages)


def test_chain_requires_strategies():
    with pytest.raises(ValueError):
        MatchingStrategyChain([])
    assert MatchingStrategyChain([ExactStrategy()]).strategy_ids == [StrategyId.EXACT]


def _cand(start, similarity, text="x"):
    return MatchCandidate(
        strategy=StrategyId.FUZZY,
        start_offset=start,
        end_offset=start + len(text),
        matched_text=text,
        similarity=similarity,
        start_line=1,
        end_line=1,
    )


def test_rank_by_similarity_then_hint_distance_then_order():
    a, b, c = _cand(0, 0.9), _cand(50, 0.9), _cand(100, 0.9)
    assert rank_candidates([a, b, c], position_hint=90) == [c, b, a]
    assert rank_candidates([c, b, a]) == [a, b, c]

    best = _cand(100, 0.95)
    assert rank_candidates([a, best], position_hint=0)[0] is best
