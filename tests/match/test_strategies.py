import math

import pytest

from patchforge.match import (
    ExactStrategy,
    FuzzyStrategy,
    IndentationPreservingStrategy,
    WhitespaceInsensitiveStrategy,
)
from patchforge.models import ApplyOptions, StrategyId


def _assert_consistent(content, candidates):
    for c in candidates:
        assert c.matched_text == content[c.start_offset:c.end_offset]


# -----------------------
# Exact
# -----------------------

def test_exact_reports_every_occurrence_with_lines():
    content = "a = 1\nb = 2\na = 1\n"
    found = ExactStrategy().produce_candidates(content, "a = 1")

    assert [(c.start_offset, c.start_line, c.end_line) for c in found] == [(0, 1, 1), (12, 3, 3)]
    assert all(c.similarity == 1.0 and c.strategy is StrategyId.EXACT for c in found)
    _assert_consistent(content, found)


def test_exact_includes_overlapping_occurrences():
    found = ExactStrategy().produce_candidates("aaa", "aa")
    assert [c.start_offset for c in found] == [0, 1]


def test_exact_multiline_span_lines():
    content = "one\ntwo\nthree\n"
    (c,) = ExactStrategy().produce_candidates(content, "two\nthree\n")
    assert (c.start_line, c.end_line) == (2, 3)
    assert c.end_offset == len(content)


# -----------------------
# Whitespace-insensitive
# -----------------------

def test_whitespace_insensitive_maps_back_to_real_offsets():
    content = "def f(a,  b):\n    return a+b\n"
    search = "def f(a, b):\n  return a+b"

    (c,) = WhitespaceInsensitiveStrategy().produce_candidates(content, search)

    assert c.strategy is StrategyId.WHITESPACE_INSENSITIVE
    assert c.matched_text == "def f(a,  b):\n    return a+b"
    assert (c.start_line, c.end_line) == (1, 2)
    _assert_consistent(content, [c])


def test_whitespace_insensitive_widens_to_whole_lines():
    """Leading indentation and a trailing newline in the search text claim whole lines."""
    content = "class A:\n    def f(self):\n        pass\n"
    search = "  def f(self):\n      pass\n"

    (c,) = WhitespaceInsensitiveStrategy().produce_candidates(content, search)

    assert c.matched_text == "    def f(self):\n        pass\n"
    assert c.start_offset == len("class A:\n")


def test_whitespace_insensitive_ignores_blank_search():
    assert WhitespaceInsensitiveStrategy().produce_candidates("a b", "  \n ") == []


# -----------------------
# Indentation-preserving
# -----------------------

def test_indentation_preserving_tabs_match_spaces_with_same_nesting():
    content = "if a:\n\tif b:\n\t\tgo()\n"
    search = "if b:\n  go()"

    (c,) = IndentationPreservingStrategy().produce_candidates(content, search)

    assert c.strategy is StrategyId.INDENTATION_PRESERVING
    assert c.matched_text == "\tif b:\n\t\tgo()"
    assert (c.start_line, c.end_line) == (2, 3)


def test_indentation_preserving_requires_same_relative_nesting():
    content = "if a:\n\tif b:\n\t\tgo()\n"
    assert IndentationPreservingStrategy().produce_candidates(content, "if b:\ngo()") == []


def test_indentation_preserving_keeps_intra_line_spacing_significant():
    content = "if a:\n\tif b:\n\t\tgo()\n"
    assert IndentationPreservingStrategy().produce_candidates(content, "if  b:\n  go()") == []


def test_indentation_preserving_ignores_trailing_whitespace():
    content = "x = 1   \ny = 2\n"
    (c,) = IndentationPreservingStrategy().produce_candidates(content, "    x = 1\n    y = 2\n")
    assert c.matched_text == content


# -----------------------
# Fuzzy
# -----------------------

def test_fuzzy_similarity_formula():
    fz = FuzzyStrategy(threshold=0.5)
    assert fz.similarity("abcdefghij", "abcdefghiX") == pytest.approx(0.9)
    assert fz.similarity("abc", "abc") == 1.0


def test_fuzzy_threshold_boundary_is_inclusive():
    content = "abcdefghiX\nsecond line\n"
    search = "abcdefghij\nsecond line"
    score = 21 / 22  # one substitution in 22 normalized characters

    (c,) = FuzzyStrategy(threshold=score).produce_candidates(content, search)
    assert c.similarity == score
    assert c.matched_text == "abcdefghiX\nsecond line"

    just_above = math.nextafter(score, 1.0)
    assert FuzzyStrategy(threshold=just_above).produce_candidates(content, search) == []


def test_fuzzy_skips_blocks_shorter_than_min_lines():
    content = "const x = 1;\n"
    assert FuzzyStrategy(min_lines=2).produce_candidates(content, "const y = 2;") == []

    (c,) = FuzzyStrategy(min_lines=1).produce_candidates(content, "const y = 2;")
    assert c.similarity == pytest.approx(10 / 12)


def test_fuzzy_from_options_uses_option_values():
    fz = FuzzyStrategy.from_options(
        ApplyOptions(fuzzy_threshold=0.9, fuzzy_scan_radius=3, fuzzy_min_lines=1)
    )
    assert (fz.threshold, fz.scan_radius, fz.min_lines) == (0.9, 3, 1)


def test_fuzzy_scan_radius_limits_windows_around_hint():
    content = "".join(f"item_{i:02d} = compute({i})\n" for i in range(40))
    search = "item_05 = compute(55)"
    hint = content.index("item_30")

    bounded = FuzzyStrategy(scan_radius=2, min_lines=1).produce_candidates(
        content, search, position_hint=hint
    )
    assert bounded
    assert all(29 <= c.start_line <= 33 for c in bounded)

    unbounded = FuzzyStrategy(scan_radius=2, min_lines=1).produce_candidates(content, search)
    assert any(c.start_line == 6 for c in unbounded)
    _assert_consistent(content, unbounded)


def test_fuzzy_overlapping_windows_collapse_to_the_best():
    """Every window near the edit region clears the threshold; only the best one is a candidate."""
    content = "".join(f"x{k} = load({k})\n" for k in range(10))
    search = "x3 = load(3)\nx4 = load(4)\nx5 = load(9)\nx6 = load(6)"

    (c,) = FuzzyStrategy().produce_candidates(content, search)

    assert c.start_line == 4
    assert c.similarity == pytest.approx(50 / 51)
    assert c.matched_text == "x3 = load(3)\nx4 = load(4)\nx5 = load(5)\nx6 = load(6)"


def test_fuzzy_equal_overlapping_windows_are_all_kept():
    content = "item = 1\n" * 4
    found = FuzzyStrategy().produce_candidates(content, "item = 1\nitem = 2")
    assert [c.start_line for c in found] == [1, 2, 3]
    assert len({c.similarity for c in found}) == 1


def test_fuzzy_search_taller_than_content_finds_nothing():
    assert FuzzyStrategy().produce_candidates("one line", "a\nb\nc") == []
