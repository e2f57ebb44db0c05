from patchforge.utils.text import (
    collapse_whitespace,
    detect_eol,
    indent_width,
    leading_ws,
    line_number_at,
    line_spans,
    preview,
    split_block_lines,
)


def test_detect_eol():
    assert detect_eol("a\nb") == "\n"
    assert detect_eol("a\r\nb") == "\r\n"
    assert detect_eol("a\rb") == "\r"
    assert detect_eol("ab") == "\n"


def test_line_spans_ignore_trailing_break():
    text = "ab\r\ncd\n"
    spans = line_spans(text)
    assert [(s.start, s.end, s.stop) for s in spans] == [(0, 2, 4), (4, 6, 7)]
    assert [text[s.start:s.end] for s in line_spans("x\n\ny")] == ["x", "", "y"]
    assert len(line_spans("")) == 1


def test_split_block_lines_reports_trailing_break():
    assert split_block_lines("a\nb\n") == (["a", "b"], True)
    assert split_block_lines("a\r\nb") == (["a", "b"], False)
    assert split_block_lines("") == ([""], False)


def test_line_number_at():
    text = "one\ntwo\nthree"
    assert line_number_at(text, 0) == 1
    assert line_number_at(text, text.index("two")) == 2
    assert line_number_at(text, len(text)) == 3


def test_whitespace_helpers():
    assert collapse_whitespace("  a \t b\n\n c  ") == "a b c"
    assert leading_ws("\t  x = 1") == "\t  "
    assert indent_width("\t  x") == 6
    assert indent_width("no indent") == 0


def test_preview_is_bounded():
    assert preview("short", 10) == "short"
    assert preview("abcdefghij klm", 10) == "abcdefghij... [4 more chars]"
