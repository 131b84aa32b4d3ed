# src/e2e/test_normalize_and_lines.py

from cpd.normalize import key_from_text, split_lines


def test_key_trims_both_ends_only():
    assert key_from_text("  foo bar\t") == "foo bar"
    assert key_from_text("foo  bar") == "foo  bar"   # internal whitespace is kept
    assert key_from_text("\u00a0x\u2003") == "x"   # unicode spaces trim too
    assert key_from_text(None) == ""


def test_split_lines_terminators():
    assert split_lines("a\r\nb\rc\nd") == ["a", "b", "c", "d"]


def test_split_lines_trailing_terminator_adds_no_line():
    assert split_lines("a\n") == ["a"]
    assert split_lines("a\n\n") == ["a", ""]
    assert split_lines("\n") == [""]


def test_split_lines_empty_text():
    assert split_lines("") == []
