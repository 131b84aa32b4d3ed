import pytest

from cpd import Engine, MatchConfig, detect_duplicates
from cpd.errors import ConfigError
from cpd.grouper import group_matches
from cpd.index import build_index
from cpd.loader import load_corpus
from cpd.matcher import find_window_matches


def _rows(groups):
    return [(g.content, g.count, g.locations) for g in groups]


def test_two_files_window_of_two():
    groups = detect_duplicates([("A", "foo\nbar\nbaz\n"), ("B", "xxx\nfoo\nbar\n")], 2)
    assert _rows(groups) == [(("foo", "bar"), 2, (("A", 1), ("B", 2)))]
    assert groups[0].line_counts == (2, 2)


def test_three_files_single_line():
    groups = detect_duplicates([("a", "shared\n"), ("b", "shared\n"), ("c", "shared\n")], 1)
    assert _rows(groups) == [(("shared",), 3, (("a", 1), ("b", 1), ("c", 1)))]


def test_digits_pattern_rejects_candidate():
    groups = detect_duplicates([("A", "x\n1\n"), ("B", "x\ny\n")], 2, {2: r"^\d+$"})
    assert groups == []


def test_pattern_gating_with_identical_text():
    sources = [("A", "x\ny\n"), ("B", "x\ny\n")]
    assert len(detect_duplicates(sources, 2)) == 1
    assert detect_duplicates(sources, 2, {2: r"^\d+$"}) == []


@pytest.mark.parametrize("n", [1, 2, 3, 5])
def test_unique_lines_give_no_groups(n):
    sources = [("a", "one\ntwo\nthree\nfour\nfive\n"), ("b", "six\nseven\n")]
    assert detect_duplicates(sources, n) == []


def test_longer_duplicate_gives_overlapping_windows():
    # a 3-line duplicate with N=2 is two windows, never merged
    groups = detect_duplicates([("A", "l1\nl2\nl3\n"), ("B", "l1\nl2\nl3\n")], 2)
    assert _rows(groups) == [
        (("l1", "l2"), 2, (("A", 1), ("B", 1))),
        (("l2", "l3"), 2, (("A", 2), ("B", 2))),
    ]


def test_trimming_equivalence():
    same = detect_duplicates([("A", "  foo\nbar  \n"), ("B", "foo\n\tbar\n")], 2)
    assert len(same) == 1
    assert same[0].lines == ("  foo", "bar  ")     # representative keeps raw text
    assert same[0].content == ("foo", "bar")

    different = detect_duplicates([("A", "foo  bar\nbaz\n"), ("B", "foo bar\nbaz\n")], 2)
    assert different == []


def test_blank_lines_are_ordinary_lines():
    groups = detect_duplicates([("A", "\nx\n"), ("B", "\nx\n")], 2)
    assert _rows(groups) == [(("", "x"), 2, (("A", 1), ("B", 1)))]


def test_order_by_count():
    sources = [
        ("A", "p\nq\n"),
        ("B", "p\nq\n"),
        ("C", "p\nq\nr\ns\n"),
        ("D", "r\ns\n"),
    ]
    asc = detect_duplicates(sources, 2)
    assert [(g.content, g.count) for g in asc] == [(("r", "s"), 2), (("p", "q"), 3)]
    assert asc[0].locations == (("C", 3), ("D", 1))

    desc = detect_duplicates(sources, 2, descending=True)
    assert [(g.content, g.count) for g in desc] == [(("p", "q"), 3), (("r", "s"), 2)]


def test_equal_counts_keep_first_seen_order_both_ways():
    sources = [("A", "a\nb\n\nc\nd\n"), ("B", "c\nd\n\na\nb\n")]
    asc = detect_duplicates(sources, 2)
    desc = detect_duplicates(sources, 2, descending=True)
    assert [g.content for g in asc] == [g.content for g in desc]
    assert asc[0].content == ("a", "b")


def test_representative_is_first_match():
    corpus = load_corpus([("A", "k\nv\n"), ("B", "k\nv\n"), ("C", "k\nv\n")])
    idx = build_index(corpus)
    matches = find_window_matches(corpus, idx, MatchConfig())
    groups = group_matches(corpus, idx, matches, 2)
    assert len(matches) == 3 and len(groups) == 1
    assert groups[0].locations == (("A", 1), ("B", 1), ("C", 1))


def test_idempotent_runs():
    sources = [("A", "p\nq\nr\n"), ("B", "q\nr\np\nq\n"), ("C", "r\np\n")]
    first = detect_duplicates(sources, 2)
    second = detect_duplicates(sources, 2)
    assert first == second and first


def test_to_dict_shape():
    g = detect_duplicates([("A", "foo\nbar\n"), ("B", "foo\nbar\n")], 2)[0]
    assert g.to_dict() == {
        "count": 2,
        "lines": [{"text": "foo", "occurrences": 2}, {"text": "bar", "occurrences": 2}],
        "locations": [{"path": "A", "line": 1}, {"path": "B", "line": 1}],
    }


def test_engine_requires_build():
    eng = Engine()
    with pytest.raises(RuntimeError):
        eng.find_duplicates()
    with pytest.raises(ValueError):
        eng.build([])


def test_bad_config_fails_before_reading():
    with pytest.raises(ConfigError):
        detect_duplicates([("A", "x\n")], 0)


def test_engine_reuses_matches_and_reports_stats():
    eng = Engine(MatchConfig.create(2))
    eng.build_from_sources([("A", "foo\nbar\n"), ("B", "foo\nbar\n"), ("C", "solo\n")])
    try:
        assert eng.window_matches() is eng.window_matches()
        assert eng.stats() == {"files": 3, "lines": 5, "active_files": 2}
        assert len(eng.find_duplicates()) == 1
    finally:
        eng.shutdown()
    assert eng.corpus is None
