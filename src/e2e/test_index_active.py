from cpd.index import LineIndex, active_files, build_index
from cpd.loader import load_corpus


def _corpus():
    return load_corpus([
        ("a", "foo\nbar\nbaz\n"),
        ("b", "xxx\nfoo\nbar\n"),
        ("c", "only\nhere\n"),
    ])


def test_every_record_in_exactly_one_list():
    corpus = _corpus()
    idx = build_index(corpus)
    listed = [rec.id for key in idx for rec in idx.occurrences(key)]
    assert sorted(listed) == [rec.id for rec in corpus]
    assert len(idx) == 6


def test_occurrences_in_corpus_order():
    idx = build_index(_corpus())
    assert [r.location for r in idx.occurrences("foo")] == [("a", 1), ("b", 2)]
    assert idx.count("bar") == 2
    assert idx.is_duplicated("foo") and not idx.is_duplicated("baz")


def test_missing_key_does_not_grow_index():
    idx = build_index(_corpus())
    assert idx.occurrences("nope") == ()
    assert idx.count("nope") == 0
    assert "nope" not in idx
    assert len(idx) == 6


def test_trimmed_lines_share_a_key():
    idx = build_index(load_corpus([("a", "  foo\n"), ("b", "foo\t\n")]))
    assert idx.count("foo") == 2


def test_active_files_prunes_unique_files():
    corpus = _corpus()
    active = active_files(corpus, build_index(corpus))
    assert list(active) == ["a", "b"]
    assert [r.text for r in active["a"]] == ["foo", "bar"]
    assert [r.text for r in active["b"]] == ["foo", "bar"]


def test_empty_corpus():
    corpus = load_corpus([])
    idx = LineIndex().build(corpus)
    assert len(idx) == 0
    assert active_files(corpus, idx) == {}
