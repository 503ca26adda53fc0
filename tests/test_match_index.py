"""Tests for the first-seen fingerprint index."""

from clonedetect.match_index import MatchIndex


def test_first_insert_reports_no_match():
    index = MatchIndex()
    assert index.lookup_or_insert("k", (0, 0)) is None
    assert len(index) == 1
    assert "k" in index


def test_later_lookups_return_first_coordinate():
    index = MatchIndex()
    index.lookup_or_insert("k", (4, 8))
    assert index.lookup_or_insert("k", (40, 8)) == (4, 8)
    assert index.lookup_or_insert("k", (80, 80)) == (4, 8)


def test_hit_never_overwrites_stored_source():
    index = MatchIndex()
    index.lookup_or_insert("k", (1, 1))
    index.lookup_or_insert("k", (2, 2))
    assert index.get("k") == (1, 1)
    assert len(index) == 1


def test_distinct_fingerprints_get_their_own_entries():
    index = MatchIndex()
    assert index.lookup_or_insert((1, 2), (0, 0)) is None
    assert index.lookup_or_insert((2, 1), (4, 0)) is None
    assert len(index) == 2
    assert index.get((3, 3)) is None
