"""Tests for ClonePair and the minimum-distance filter."""

import pytest

from clonedetect.pairs import ClonePair, PairFilter, euclidean_distance


def test_displacement_is_dest_minus_source():
    pair = ClonePair(source=(10, 20), dest=(4, 50))
    assert pair.displacement == (-6, 30)


def test_euclidean_distance():
    assert euclidean_distance((0, 0), (3, 4)) == pytest.approx(5.0)


def test_near_match_is_rejected():
    pf = PairFilter(min_distance=20)
    assert pf.evaluate((0, 0), (5, 0)) is None
    assert pf.rejected == 1


def test_match_at_exact_min_distance_is_kept():
    pf = PairFilter(min_distance=20)
    pair = pf.evaluate((0, 0), (12, 16))
    assert pair == ClonePair(source=(0, 0), dest=(12, 16))
    assert pf.rejected == 0


def test_to_dict():
    pair = ClonePair(source=(0, 0), dest=(40, 40))
    assert pair.to_dict() == {"source": [0, 0], "dest": [40, 40], "displacement": [40, 40]}
