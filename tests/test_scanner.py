"""Tests for block position enumeration."""

import pytest

from clonedetect.errors import ConfigError
from clonedetect.scanner import BlockScanner, iter_block_positions


def test_positions_are_row_major_and_in_bounds():
    positions = list(iter_block_positions(10, 8, 4, 3))
    assert positions == [(0, 0), (3, 0), (6, 0), (0, 3), (3, 3), (6, 3)]
    for x, y in positions:
        assert 0 <= x <= 10 - 4
        assert 0 <= y <= 8 - 4


def test_non_overlapping_step_equal_to_block():
    positions = list(iter_block_positions(32, 16, 16, 16))
    assert positions == [(0, 0), (16, 0)]


def test_block_as_large_as_image_gives_single_position():
    assert list(iter_block_positions(16, 16, 16, 4)) == [(0, 0)]


@pytest.mark.parametrize("width,height", [(15, 64), (64, 15), (3, 3)])
def test_image_smaller_than_block_is_empty(width, height):
    assert list(iter_block_positions(width, height, 16, 4)) == []
    assert len(BlockScanner(width, height, 16, 4)) == 0


def test_scanner_is_restartable_and_sized():
    scanner = BlockScanner(64, 48, 8, 4)
    first = list(scanner)
    second = list(scanner)
    assert first == second
    assert len(scanner) == len(first) == 15 * 11


@pytest.mark.parametrize("block_size,step", [(0, 4), (16, 0), (16, -2), (-4, 1)])
def test_non_positive_sizes_raise(block_size, step):
    with pytest.raises(ConfigError):
        iter_block_positions(64, 64, block_size, step)
    with pytest.raises(ConfigError):
        BlockScanner(64, 64, block_size, step)
