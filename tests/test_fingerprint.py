"""Tests for the quantised block fingerprint."""

import numpy as np

from clonedetect.fingerprint import (
    Fingerprint,
    downsample,
    extract_fingerprint,
    reconstruct_block,
)


def test_uniform_block_key_is_bucketed_luminance():
    block = np.full((16, 16, 3), 100, dtype=np.uint8)
    fp = extract_fingerprint(block)
    assert fp.key == (100 // 16,) * 16


def test_key_has_sixteen_symbols_for_any_block_size():
    rng = np.random.default_rng(0)
    for size in (4, 8, 16, 32, 64):
        block = rng.integers(0, 256, (size, size, 3), dtype=np.uint8)
        fp = extract_fingerprint(block)
        assert len(fp.key) == 16
        assert all(0 <= v <= 15 for v in fp.key)
        assert fp.cells.shape == (4, 4)


def test_identical_blocks_give_identical_fingerprints():
    rng = np.random.default_rng(1)
    block = rng.integers(0, 256, (16, 16, 3), dtype=np.uint8)
    a = extract_fingerprint(block)
    b = extract_fingerprint(block.copy())
    assert a == b
    assert hash(a) == hash(b)


def test_small_noise_collapses_to_same_key():
    block = np.full((16, 16, 3), 100, dtype=np.uint8)
    noisy = block.copy()
    noisy[::3, ::2] += 1
    assert extract_fingerprint(block) == extract_fingerprint(noisy)


def test_different_content_gives_different_key():
    dark = np.zeros((16, 16, 3), dtype=np.uint8)
    split = dark.copy()
    split[:, 8:] = 200
    assert extract_fingerprint(dark) != extract_fingerprint(split)


def test_key_is_raster_ordered():
    block = np.zeros((16, 16, 3), dtype=np.uint8)
    block[:4, 12:] = 255   # top-right cell only
    fp = extract_fingerprint(block)
    assert fp.key[3] == 15
    assert sum(fp.key) == 15


def test_equality_ignores_cells():
    a = Fingerprint(key=(1,) * 16, cells=np.zeros((4, 4), dtype=np.uint8))
    b = Fingerprint(key=(1,) * 16, cells=np.full((4, 4), 20, dtype=np.uint8))
    assert a == b
    assert len({a, b}) == 1


def test_reconstruct_block_upscales_cells():
    rng = np.random.default_rng(2)
    block = rng.integers(0, 256, (16, 16, 3), dtype=np.uint8)
    fp = extract_fingerprint(block)
    rebuilt = reconstruct_block(fp, 16)
    assert rebuilt.shape == (16, 16, 3)
    assert rebuilt.dtype == np.uint8
    assert np.array_equal(rebuilt[::4, ::4, 0], fp.cells)
    assert np.array_equal(rebuilt[..., 0], rebuilt[..., 2])


def test_downsample_area_averages():
    block = np.zeros((8, 8, 3), dtype=np.uint8)
    block[:2, :2] = 200
    cells = downsample(block)
    assert cells[0, 0] == 200
    assert cells[1, 1] == 0
