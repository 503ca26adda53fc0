"""
clonedetect.scanner: block position enumeration over the image grid.

Positions are top-left ``(x, y)`` coordinates visited in row-major order
(outer loop over ``y``, inner over ``x``), each axis advancing by the step.
Only positions whose whole block fits inside the image are produced.
"""

from __future__ import annotations

from typing import Iterator, Tuple

from .errors import ConfigError


def _check_positive(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")


def iter_block_positions(
    width: int,
    height: int,
    block_size: int,
    step: int,
) -> Iterator[Tuple[int, int]]:
    """Yield ``(x, y)`` with ``0 <= x <= width - block_size`` and the same for y.

    Empty when the image is smaller than one block on either axis.
    """
    _check_positive("block_size", block_size)
    _check_positive("step", step)
    return _positions(width, height, block_size, step)


def _positions(width: int, height: int, block_size: int, step: int) -> Iterator[Tuple[int, int]]:
    for y in range(0, height - block_size + 1, step):
        for x in range(0, width - block_size + 1, step):
            yield x, y


class BlockScanner:
    """Restartable iterable over block positions; every ``iter()`` starts afresh."""

    def __init__(self, width: int, height: int, block_size: int, step: int):
        _check_positive("block_size", block_size)
        _check_positive("step", step)
        self.width = int(width)
        self.height = int(height)
        self.block_size = block_size
        self.step = step

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        return _positions(self.width, self.height, self.block_size, self.step)

    def _axis_count(self, extent: int) -> int:
        if extent < self.block_size:
            return 0
        return (extent - self.block_size) // self.step + 1

    def __len__(self) -> int:
        return self._axis_count(self.width) * self._axis_count(self.height)

    def __repr__(self) -> str:
        return (
            f"BlockScanner(width={self.width}, height={self.height}, "
            f"block_size={self.block_size}, step={self.step})"
        )
