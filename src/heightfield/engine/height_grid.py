"""
Dense height sample storage.

Samples are kept in a flat buffer in row-major order with
``index = x * depth + z`` so that samples adjacent in z are contiguous.
"""

from typing import Iterator, Tuple

import numpy as np

from ..errors import ConfigurationError, OutOfRangeError


class HeightGrid:
    """
    Fixed-size 2D grid of height samples addressed by (x, z).

    The grid owns the settings it was generated from (if any) for
    provenance and regeneration, but no rendering resources.
    """

    dtype = np.float64

    def __init__(self, width: int, depth: int, settings=None):
        """
        Allocate a zero-filled grid.

        Args:
            width: Number of samples along x
            depth: Number of samples along z
            settings: Optional HeightSettings the grid is generated from

        Raises:
            ConfigurationError: Negative dimensions, or a sample count that
                does not fit the addressable size
        """

        width = int(width)
        depth = int(depth)
        if width < 0 or depth < 0:
            raise ConfigurationError(
                f"Grid dimensions must be non-negative, got {width}x{depth}"
            )
        if width * depth > np.iinfo(np.intp).max:
            raise ConfigurationError(
                f"Grid of {width}x{depth} samples exceeds addressable size"
            )

        self.width = width
        self.depth = depth
        self.settings = settings
        self._buffer = np.zeros(width * depth, dtype=self.dtype)

    @classmethod
    def from_array(cls, heights: np.ndarray, settings=None) -> "HeightGrid":
        """Build a grid from a ``(width, depth)`` array of samples."""

        heights = np.asarray(heights, dtype=cls.dtype)
        if heights.ndim != 2:
            raise ConfigurationError(
                f"Height array must be 2D (width, depth), got shape {heights.shape}"
            )

        grid = cls(heights.shape[0], heights.shape[1], settings=settings)
        grid._buffer[:] = heights.ravel()
        return grid

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.width, self.depth)

    @property
    def heights(self) -> np.ndarray:
        """Writable ``(width, depth)`` view onto the sample buffer."""
        return self._buffer.reshape(self.width, self.depth)

    @property
    def buffer(self) -> np.ndarray:
        """Flat sample buffer in storage order."""
        return self._buffer

    def index(self, x: int, z: int) -> int:
        if not (0 <= x < self.width and 0 <= z < self.depth):
            raise OutOfRangeError(
                f"Coordinate ({x}, {z}) outside grid of {self.width}x{self.depth}"
            )
        return x * self.depth + z

    def position(self, index: int) -> Tuple[int, int]:
        """Inverse of :meth:`index`."""

        self._check_linear(index)
        return (index // self.depth, index % self.depth)

    def get(self, x: int, z: int) -> float:
        return float(self._buffer[self.index(x, z)])

    def set(self, x: int, z: int, height: float):
        self._buffer[self.index(x, z)] = height

    def clear(self):
        """Reset every sample to 0 without reallocating."""
        self._buffer.fill(0.0)

    def copy(self) -> "HeightGrid":
        grid = HeightGrid(self.width, self.depth, settings=self.settings)
        grid._buffer[:] = self._buffer
        return grid

    def _check_linear(self, index: int):
        if not 0 <= index < self._buffer.size:
            raise OutOfRangeError(
                f"Index {index} outside grid of {self._buffer.size} samples"
            )

    def __getitem__(self, index: int) -> float:
        self._check_linear(index)
        return float(self._buffer[index])

    def __setitem__(self, index: int, height: float):
        self._check_linear(index)
        self._buffer[index] = height

    def __len__(self) -> int:
        return self._buffer.size

    def __iter__(self) -> Iterator[float]:
        return (float(h) for h in self._buffer)

    def __eq__(self, other) -> bool:
        if not isinstance(other, HeightGrid):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self._buffer, other._buffer)

    def __repr__(self) -> str:
        return f"HeightGrid(width={self.width}, depth={self.depth})"
