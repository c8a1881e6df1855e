"""
Exception types raised by the terrain generation core.

All failures are reported at the boundary of the failing call
(construction, generation or composition); nothing is retried.
"""


class HeightfieldError(Exception):
    """Base class for all heightfield errors."""


class ConfigurationError(HeightfieldError, ValueError):
    """Invalid layer settings or grid dimensions."""


class DimensionMismatchError(HeightfieldError, ValueError):
    """Grids of unequal size were combined or regenerated into each other."""

    def __init__(self, expected, actual):
        self.expected = tuple(expected)
        self.actual = tuple(actual)
        super().__init__(
            f"Grid dimensions {self.actual[0]}x{self.actual[1]} do not match "
            f"{self.expected[0]}x{self.expected[1]}"
        )


class OutOfRangeError(HeightfieldError, IndexError):
    """Coordinate or linear index outside the grid."""
