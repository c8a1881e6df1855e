"""
Noise sampler that turns layer settings into height grids.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from ..engine.height_grid import HeightGrid
from ..errors import DimensionMismatchError
from .noise import fbm_noise
from .settings import CoordinateMode, HeightSettings, validate_settings

logger = logging.getLogger(__name__)


class NoiseSampler:
    """
    Fills height grids with normalized fractal noise.

    Generation is a pure function of the settings: the same settings
    (seed included) always produce bit-identical grids. Stored samples are
    remapped from the fBm range [-1, 1] to [0, 1]; height scale is left to
    the mesher.
    """

    def generate(self, settings: HeightSettings) -> HeightGrid:
        """
        Generate a new height grid.

        Args:
            settings: Layer settings; validated before any sampling

        Returns:
            HeightGrid of ``settings.width x settings.depth`` owning ``settings``

        Raises:
            ConfigurationError: If any settings field is out of range
        """

        settings = validate_settings(settings)
        grid = HeightGrid(settings.width, settings.depth, settings=settings)
        self._sample_into(grid, settings)
        return grid

    def regenerate(self, grid: HeightGrid, settings: Optional[HeightSettings] = None) -> HeightGrid:
        """
        Clear and re-sample an existing grid in place.

        Args:
            grid: Grid to refill
            settings: New settings; defaults to the grid's own settings

        Returns:
            The same grid instance

        Raises:
            ConfigurationError: If the settings are invalid or missing
            DimensionMismatchError: If the settings describe another grid size
        """

        settings = validate_settings(settings if settings is not None else grid.settings)
        if settings.size != grid.shape:
            raise DimensionMismatchError(grid.shape, settings.size)

        grid.clear()
        grid.settings = settings
        self._sample_into(grid, settings)
        return grid

    def coordinates(self, settings: HeightSettings) -> Tuple[np.ndarray, np.ndarray]:
        """Noise-space coordinates of the grid's x and z axes."""

        xs = np.arange(settings.width, dtype=np.float64)
        zs = np.arange(settings.depth, dtype=np.float64)

        if settings.coordinates == CoordinateMode.SCALED:
            return xs * settings.size_scale, zs * settings.size_scale
        return xs / settings.width, zs / settings.depth

    def _sample_into(self, grid: HeightGrid, settings: HeightSettings):
        if settings.octaves == 0:
            # No fBm terms: the grid keeps its zero fill.
            logger.warning("Zero octaves for seed %d, leaving %dx%d grid at 0",
                           settings.seed, settings.width, settings.depth)
            return

        xs, zs = self.coordinates(settings)
        raw = fbm_noise(
            xs, zs,
            seed=settings.seed,
            octaves=settings.octaves,
            frequency=settings.frequency,
            lacunarity=settings.lacunarity,
            persistence=settings.persistence
        )

        # float rounding can land just outside [0, 1]
        grid.heights[:] = np.clip((raw + 1.0) / 2.0, 0.0, 1.0)

        logger.debug("Sampled %dx%d grid (seed=%d, octaves=%d)",
                     settings.width, settings.depth, settings.seed, settings.octaves)
