"""
Layer composition for multi-layer terrain.

Blends an ordered set of independently generated height grids into a
single grid. The default blend halves the running value at every layer,
so the result depends on layer order.
"""

import logging
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from ..errors import DimensionMismatchError
from .height_grid import HeightGrid

logger = logging.getLogger(__name__)


class BlendMode(str, Enum):
    """How layers are folded into the combined grid."""

    # combined = (combined + layer) / 2, starting from zero: layer k weighs 1/2**k
    DECAYING = "decaying"
    # arithmetic mean over layers
    MEAN = "mean"


def is_enabled(grid: HeightGrid) -> bool:
    settings = grid.settings
    return settings is None or getattr(settings, "enabled", True)


class LayerSet:
    """
    Ordered sequence of height grids, one per enabled layer.

    Order is the order the layer settings were declared in.
    """

    def __init__(self, grids: Iterable[HeightGrid] = ()):
        self.grids: List[HeightGrid] = list(grids)

    @classmethod
    def from_settings(cls, settings_list: Sequence, sampler) -> "LayerSet":
        """
        Generate one grid per enabled settings entry.

        Args:
            settings_list: Ordered HeightSettings
            sampler: NoiseSampler used to fill each grid

        Returns:
            LayerSet in declaration order
        """

        return cls(sampler.generate(settings) for settings in settings_list if settings.enabled)

    def append(self, grid: HeightGrid):
        self.grids.append(grid)

    def __iter__(self):
        return iter(self.grids)

    def __len__(self) -> int:
        return len(self.grids)

    def __getitem__(self, index: int) -> HeightGrid:
        return self.grids[index]


class LayerCompositor:
    """
    Combines height grids of identical size into one grid.

    Grids whose settings are disabled are skipped entirely. All remaining
    grids must share the same ``width x depth``; this is checked before any
    combination so no partial output is ever produced.
    """

    def __init__(self, blend: BlendMode = BlendMode.DECAYING):
        self.blend = BlendMode(blend)

    def combine(self, layers: Iterable[HeightGrid]) -> Optional[HeightGrid]:
        """
        Blend layers in order.

        Args:
            layers: Ordered height grids (a LayerSet or any iterable)

        Returns:
            Combined grid, or None when there is nothing to combine

        Raises:
            DimensionMismatchError: If the enabled grids differ in size
        """

        grids = [grid for grid in layers if is_enabled(grid)]
        if not grids:
            logger.warning("No enabled layers to combine")
            return None

        shape = grids[0].shape
        for grid in grids[1:]:
            if grid.shape != shape:
                raise DimensionMismatchError(shape, grid.shape)

        combined = HeightGrid(*shape)
        buffer = combined.buffer

        if self.blend == BlendMode.MEAN:
            for grid in grids:
                buffer += grid.buffer
            buffer /= len(grids)
        else:
            for grid in grids:
                buffer += grid.buffer
                buffer /= 2.0

        logger.debug("Combined %d layers of %dx%d (%s)", len(grids), shape[0], shape[1],
                     self.blend.value)
        return combined
