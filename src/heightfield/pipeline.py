"""
Regeneration driver for layered terrain.

Holds the ordered layer settings and the grids derived from them. Settings
changes only mark layers dirty; ``refresh()`` regenerates dirty layers and
then rebuilds the combined grid and its mesh.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from .procgen.sampler import NoiseSampler
from .procgen.settings import HeightSettings, validate_settings
from .engine.height_grid import HeightGrid
from .engine.layer_compositor import LayerCompositor, LayerSet
from .engine.mesher import Mesh, Mesher

logger = logging.getLogger(__name__)


class PipelineResult:
    """
    Pipeline outputs after a refresh.

    The grids are shared with the pipeline, not copied: a later refresh that
    regenerates a layer in place changes them here too. Replaced or dropped
    grids, and the combined grid and mesh, are left as they were.
    """

    def __init__(self, layers: LayerSet, combined: Optional[HeightGrid], mesh: Optional[Mesh]):
        self.layers = layers
        self.combined = combined
        self.mesh = mesh

    @property
    def empty(self) -> bool:
        """True when there is nothing to render."""
        return self.combined is None


class TerrainPipeline:
    """
    Settings store plus derived-grid cache.

    Each layer's grid is regenerated only when its settings change. A grid
    whose size is unchanged is cleared and re-sampled in place; otherwise
    it is replaced. Disabled layers keep no grid.

    The combined grid is meshed with ``mesher`` when given, else with the
    scales of the first enabled layer.
    """

    def __init__(
        self,
        settings: Iterable[HeightSettings] = (),
        sampler: Optional[NoiseSampler] = None,
        compositor: Optional[LayerCompositor] = None,
        mesher: Optional[Mesher] = None
    ):
        self.sampler = sampler or NoiseSampler()
        self.compositor = compositor or LayerCompositor()
        self.mesher = mesher

        self._settings: List[HeightSettings] = []
        self._grids: List[Optional[HeightGrid]] = []
        self._dirty = set()
        self._stale = True

        self.combined: Optional[HeightGrid] = None
        self.mesh: Optional[Mesh] = None

        self.set_layers(settings)

    @property
    def settings(self) -> Sequence[HeightSettings]:
        return tuple(self._settings)

    @property
    def dirty(self) -> bool:
        return bool(self._dirty) or self._stale

    def set_layers(self, settings: Iterable[HeightSettings]):
        """Replace every layer; all of them regenerate on the next refresh."""

        self._settings = [validate_settings(s) for s in settings]
        self._grids = [None] * len(self._settings)
        self._dirty = set(range(len(self._settings)))
        self._stale = True

    def add_layer(self, settings: HeightSettings) -> int:
        self._settings.append(validate_settings(settings))
        self._grids.append(None)
        index = len(self._settings) - 1
        self._dirty.add(index)
        self._stale = True
        return index

    def remove_layer(self, index: int):
        index = self._position(index)
        del self._settings[index]
        del self._grids[index]
        self._dirty = {i if i < index else i - 1 for i in self._dirty if i != index}
        self._stale = True

    def update_layer(self, index: int, settings: HeightSettings) -> bool:
        """
        Replace one layer's settings.

        Args:
            index: Layer position
            settings: New settings

        Returns:
            True if the settings changed and the layer was marked dirty
        """

        index = self._position(index)
        settings = validate_settings(settings)
        if settings == self._settings[index]:
            return False

        self._settings[index] = settings
        self._dirty.add(index)
        self._stale = True
        return True

    def grid(self, index: int) -> Optional[HeightGrid]:
        return self._grids[index]

    def layers(self) -> LayerSet:
        """Current grids of enabled layers, in declaration order."""
        return LayerSet(grid for grid in self._grids if grid is not None)

    def refresh(self) -> PipelineResult:
        """
        Regenerate dirty layers, then the combined grid and mesh.

        Returns:
            PipelineResult; ``empty`` when no layer is enabled
        """

        for index in sorted(self._dirty):
            self._grids[index] = self._regenerate(self._grids[index], self._settings[index])
        regenerated = len(self._dirty)
        self._dirty.clear()

        if self._stale:
            layers = self.layers()
            self.combined = self.compositor.combine(layers)
            self.mesh = self._mesher().mesh(self.combined) if self.combined is not None else None
            self._stale = False
            logger.debug("Refreshed %d of %d layers", regenerated, len(self._settings))

        return PipelineResult(self.layers(), self.combined, self.mesh)

    def _position(self, index: int) -> int:
        # dirty flags are kept by non-negative position
        return range(len(self._settings))[index]

    def _regenerate(self, grid: Optional[HeightGrid], settings: HeightSettings) -> Optional[HeightGrid]:
        if not settings.enabled:
            return None
        if grid is not None and grid.shape == settings.size:
            return self.sampler.regenerate(grid, settings)
        return self.sampler.generate(settings)

    def _mesher(self) -> Mesher:
        if self.mesher is not None:
            return self.mesher
        for settings in self._settings:
            if settings.enabled:
                return Mesher.from_settings(settings)
        return Mesher()
