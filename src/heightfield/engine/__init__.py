"""
Height grid storage, layer composition and meshing.

Pure data transformations with no I/O:
- HeightGrid: dense (x, z) sample buffer
- LayerCompositor: ordered blend of equally sized grids
- Mesher: flat-shaded triangle mesh of a grid
"""

from .height_grid import HeightGrid
from .layer_compositor import BlendMode, LayerCompositor, LayerSet
from .mesher import Mesh, Mesher

__all__ = [
    "HeightGrid",
    "BlendMode", "LayerCompositor", "LayerSet",
    "Mesh", "Mesher"
]
