"""
Procedural terrain heightmaps and faceted meshes.

settings -> NoiseSampler -> HeightGrid(s) -> LayerCompositor -> Mesher
"""

from .errors import (
    ConfigurationError, DimensionMismatchError, HeightfieldError, OutOfRangeError
)
from .engine import BlendMode, HeightGrid, LayerCompositor, LayerSet, Mesh, Mesher
from .procgen import CoordinateMode, HeightSettings, NoiseSampler
from .pipeline import PipelineResult, TerrainPipeline

__version__ = "0.1.0"

__all__ = [
    "HeightSettings", "CoordinateMode", "NoiseSampler",
    "HeightGrid", "LayerSet", "LayerCompositor", "BlendMode",
    "Mesh", "Mesher",
    "TerrainPipeline", "PipelineResult",
    "HeightfieldError", "ConfigurationError", "DimensionMismatchError", "OutOfRangeError"
]
