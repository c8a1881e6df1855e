"""
Procedural height generation.

- settings: validated per-layer HeightSettings
- noise: OpenSimplex fractal Brownian motion
- sampler: NoiseSampler filling height grids from settings
"""

from .noise import fbm_noise
from .sampler import NoiseSampler
from .settings import CoordinateMode, HeightSettings, validate_settings

__all__ = [
    "HeightSettings", "CoordinateMode", "validate_settings",
    "NoiseSampler", "fbm_noise"
]
