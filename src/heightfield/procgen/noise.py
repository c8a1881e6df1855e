"""
Noise functions for terrain generation.

Fractal Brownian motion built on OpenSimplex 2D noise. All functions are
vectorised over coordinate axes and deterministic for a given seed.
"""

from typing import List

import numpy as np
import opensimplex


def to_signed64(seed: int) -> int:
    """Fold an unsigned 64-bit seed into the signed range OpenSimplex hashes."""

    seed = int(seed) & 0xFFFFFFFFFFFFFFFF
    return seed - (1 << 64) if seed >= (1 << 63) else seed


def octave_weights(octaves: int, persistence: float) -> List[float]:
    """Amplitude of each octave: ``persistence ** k``."""

    weights = []
    amplitude = 1.0
    for _ in range(octaves):
        weights.append(amplitude)
        amplitude *= persistence
    return weights


def fbm_noise(
    xs: np.ndarray,
    zs: np.ndarray,
    seed: int = 0,
    octaves: int = 3,
    frequency: float = 1.0,
    lacunarity: float = 2.0,
    persistence: float = 0.5
) -> np.ndarray:
    """
    Generate fractional Brownian motion (fBm) noise on a grid of points.

    Octave ``k`` samples the noise field at ``frequency * lacunarity**k``
    and is weighted by ``persistence**k``. The sum is divided by the total
    weight so the result stays within the range of a single octave.

    Args:
        xs: 1D array of x coordinates
        zs: 1D array of z coordinates
        seed: Noise seed (unsigned 64-bit)
        octaves: Number of octaves to sum
        frequency: Base frequency of the noise
        lacunarity: Frequency multiplication per octave
        persistence: Amplitude reduction per octave

    Returns:
        Array of shape (len(xs), len(zs)) with values in approximately [-1, 1].
        All zeros when ``octaves`` is 0.
    """

    xs = np.asarray(xs, dtype=np.float64)
    zs = np.asarray(zs, dtype=np.float64)
    total = np.zeros((xs.size, zs.size), dtype=np.float64)

    weights = octave_weights(octaves, persistence)
    if not weights:
        return total

    generator = opensimplex.OpenSimplex(seed=to_signed64(seed))
    freq = frequency

    for amplitude in weights:
        # noise2array returns (len(y), len(x)); transpose back to (x, z)
        layer = generator.noise2array(xs * freq, zs * freq).T
        total += layer * amplitude
        freq *= lacunarity

    return total / sum(weights)
