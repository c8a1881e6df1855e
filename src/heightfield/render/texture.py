"""
Height grid to grayscale image conversion.

Each normalized sample ``h`` becomes the pixel ``(h*255, h*255, h*255, 255)``.
The image is ``grid.width`` pixels wide and ``grid.depth`` pixels tall, with
sample (x, z) at column x, row z.
"""

from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from ..engine.height_grid import HeightGrid


def to_rgba(grid: HeightGrid) -> np.ndarray:
    """
    Map samples to an RGBA pixel array.

    Args:
        grid: Height grid with samples in [0, 1]

    Returns:
        uint8 array of shape (depth, width, 4)
    """

    levels = (np.clip(grid.heights, 0.0, 1.0) * 255).astype(np.uint8).T
    rgba = np.empty(levels.shape + (4,), dtype=np.uint8)
    rgba[..., 0] = levels
    rgba[..., 1] = levels
    rgba[..., 2] = levels
    rgba[..., 3] = 255
    return rgba


def to_image(grid: HeightGrid, scale: int = 1) -> Image.Image:
    """
    Build a Pillow image of the grid.

    Upscaling uses nearest-neighbour sampling so every sample stays a
    sharp-edged block of ``scale x scale`` pixels.
    """

    if scale < 1:
        raise ValueError(f"scale must be >= 1, got {scale}")

    image = Image.fromarray(to_rgba(grid))
    if scale > 1:
        image = image.resize((grid.width * scale, grid.depth * scale), Image.Resampling.NEAREST)
    return image


def save_png(grid: HeightGrid, path: Union[str, Path], scale: int = 1) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    to_image(grid, scale=scale).save(path, format="PNG")
    return path
