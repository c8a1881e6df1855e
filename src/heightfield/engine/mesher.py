"""
Height grid to triangle mesh conversion.

Every grid cell becomes one quad of four unshared vertices with a single
face normal, so the surface is flat shaded (faceted). Cells are emitted in
the same x-major, z-minor order the grid stores its samples in.
"""

import logging
from typing import Dict

import numpy as np

from ..errors import ConfigurationError
from .height_grid import HeightGrid

logger = logging.getLogger(__name__)

# Two triangles per quad, relative to the quad's first vertex
QUAD_INDICES = np.array([0, 1, 2, 0, 2, 3], dtype=np.uint32)
MAX_VERTICES = 2**32


class Mesh:
    """
    Triangle list with per-vertex positions and normals.

    Attributes:
        positions: (N, 3) float32 vertex positions
        normals: (N, 3) float32 vertex normals, parallel to positions
        indices: (M,) uint32 triangle indices into positions
    """

    def __init__(self, positions: np.ndarray, normals: np.ndarray, indices: np.ndarray):
        self.positions = np.asarray(positions, dtype=np.float32).reshape(-1, 3)
        self.normals = np.asarray(normals, dtype=np.float32).reshape(-1, 3)
        self.indices = np.asarray(indices, dtype=np.uint32).ravel()

    @classmethod
    def empty(cls) -> "Mesh":
        return cls(np.zeros((0, 3)), np.zeros((0, 3)), np.zeros(0))

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def normal_count(self) -> int:
        return len(self.normals)

    @property
    def index_count(self) -> int:
        return len(self.indices)

    @property
    def triangle_count(self) -> int:
        return self.index_count // 3

    @property
    def quad_count(self) -> int:
        return self.vertex_count // 4

    def triangles(self) -> np.ndarray:
        """Indices grouped as (triangle_count, 3)."""
        return self.indices.reshape(-1, 3)

    def buffers(self) -> Dict[str, np.ndarray]:
        """Buffers handed to a renderer: positions, normals, indices."""
        return {
            "positions": self.positions,
            "normals": self.normals,
            "indices": self.indices
        }

    def __repr__(self) -> str:
        return f"Mesh(vertices={self.vertex_count}, triangles={self.triangle_count})"


class Mesher:
    """
    Converts height grids into flat-shaded triangle meshes.

    For the cell at (x, z) the quad corners are::

        v0 = (x,   h(x, z),       z)
        v1 = (x,   h(x, z+1),     z+1)
        v2 = (x+1, h(x+1, z+1),   z+1)
        v3 = (x+1, h(x+1, z),     z)

    with heights multiplied by ``height_scale`` and x/z by ``size_scale``.
    The face normal is ``normalize((v1 - v0) x (v3 - v0))``, which points
    to +y for flat terrain; triangles (v0, v1, v2) and (v0, v2, v3) wind
    counter-clockwise seen from that side.
    """

    def __init__(self, height_scale: float = 1.0, size_scale: float = 1.0):
        if not (np.isfinite(height_scale) and height_scale > 0):
            raise ConfigurationError(f"height_scale must be positive, got {height_scale}")
        if not (np.isfinite(size_scale) and size_scale > 0):
            raise ConfigurationError(f"size_scale must be positive, got {size_scale}")

        self.height_scale = float(height_scale)
        self.size_scale = float(size_scale)

    @classmethod
    def from_settings(cls, settings) -> "Mesher":
        """Mesher using a layer's vertical and horizontal scales."""
        return cls(height_scale=settings.height_scale, size_scale=settings.size_scale)

    def mesh(self, grid: HeightGrid) -> Mesh:
        """
        Build the faceted mesh of a height grid.

        Args:
            grid: Source height grid

        Returns:
            Mesh with ``(width-1) * (depth-1) * 4`` vertices and normals and
            ``(width-1) * (depth-1) * 6`` indices; empty for grids smaller
            than 2x2
        """

        width, depth = grid.shape
        if width < 2 or depth < 2:
            logger.debug("Grid of %dx%d has no cells, returning empty mesh", width, depth)
            return Mesh.empty()

        cells = (width - 1) * (depth - 1)
        if cells * 4 > MAX_VERTICES:
            raise ConfigurationError(
                f"Grid of {width}x{depth} needs more than {MAX_VERTICES} vertices"
            )

        heights = grid.heights * self.height_scale
        x, z = np.meshgrid(
            np.arange(width - 1, dtype=np.float64),
            np.arange(depth - 1, dtype=np.float64),
            indexing="ij"
        )

        # (width-1, depth-1, 4, 3): four corners per cell
        quads = np.empty((width - 1, depth - 1, 4, 3), dtype=np.float64)
        quads[:, :, 0] = np.stack([x, heights[:-1, :-1], z], axis=-1)
        quads[:, :, 1] = np.stack([x, heights[:-1, 1:], z + 1], axis=-1)
        quads[:, :, 2] = np.stack([x + 1, heights[1:, 1:], z + 1], axis=-1)
        quads[:, :, 3] = np.stack([x + 1, heights[1:, :-1], z], axis=-1)
        quads[..., 0] *= self.size_scale
        quads[..., 2] *= self.size_scale

        quads = quads.reshape(cells, 4, 3)
        face_normals = self.face_normals(quads)

        positions = quads.reshape(-1, 3)
        normals = np.repeat(face_normals, 4, axis=0)
        bases = np.arange(cells, dtype=np.uint32) * 4
        indices = (bases[:, None] + QUAD_INDICES[None, :]).ravel()

        logger.debug("Meshed %dx%d grid into %d quads", width, depth, cells)
        return Mesh(positions, normals, indices)

    @staticmethod
    def face_normals(quads: np.ndarray) -> np.ndarray:
        """Unit normal of each (cells, 4, 3) quad from edges v0->v1 and v0->v3."""

        edge_a = quads[:, 1] - quads[:, 0]
        edge_b = quads[:, 3] - quads[:, 0]
        normals = np.cross(edge_a, edge_b)
        return normals / np.linalg.norm(normals, axis=1, keepdims=True)
