"""
Mesh buffer export.

Writes mesh buffers unchanged to a numpy archive, or as a Wavefront OBJ
triangle list with v/vn/f records.
"""

from pathlib import Path
from typing import Union

import numpy as np

from ..engine.mesher import Mesh


def save_npz(mesh: Mesh, path: Union[str, Path]) -> Path:
    """Save positions, normals and indices to a compressed ``.npz`` archive."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    np.savez_compressed(path, **mesh.buffers())
    return path


def load_npz(path: Union[str, Path]) -> Mesh:
    with np.load(Path(path)) as data:
        return Mesh(data["positions"], data["normals"], data["indices"])


def to_obj(mesh: Mesh) -> str:
    """
    Format a mesh as Wavefront OBJ text.

    Vertex ``i`` uses normal ``i``, so faces are written as ``f a//a b//b c//c``
    with 1-based indices.
    """

    lines = ["# heightfield mesh"]
    lines.extend(f"v {x:.6f} {y:.6f} {z:.6f}" for x, y, z in mesh.positions)
    lines.extend(f"vn {x:.6f} {y:.6f} {z:.6f}" for x, y, z in mesh.normals)
    for a, b, c in mesh.triangles() + 1:
        lines.append(f"f {a}//{a} {b}//{b} {c}//{c}")
    return "\n".join(lines) + "\n"


def save_obj(mesh: Mesh, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_obj(mesh))
    return path
