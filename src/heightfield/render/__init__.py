"""
Host-side materialization of grids and meshes.

- texture: height grid to grayscale RGBA image / PNG
- export: mesh buffers to .npz or Wavefront OBJ
"""

from . import export, texture
from .export import load_npz, save_npz, save_obj, to_obj
from .texture import save_png, to_image, to_rgba

__all__ = [
    "export", "texture",
    "to_rgba", "to_image", "save_png",
    "save_npz", "load_npz", "to_obj", "save_obj"
]
