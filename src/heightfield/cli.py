#!/usr/bin/env python3
"""
Command-line terrain generation.

Builds the combined height grid for a layered terrain configuration and
writes it as a PNG and/or the faceted mesh as .npz / .obj.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from .config import LayerConfig, TerrainConfig, load_config
from .engine.layer_compositor import BlendMode, LayerCompositor, LayerSet
from .engine.mesher import Mesher
from .errors import HeightfieldError
from .procgen.sampler import NoiseSampler
from .procgen.settings import CoordinateMode
from .render import save_npz, save_obj, save_png

LAYER_FLAGS = ("octaves", "frequency", "lacunarity", "persistence", "height_scale", "size_scale")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="heightfield", description="Procedural terrain heightmaps and meshes")
    subparsers = parser.add_subparsers(dest="command", required=True)

    gen = subparsers.add_parser("generate", help="Generate a terrain grid and mesh")
    gen.add_argument("--config", type=str, help="Terrain JSON config (layers)")
    gen.add_argument("--size", type=int, help="Grid size (samples per side)")
    gen.add_argument("--seed", type=int, help="Terrain seed")
    gen.add_argument("--blend", type=str, choices=[m.value for m in BlendMode], help="Layer blend mode")
    gen.add_argument("--coordinates", type=str, choices=[m.value for m in CoordinateMode],
                     help="Noise coordinate mapping")
    gen.add_argument("--octaves", type=int, help="Octaves (without --config)")
    gen.add_argument("--frequency", type=float, help="Base frequency (without --config)")
    gen.add_argument("--lacunarity", type=float, help="Lacunarity (without --config)")
    gen.add_argument("--persistence", type=float, help="Persistence (without --config)")
    gen.add_argument("--height-scale", type=float, help="Vertical scale (without --config)")
    gen.add_argument("--size-scale", type=float, help="Horizontal scale (without --config)")
    gen.add_argument("--image", type=str, help="Output PNG for the combined grid")
    gen.add_argument("--scale", type=int, default=1, help="Nearest-neighbour upscale for the PNG")
    gen.add_argument("--mesh", type=str, help="Output mesh (.npz or .obj)")
    gen.add_argument("--verbose", action="store_true", help="Enable debug logging")

    return parser


def resolve_config(args: argparse.Namespace) -> TerrainConfig:
    """Config file (if any) with command-line overrides applied."""

    if args.config:
        config = load_config(args.config)
    else:
        layer = {name: getattr(args, name) for name in LAYER_FLAGS if getattr(args, name) is not None}
        config = TerrainConfig(layers=[LayerConfig(**layer)])

    overrides = {
        name: getattr(args, name)
        for name in ("size", "seed", "blend", "coordinates")
        if getattr(args, name) is not None
    }
    if overrides:
        config = TerrainConfig.model_validate({**config.model_dump(), **overrides})
    return config


def generate(args: argparse.Namespace) -> int:
    config = resolve_config(args)
    settings = [s for s in config.to_settings() if s.enabled]

    print(f"Generating {len(settings)} of {len(config.layers)} layers at {config.size}x{config.size}")

    sampler = NoiseSampler()
    layers = LayerSet()
    for layer_settings in tqdm(settings, desc="Layers", unit="layer"):
        layers.append(sampler.generate(layer_settings))

    combined = LayerCompositor(config.blend).combine(layers)
    if combined is None:
        print("No enabled layers, nothing to render")
        return 0

    heights = combined.heights
    print(f"Combined grid: {combined.width}x{combined.depth}, "
          f"height range {heights.min():.4f} to {heights.max():.4f}")

    if args.image:
        path = save_png(combined, args.image, scale=args.scale)
        print(f"Saved heightmap image: {path}")

    if args.mesh:
        mesh = Mesher.from_settings(settings[0]).mesh(combined)
        mesh_path = Path(args.mesh)
        if mesh_path.suffix.lower() == ".obj":
            save_obj(mesh, mesh_path)
        else:
            save_npz(mesh, mesh_path)
        print(f"Saved mesh: {mesh_path} ({mesh.vertex_count} vertices, {mesh.triangle_count} triangles)")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for terrain generation."""

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config:
        layer_flags = ["--" + name.replace("_", "-") for name in LAYER_FLAGS if getattr(args, name) is not None]
        if layer_flags:
            parser.error(f"{', '.join(layer_flags)} cannot be combined with --config; "
                         f"set per-layer values in the config file")

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        return generate(args)
    except (HeightfieldError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
