"""
Layered terrain configuration files.

A terrain file declares a shared grid size and seed plus an ordered list of
layers; it expands into one HeightSettings per layer.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .engine.layer_compositor import BlendMode
from .errors import ConfigurationError
from .procgen.settings import (
    MAX_SEED, CoordinateMode, HeightSettings, describe_validation_error
)


class LayerConfig(BaseModel):
    """One noise layer; ranges are checked again when expanded to settings."""

    model_config = ConfigDict(extra="forbid")

    height_scale: float = 50.0
    size_scale: float = 5.0
    octaves: int = 3
    persistence: float = 0.16
    frequency: float = 0.02
    lacunarity: float = 2.0
    enabled: bool = True
    seed: Optional[int] = Field(None, description="Overrides the terrain seed for this layer")


class TerrainConfig(BaseModel):
    """Shared grid parameters and the ordered layer list."""

    model_config = ConfigDict(extra="forbid")

    size: int = Field(256, ge=1)
    seed: int = Field(42, ge=0, le=MAX_SEED)
    coordinates: CoordinateMode = CoordinateMode.SCALED
    blend: BlendMode = BlendMode.DECAYING
    layers: List[LayerConfig] = Field(default_factory=lambda: [LayerConfig()])

    def to_settings(self) -> List[HeightSettings]:
        """
        Expand into per-layer settings in declaration order.

        Layer ``i`` without its own seed uses ``seed + i`` so stacked layers
        do not sample identical noise.

        Raises:
            ConfigurationError: If a layer value is out of range
        """

        settings = []
        for i, layer in enumerate(self.layers):
            values: Dict[str, Any] = layer.model_dump(exclude={"seed"})
            values.update(
                width=self.size,
                depth=self.size,
                seed=layer.seed if layer.seed is not None else (self.seed + i) % (MAX_SEED + 1),
                coordinates=self.coordinates
            )
            try:
                settings.append(HeightSettings.parse(values))
            except ConfigurationError as exc:
                raise ConfigurationError(f"layers.{i}: {exc}") from exc
        return settings


def parse_config(data: Dict[str, Any]) -> TerrainConfig:
    try:
        return TerrainConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(describe_validation_error(exc)) from exc


def load_config(path: Union[str, Path]) -> TerrainConfig:
    """
    Load a terrain configuration from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the JSON is malformed or values are invalid
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"{path}: invalid JSON ({exc})") from exc

    return parse_config(data)
