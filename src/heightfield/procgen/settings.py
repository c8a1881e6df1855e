"""
Per-layer height generation settings.

Each parameter carries its valid range; values outside it are rejected
with a ConfigurationError rather than clamped.
"""

import math
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..errors import ConfigurationError

MAX_SEED = 2**64 - 1
# Past 2**53 float64 noise coordinates can no longer resolve lattice cells
MAX_NOISE_COORDINATE = 2.0**53


class CoordinateMode(str, Enum):
    """How grid cells are mapped to noise-space coordinates."""

    NORMALIZED = "normalized"  # (x / width, z / depth)
    SCALED = "scaled"  # (x * size_scale, z * size_scale)


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten pydantic errors into a single readable message."""

    parts = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"]) or "settings"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


class HeightSettings(BaseModel):
    """
    Configuration for one generated height layer.

    ``size`` may be given instead of ``width``/``depth`` for square grids.
    ``height_scale`` and ``size_scale`` are applied when materializing
    geometry and are never baked into the stored samples.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False, extra="forbid")

    width: int = Field(256, ge=1, description="Samples along x")
    depth: int = Field(256, ge=1, description="Samples along z")
    seed: int = Field(42, ge=0, le=MAX_SEED, description="Noise seed")
    octaves: int = Field(3, ge=0, description="Number of stacked noise frequencies")
    frequency: float = Field(1.0, gt=0.0, description="Base spatial frequency")
    lacunarity: float = Field(2.0, gt=1.0, description="Frequency multiplier per octave")
    persistence: float = Field(0.5, ge=0.0, le=1.0, description="Amplitude multiplier per octave")
    height_scale: float = Field(50.0, gt=0.0, description="Vertical exaggeration")
    size_scale: float = Field(5.0, gt=0.0, description="Horizontal spacing")
    enabled: bool = Field(True, description="Disabled layers are skipped when combining")
    coordinates: CoordinateMode = Field(CoordinateMode.NORMALIZED)

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConfigurationError(describe_validation_error(exc)) from exc

    @model_validator(mode="before")
    @classmethod
    def _expand_size(cls, data: Any) -> Any:
        if isinstance(data, dict) and "size" in data:
            data = dict(data)
            size = data.pop("size")
            data.setdefault("width", size)
            data.setdefault("depth", size)
        return data

    @model_validator(mode="after")
    def _check_noise_range(self) -> "HeightSettings":
        # Work in log space: frequency * lacunarity**k overflows long before k gets large
        if self.octaves == 0:
            return self

        log_top = (math.log2(self.frequency)
                   + (self.octaves - 1) * math.log2(self.lacunarity)
                   + math.log2(max(1.0, self.coordinate_extent)))
        if log_top > math.log2(MAX_NOISE_COORDINATE):
            raise ValueError(
                f"top octave samples noise at about 2**{log_top:.0f}, beyond 2**53; "
                f"lower frequency, lacunarity or octaves"
            )
        return self

    @classmethod
    def parse(cls, data: Dict[str, Any]) -> "HeightSettings":
        """Validate a plain mapping (e.g. from a config file)."""

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(describe_validation_error(exc)) from exc

    @property
    def size(self) -> tuple:
        return (self.width, self.depth)

    @property
    def coordinate_extent(self) -> float:
        """Largest noise-space coordinate before frequency is applied."""

        if self.coordinates == CoordinateMode.SCALED:
            return (max(self.width, self.depth) - 1) * self.size_scale
        return 1.0

    def with_changes(self, **changes: Any) -> "HeightSettings":
        """Return a validated copy with some fields replaced."""
        return HeightSettings.parse({**self.model_dump(), **changes})


def validate_settings(settings: HeightSettings) -> HeightSettings:
    """
    Re-check settings before any sampling work starts.

    Instances built with ``model_construct`` or ``model_copy(update=...)``
    skip pydantic validation, so generation entry points run every
    settings object through this first.
    """

    if not isinstance(settings, HeightSettings):
        raise ConfigurationError(
            f"Expected HeightSettings, got {type(settings).__name__}"
        )
    return HeightSettings.parse(settings.model_dump())
