"""Heightfield generation configuration models."""

import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..exceptions import InvalidParameterError
from ..types import NoiseType, Preset

logger = logging.getLogger(__name__)

# Offsets are always derived for the largest supported octave count
MAX_OCTAVES = 8


class NoiseParameters(BaseModel):
    """Noise parameters for a single generation call."""

    model_config = ConfigDict(frozen=True)

    scale: float = Field(default=20.0, description="Physical height of the terrain")
    noise_scale: float = Field(default=0.3, description="How zoomed in the noise is")
    octaves: int = Field(default=4, description="Number of noise layers")
    persistence: float = Field(default=0.5, description="Amplitude multiplier per octave")
    lacunarity: float = Field(default=2.0, description="Frequency multiplier per octave")
    seed: int = Field(default=0, description="Seed for octave offsets")
    height_multiplier: float = Field(default=1.0, description="Final height scaling")
    height_offset: float = Field(default=0.0, description="Final base height offset")


class PresetProfile(BaseModel):
    """Fixed bundle of noise parameters applied by a preset."""

    model_config = ConfigDict(frozen=True)

    scale: float
    noise_scale: float
    octaves: int
    persistence: float
    lacunarity: float
    height_multiplier: float
    height_offset: float

    def to_parameters(self, seed: int) -> NoiseParameters:
        """Build full noise parameters from this profile and a seed."""
        return NoiseParameters(seed=seed, **self.model_dump())


PRESET_PROFILES: dict[Preset, PresetProfile] = {
    Preset.MOUNTAINS: PresetProfile(
        scale=80.0,
        noise_scale=20.0,
        octaves=6,
        persistence=0.55,
        lacunarity=2.5,
        height_multiplier=1.0,
        height_offset=0.0,
    ),
    Preset.PLAINS: PresetProfile(
        scale=50.0,
        noise_scale=70.0,  # large for smoothness
        octaves=2,
        persistence=0.25,
        lacunarity=1.3,
        height_multiplier=0.12,
        height_offset=0.0,
    ),
    Preset.HILLS: PresetProfile(
        scale=50.0,
        noise_scale=200.0,
        octaves=2,
        persistence=0.3,
        lacunarity=1.5,
        height_multiplier=0.35,
        height_offset=0.05,
    ),
    Preset.COASTAL: PresetProfile(
        scale=60.0,
        noise_scale=40.0,
        octaves=4,
        persistence=0.6,
        lacunarity=1.8,
        height_multiplier=0.7,
        height_offset=0.2,
    ),
    Preset.COMBINED: PresetProfile(
        scale=75.0,
        noise_scale=50.0,
        octaves=6,
        persistence=0.5,
        lacunarity=2.0,
        height_multiplier=1.0,
        height_offset=0.0,
    ),
}


class FalloffConfig(BaseModel):
    """Edge falloff mask parameters."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=True, description="Blend the falloff mask into heights")
    strength: float = Field(default=3.0, description="Falloff curve strength (b)")
    scale: float = Field(default=2.2, description="Falloff curve exponent (a)")


class TerrainConfig(BaseModel):
    """Complete heightfield generation configuration."""

    width: int = Field(default=256, description="Grid width in cells")
    height: int = Field(default=256, description="Grid height in cells")
    seed: int = Field(default=0, description="Seed used when noise is taken from the preset")
    noise_type: NoiseType = Field(default=NoiseType.PERLIN, description="Noise kernel")
    preset: Preset = Field(default=Preset.MOUNTAINS, description="Terrain preset")
    noise: NoiseParameters | None = Field(
        default=None, description="Explicit noise parameters (None = preset profile)"
    )
    falloff: FalloffConfig = Field(default_factory=FalloffConfig)

    @field_validator("noise_type", mode="before")
    @classmethod
    def _parse_noise_type(cls, value: object) -> NoiseType:
        return coerce_noise_type(value)

    @field_validator("preset", mode="before")
    @classmethod
    def _parse_preset(cls, value: object) -> Preset:
        return coerce_preset(value)

    def resolve_parameters(self) -> NoiseParameters:
        """Noise parameters to generate with."""
        if self.noise is not None:
            return self.noise
        return PRESET_PROFILES[self.preset].to_parameters(self.seed)


def coerce_noise_type(value: object) -> NoiseType:
    """Interpret a noise type given as enum, index or name.

    Unrecognised values fall back to Perlin.
    """
    if isinstance(value, NoiseType):
        return value
    try:
        if isinstance(value, str):
            name = value.strip().upper().removesuffix(" NOISE").removesuffix("_NOISE")
            return NoiseType[name]
        return NoiseType(value)
    except (KeyError, ValueError, TypeError):
        logger.warning(f"Unrecognised noise type {value!r}, falling back to Perlin")
        return NoiseType.PERLIN


def coerce_preset(value: object) -> Preset:
    """Interpret a preset given as enum, index or name.

    Raises:
        InvalidParameterError: If the value names no preset.
    """
    if isinstance(value, Preset):
        return value
    try:
        if isinstance(value, str):
            return Preset[value.strip().upper()]
        return Preset(value)
    except (KeyError, ValueError, TypeError) as e:
        raise InvalidParameterError(f"Unknown preset: {value!r}") from e


def validate_dimensions(width: int, height: int) -> None:
    """Check grid dimensions are positive.

    Raises:
        InvalidParameterError: If either dimension is not positive.
    """
    if width <= 0 or height <= 0:
        raise InvalidParameterError(
            f"Terrain dimensions must be positive, got {width}x{height}"
        )


def validate_parameters(
    params: NoiseParameters,
    falloff: FalloffConfig | None = None,
) -> None:
    """Check noise and falloff parameters before generation.

    Args:
        params: Noise parameters to check.
        falloff: Optional falloff parameters to check.

    Raises:
        InvalidParameterError: If any parameter is out of range.
    """
    if params.noise_scale <= 0:
        raise InvalidParameterError(
            f"noise_scale must be positive, got {params.noise_scale}"
        )
    if not 1 <= params.octaves <= MAX_OCTAVES:
        raise InvalidParameterError(
            f"octaves must be in [1, {MAX_OCTAVES}], got {params.octaves}"
        )
    if falloff is not None:
        if falloff.scale <= 0:
            raise InvalidParameterError(
                f"falloff scale must be positive, got {falloff.scale}"
            )
        if falloff.strength < 0:
            raise InvalidParameterError(
                f"falloff strength must be non-negative, got {falloff.strength}"
            )
