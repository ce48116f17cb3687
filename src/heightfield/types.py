"""Core enumerations for heightfield generation."""

from enum import IntEnum


class NoiseType(IntEnum):
    """Noise kernels, ordered as the noise type dropdown lists them."""

    PERLIN = 0
    VALUE = 1
    WORLEY = 2
    SIMPLEX = 3

    @property
    def label(self) -> str:
        """Human-readable name, e.g. "Perlin Noise"."""
        return f"{self.name.title()} Noise"


class Preset(IntEnum):
    """Terrain presets, ordered as the preset dropdown lists them."""

    MOUNTAINS = 0
    PLAINS = 1
    HILLS = 2
    COASTAL = 3
    COMBINED = 4

    @property
    def label(self) -> str:
        """Human-readable name, e.g. "Mountains"."""
        return self.name.title()
