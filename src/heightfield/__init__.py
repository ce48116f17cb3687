"""Procedural terrain heightfield generation.

Builds rectangular grids of elevation values in [0, 1] from Perlin, value,
Worley and simplex noise, shaped by named terrain presets.
"""

from .exceptions import HeightfieldError, InvalidParameterError, MissingDependencyError
from .pipeline import HeightfieldPipeline
from .types import NoiseType, Preset

__all__ = [
    "HeightfieldError",
    "HeightfieldPipeline",
    "InvalidParameterError",
    "MissingDependencyError",
    "NoiseType",
    "Preset",
]
