"""Heightfield synthesis package.

This package implements the noise kernels, fractal octave composition,
preset shaping, falloff mask and normalization that turn noise parameters
into a finished height grid.
"""

from .config import PRESET_PROFILES, FalloffConfig, NoiseParameters, TerrainConfig
from .generator import HeightGrid, generate_heights
from .metrics import GenerationMetrics, TerrainMetrics, analyze_terrain
from .persistence import load_heightmap, save_heightmap

__all__ = [
    "PRESET_PROFILES",
    "FalloffConfig",
    "GenerationMetrics",
    "HeightGrid",
    "NoiseParameters",
    "TerrainConfig",
    "TerrainMetrics",
    "analyze_terrain",
    "generate_heights",
    "load_heightmap",
    "save_heightmap",
]
