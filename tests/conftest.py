"""Shared test fixtures for heightfield tests."""

import numpy as np
import pytest
from numpy.typing import NDArray

from heightfield.pipeline import HeightfieldPipeline
from heightfield.terrain.config import NoiseParameters
from heightfield.terrain.surface import TerrainSize


class RecordingSurface:
    """Display surface that remembers every grid pushed to it."""

    def __init__(self) -> None:
        self.calls: list[tuple[NDArray[np.float64], int, TerrainSize]] = []

    def set_heights(
        self,
        heights: NDArray[np.float64],
        resolution: int,
        size: TerrainSize,
    ) -> None:
        self.calls.append((heights, resolution, size))


@pytest.fixture
def params() -> NoiseParameters:
    """Small-scale noise parameters with a fixed seed."""
    return NoiseParameters(noise_scale=8.0, octaves=3, seed=42)


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def pipeline(params: NoiseParameters) -> HeightfieldPipeline:
    """24x20 pipeline that only generates when asked."""
    return HeightfieldPipeline(
        width=24,
        height=20,
        params=params,
        rng=np.random.default_rng(7),
        auto_regenerate=False,
    )
