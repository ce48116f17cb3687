"""Interface to the host surface that displays a height grid."""

from dataclasses import dataclass
from typing import Protocol

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class TerrainSize:
    """Physical size of the displayed terrain."""

    width: float
    scale: float
    height: float


class HeightmapSurface(Protocol):
    """Host object that owns and displays a finished height grid."""

    def set_heights(
        self,
        heights: NDArray[np.float64],
        resolution: int,
        size: TerrainSize,
    ) -> None:
        """Display heights at the given heightmap resolution and physical size."""
        ...
