"""Terrain analysis and generation timing."""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

from ..types import NoiseType, Preset

# Local maxima at or below this height are not counted as peaks
PEAK_THRESHOLD = 0.5

_EIGHT_NEIGHBOURS = np.array([
    [1, 1, 1],
    [1, 0, 1],
    [1, 1, 1],
], dtype=bool)


@dataclass(frozen=True)
class TerrainMetrics:
    """Summary statistics of a finished height grid."""

    average_height: float
    height_variance: float
    peak_count: int
    generation_time: float = 0.0


class GenerationMetrics:
    """Last observed generation duration per (noise type, preset) pair."""

    def __init__(self) -> None:
        self._times: dict[tuple[NoiseType, Preset], float] = {}

    def record(self, noise_type: NoiseType, preset: Preset, seconds: float) -> None:
        """Store the duration of a completed generation, replacing any previous one."""
        self._times[(noise_type, preset)] = seconds

    def get(self, noise_type: NoiseType, preset: Preset) -> float:
        """Duration in seconds, or 0.0 if the pair was never measured."""
        return self._times.get((noise_type, preset), 0.0)

    def fastest(self, preset: Preset) -> tuple[NoiseType, float] | None:
        """Fastest measured noise type for a preset.

        Returns:
            Tuple of (noise type, seconds), or None if nothing was measured
            for the preset.
        """
        best: tuple[NoiseType, float] | None = None
        for noise_type in NoiseType:
            seconds = self.get(noise_type, preset)
            if seconds > 0 and (best is None or seconds < best[1]):
                best = (noise_type, seconds)
        return best

    def items(self) -> list[tuple[tuple[NoiseType, Preset], float]]:
        return sorted(self._times.items())

    def __len__(self) -> int:
        return len(self._times)


def count_peaks(heights: NDArray[np.float64], threshold: float = PEAK_THRESHOLD) -> int:
    """Count interior cells higher than all 8 neighbours and above a threshold.

    Args:
        heights: Height grid.
        threshold: Minimum height of a counted peak (exclusive).

    Returns:
        Number of peaks.
    """
    if heights.shape[0] < 3 or heights.shape[1] < 3:
        return 0

    neighbour_max = ndimage.maximum_filter(
        heights, footprint=_EIGHT_NEIGHBOURS, mode="constant", cval=-np.inf
    )
    peaks = (heights > neighbour_max) & (heights > threshold)
    return int(np.count_nonzero(peaks[1:-1, 1:-1]))


def analyze_terrain(heights: NDArray[np.float64], generation_time: float = 0.0) -> TerrainMetrics:
    """Compute average, variance and peak count of a height grid.

    Args:
        heights: Finished height grid.
        generation_time: Measured generation duration in seconds.

    Returns:
        TerrainMetrics for the grid.
    """
    average = float(np.mean(heights))
    variance = float(np.mean((heights - average) ** 2))
    return TerrainMetrics(
        average_height=average,
        height_variance=variance,
        peak_count=count_peaks(heights),
        generation_time=generation_time,
    )


def format_analysis(
    metrics: TerrainMetrics,
    noise_type: NoiseType,
    preset: Preset,
    timings: GenerationMetrics,
) -> str:
    """Render a terrain analysis report with a noise performance comparison."""
    lines = [
        "Terrain Analysis:",
        f"Noise Type: {noise_type.label}",
        f"Preset: {preset.label}",
        f"Generation Time: {metrics.generation_time:.3f}s",
        f"Average Height: {metrics.average_height:.3f}",
        f"Height Variance: {metrics.height_variance:.3f}",
        f"Peak Count: {metrics.peak_count}",
    ]

    fastest = timings.fastest(preset)
    if fastest is not None:
        best_type, best_time = fastest
        slower_ms = (metrics.generation_time - best_time) * 1000
        lines += [
            "",
            "Performance:",
            f"Best performing noise for {preset.label}: {best_type.label}",
            f"Time difference: {slower_ms:.2f}ms slower than best",
        ]

    return "\n".join(lines)
