"""Preset-specific height shaping.

Each preset may replace the generic fractal sum with its own raw blend, and
may reshape the normalized field afterwards. Both stages dispatch through
mappings keyed by preset, so every rule can be called and tested on its own.
"""

from dataclasses import dataclass
from typing import Callable

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

from ..types import NoiseType, Preset
from .config import NoiseParameters
from .fractal import composite_octaves, kernel_sampler
from .noise import lerp, perlin_noise, smoothstep, worley_noise

COAST_THRESHOLD = 0.45

# Mean of the 12 cells within Manhattan distance 2
PLAINS_NEIGHBOURHOOD = np.array([
    [0, 0, 1, 0, 0],
    [0, 1, 1, 1, 0],
    [1, 1, 0, 1, 1],
    [0, 1, 1, 1, 0],
    [0, 0, 1, 0, 0],
], dtype=np.float64) / 12.0

HILLS_NEIGHBOURHOOD = np.array([
    [0, 1, 0],
    [1, 0, 1],
    [0, 1, 0],
], dtype=np.float64) / 4.0

# Neighbourhood blends skip this many cells at each edge
SMOOTHING_BORDER = 2


@dataclass(frozen=True)
class ShapingContext:
    """Inputs shared by the shaping rules for one generation call."""

    xs: NDArray[np.float64]
    ys: NDArray[np.float64]
    params: NoiseParameters
    noise_type: NoiseType
    preset: Preset
    offsets: NDArray[np.float64]

    @property
    def width(self) -> int:
        return self.xs.shape[1]

    @property
    def height(self) -> int:
        return self.xs.shape[0]

    @property
    def is_simplex(self) -> bool:
        return self.noise_type == NoiseType.SIMPLEX

    def centred(self, zoom: float, octave: int) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Centre-relative sample coordinates at noise_scale * zoom.

        Args:
            zoom: Multiplier on noise_scale; larger is coarser.
            octave: Row of the offset table to shift by.

        Returns:
            Tuple of (x, y) sample coordinates.
        """
        divisor = self.params.noise_scale * zoom
        sample_x = (self.xs - self.width / 2.0) / divisor + self.offsets[octave, 0]
        sample_y = (self.ys - self.height / 2.0) / divisor + self.offsets[octave, 1]
        return sample_x, sample_y


RawShaper = Callable[[ShapingContext], NDArray[np.float64]]
PostShaper = Callable[[NDArray[np.float64], NDArray[np.float64], ShapingContext], NDArray[np.float64]]


def _signed_power(values: NDArray[np.float64], exponent: float) -> NDArray[np.float64]:
    return np.power(np.abs(values), exponent) * np.sign(values)


def _interior_mask(shape: tuple[int, ...], border: int = SMOOTHING_BORDER) -> NDArray[np.bool_]:
    mask = np.zeros(shape, dtype=bool)
    mask[border:-border, border:-border] = True
    return mask


def _neighbour_mean(heights: NDArray[np.float64], weights: NDArray[np.float64]) -> NDArray[np.float64]:
    return ndimage.correlate(heights, weights, mode="nearest")


# --- Raw stage ---


def fractal_raw(context: ShapingContext) -> NDArray[np.float64]:
    """Generic fBm over the selected kernel."""
    sampler = kernel_sampler(context.noise_type, context.preset)
    return composite_octaves(context.xs, context.ys, sampler, context.offsets, context.params)


def coastal_raw(context: ShapingContext) -> NDArray[np.float64]:
    """Worley coastline blended with Perlin detail, split into water and land.

    Blends below COAST_THRESHOLD become shallow water in [0, 0.3); the rest
    become land in [0.3, 1].
    """
    coast = worley_noise(*context.centred(8.0, 0))
    detail_medium = perlin_noise(*context.centred(4.0, 1))
    detail_fine = perlin_noise(*context.centred(2.0, 2))

    blend = coast * 0.5 + detail_medium * 0.3 + detail_fine * 0.2

    water = smoothstep(0.1, COAST_THRESHOLD, blend) * 0.3
    land = lerp(0.3, 1.0, smoothstep(COAST_THRESHOLD, 0.9, blend))
    return np.where(blend < COAST_THRESHOLD, water, land)


def combined_raw(context: ShapingContext) -> NDArray[np.float64]:
    """Selected kernel at two scales mixed with Worley features, contrast boosted."""
    sampler = kernel_sampler(context.noise_type, context.preset)
    base = sampler(*context.centred(4.0, 0))
    features = worley_noise(*context.centred(2.0, 1))
    detail = sampler(*context.centred(1.0, 2))

    blend = base * 0.5 + features * 0.3 + detail * 0.2
    return _signed_power(blend, 1.2)


def hills_raw(context: ShapingContext) -> NDArray[np.float64]:
    """Smooth rolling hills from three layers of Perlin noise."""
    base = perlin_noise(*context.centred(8.0, 0))
    undulation = perlin_noise(*context.centred(4.0, 1))
    detail = perlin_noise(*context.centred(2.0, 2))

    blend = base * 0.7 + undulation * 0.25 + detail * 0.05
    blend = np.power(blend, 1.2)
    blend = smoothstep(0.2, 0.8, blend)
    return blend * 0.6


RAW_SHAPERS: dict[Preset, RawShaper] = {
    Preset.COASTAL: coastal_raw,
    Preset.COMBINED: combined_raw,
    Preset.HILLS: hills_raw,
}


def shape_raw(context: ShapingContext) -> NDArray[np.float64]:
    """Compute the unnormalized height field for the context's preset."""
    return RAW_SHAPERS.get(context.preset, fractal_raw)(context)


# --- Post-normalization stage ---


def plains_post(
    heights: NDArray[np.float64],
    raw: NDArray[np.float64],
    context: ShapingContext,
) -> NDArray[np.float64]:
    """Flatten with a power curve, then smooth toward the 12-cell neighbourhood mean."""
    exponent = 1.8 if context.is_simplex else 2.2
    factor = 0.5 if context.is_simplex else 0.6
    weight = 0.7 if context.is_simplex else 0.6

    flattened = np.power(heights, exponent) * factor
    smoothed = lerp(flattened, _neighbour_mean(heights, PLAINS_NEIGHBOURHOOD), weight)
    return np.where(_interior_mask(heights.shape), smoothed, flattened)


def mountains_post(
    heights: NDArray[np.float64],
    raw: NDArray[np.float64],
    context: ShapingContext,
) -> NDArray[np.float64]:
    """Sharpen peaks by blending toward a steep power curve."""
    exponent = 2.8 if context.is_simplex else 3.0
    return lerp(heights, np.power(heights, exponent), 0.7)


def hills_post(
    heights: NDArray[np.float64],
    raw: NDArray[np.float64],
    context: ShapingContext,
) -> NDArray[np.float64]:
    """Hills keep their raw blend, except simplex which is folded into ridges."""
    if not context.is_simplex:
        return raw

    ridged = _signed_power(heights, 1.2)
    ridged = 1.0 - np.abs(ridged)
    ridged = np.power(ridged, 2.0)

    smoothed = lerp(ridged, _neighbour_mean(heights, HILLS_NEIGHBOURHOOD), 0.3)
    ridged = np.where(_interior_mask(heights.shape), smoothed, ridged)
    return ridged * 1.2


POST_SHAPERS: dict[Preset, PostShaper] = {
    Preset.PLAINS: plains_post,
    Preset.MOUNTAINS: mountains_post,
    Preset.HILLS: hills_post,
}


def shape_post(
    heights: NDArray[np.float64],
    raw: NDArray[np.float64],
    context: ShapingContext,
) -> NDArray[np.float64]:
    """Reshape normalized heights for the context's preset.

    Neighbourhood averages read the normalized field as it was before this
    pass, so the result does not depend on scan order.

    Args:
        heights: Normalized (and possibly falloff-blended) heights.
        raw: Unnormalized field from the raw stage.
        context: Shaping inputs.

    Returns:
        Shaped heights, before the final multiplier/offset/clamp.
    """
    shaper = POST_SHAPERS.get(context.preset)
    if shaper is None:
        return heights
    return shaper(heights, raw, context)
