"""Heightfield synthesis orchestration."""

import logging
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from ..types import NoiseType, Preset
from .config import (
    MAX_OCTAVES,
    FalloffConfig,
    NoiseParameters,
    validate_dimensions,
    validate_parameters,
)
from .falloff import apply_falloff, build_falloff_mask, finalize_heights, normalize
from .offsets import derive_octave_offsets
from .presets import ShapingContext, shape_post, shape_raw

logger = logging.getLogger(__name__)

HeightGrid = NDArray[np.float64]


def generate_heights(
    width: int,
    height: int,
    params: NoiseParameters,
    noise_type: NoiseType = NoiseType.PERLIN,
    preset: Preset = Preset.MOUNTAINS,
    falloff: FalloffConfig | None = None,
    falloff_mask: NDArray[np.float64] | None = None,
) -> HeightGrid:
    """Generate a finished height grid.

    Stages: seeded octave offsets, raw field (generic fBm or preset blend),
    min/max normalization, falloff blend (never for Hills), preset
    post-shaping, then multiplier/offset and clamp.

    Args:
        width: Grid width in cells.
        height: Grid height in cells.
        params: Noise parameters.
        noise_type: Noise kernel for the generic and Combined paths.
        preset: Terrain preset.
        falloff: Falloff settings; None disables the falloff blend.
        falloff_mask: Precomputed mask of shape (height, width). Built from
            `falloff` when omitted.

    Returns:
        Array of shape (height, width) with values in [0, 1].

    Raises:
        InvalidParameterError: If dimensions or parameters are out of range.
    """
    validate_dimensions(width, height)
    validate_parameters(params, falloff)

    logger.debug(
        f"Generating {width}x{height} heights: {noise_type.name} / {preset.name}, "
        f"seed {params.seed}"
    )

    offsets = derive_octave_offsets(params.seed, MAX_OCTAVES)
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)

    context = ShapingContext(
        xs=xs,
        ys=ys,
        params=params,
        noise_type=noise_type,
        preset=preset,
        offsets=offsets,
    )

    # Stage A: raw field
    raw = shape_raw(context)

    # Stage B: normalization and falloff
    heights = normalize(raw)
    if falloff is not None and falloff.enabled and preset != Preset.HILLS:
        if falloff_mask is None:
            falloff_mask = build_falloff_mask(width, height, falloff.strength, falloff.scale)
        heights = apply_falloff(heights, falloff_mask)

    # Stage C: preset shaping
    heights = shape_post(heights, raw, context)
    heights = finalize_heights(heights, params.height_multiplier, params.height_offset)

    _log_height_stats(heights)
    return heights


def _log_height_stats(heights: HeightGrid) -> None:
    """Log height grid statistics."""
    logger.debug(
        f"Heights: min {heights.min():.3f}, max {heights.max():.3f}, "
        f"mean {heights.mean():.3f}"
    )


def dump_debug_images(output_dir: Path, **arrays: NDArray) -> None:
    """Save arrays as images for debugging.

    Args:
        output_dir: Directory to save images.
        **arrays: Named arrays to save.
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        logger.warning("matplotlib not available, skipping debug images")
        return

    output_dir.mkdir(parents=True, exist_ok=True)

    for name, arr in arrays.items():
        fig, ax = plt.subplots(figsize=(10, 10))
        image = ax.imshow(arr, cmap="terrain", vmin=0.0, vmax=1.0)
        fig.colorbar(image, ax=ax, shrink=0.8)
        ax.set_title(name)
        ax.axis("off")

        fig.savefig(output_dir / f"{name}.png", dpi=150, bbox_inches="tight")
        plt.close(fig)

    logger.info(f"Debug images saved to {output_dir}")
