"""Edge falloff mask and height normalization."""

import numpy as np
from numpy.typing import NDArray

from .noise import lerp

FALLOFF_BLEND = 0.5


def build_falloff_mask(
    width: int,
    height: int,
    strength: float,
    scale: float,
) -> NDArray[np.float64]:
    """Build a square falloff mask that rises from the center to the edges.

    Each cell takes v = max(|2x/W - 1|, |2y/H - 1|) and maps it through
    v^a / (v^a + (b - b*v)^a) with a = scale and b = strength.

    Args:
        width: Grid width.
        height: Grid height.
        strength: Curve strength (b).
        scale: Curve exponent (a).

    Returns:
        Mask of shape (height, width) with values in [0, 1].
    """
    xv = np.arange(width, dtype=np.float64) / width * 2.0 - 1.0
    yv = np.arange(height, dtype=np.float64) / height * 2.0 - 1.0
    value = np.maximum(np.abs(xv)[None, :], np.abs(yv)[:, None])

    numerator = np.power(value, scale)
    denominator = numerator + np.power(strength - strength * value, scale)
    return np.divide(
        numerator,
        denominator,
        out=np.zeros_like(numerator),
        where=denominator > 0,
    )


def normalize(raw: NDArray[np.float64]) -> NDArray[np.float64]:
    """Rescale a field linearly so its minimum is 0 and its maximum is 1.

    A constant field maps to all zeros.

    Args:
        raw: Input field.

    Returns:
        Normalized copy of the field.
    """
    low = float(np.min(raw))
    high = float(np.max(raw))
    if high == low:
        return np.zeros_like(raw, dtype=np.float64)
    return (raw - low) / (high - low)


def apply_falloff(
    heights: NDArray[np.float64],
    mask: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Blend heights halfway toward their falloff-dampened values.

    Args:
        heights: Normalized heights.
        mask: Falloff mask with the same shape.

    Returns:
        Heights pulled toward zero near the edges.
    """
    return lerp(heights, heights * (1.0 - mask), FALLOFF_BLEND)


def finalize_heights(
    heights: NDArray[np.float64],
    multiplier: float,
    offset: float,
) -> NDArray[np.float64]:
    """Apply the final height multiplier and offset, then clamp to [0, 1]."""
    return np.clip(heights * multiplier + offset, 0.0, 1.0)
