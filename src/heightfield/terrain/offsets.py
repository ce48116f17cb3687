"""Seeded per-octave sampling offsets."""

import numpy as np
from numpy.typing import NDArray

from ..exceptions import InvalidParameterError
from .config import MAX_OCTAVES

OFFSET_RANGE = 100_000


def seed_to_rng(seed: int) -> np.random.Generator:
    """Create a generator for a possibly negative integer seed.

    Seeds are folded into the unsigned 32-bit range, so every seed in
    [-2**31, 2**31) maps to a distinct stream.
    """
    return np.random.default_rng(int(seed) & 0xFFFFFFFF)


def derive_octave_offsets(seed: int, count: int = MAX_OCTAVES) -> NDArray[np.float64]:
    """Derive (x, y) sampling offsets for each octave from a seed.

    The generator is seeded once per call, so the same seed always gives
    the same table and a table of `n` offsets is a prefix of one of `m > n`.

    Args:
        seed: Integer seed.
        count: Number of offset pairs, at most MAX_OCTAVES.

    Returns:
        Array of shape (count, 2) with integral offsets in
        [-OFFSET_RANGE, OFFSET_RANGE).

    Raises:
        InvalidParameterError: If count is outside [1, MAX_OCTAVES].
    """
    if not 1 <= count <= MAX_OCTAVES:
        raise InvalidParameterError(
            f"Offset count must be in [1, {MAX_OCTAVES}], got {count}"
        )

    rng = seed_to_rng(seed)
    offsets = np.empty((count, 2), dtype=np.float64)
    # Draw x then y per octave so shorter tables are prefixes of longer ones
    for i in range(count):
        offsets[i] = rng.integers(-OFFSET_RANGE, OFFSET_RANGE, size=2)
    return offsets
