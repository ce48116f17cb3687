"""Heightmap persistence: save and load generated grids."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from ..types import NoiseType, Preset
from .config import NoiseParameters

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


def save_heightmap(
    path: Path,
    heights: NDArray[np.float64],
    params: NoiseParameters,
    noise_type: NoiseType,
    preset: Preset,
) -> Path:
    """Save a generated height grid to disk.

    Uses numpy's compressed .npz format for efficient storage. The .npz
    suffix is added when missing, as np.savez_compressed would.

    Args:
        path: Output path (should end with .npz).
        heights: Height grid of shape (height, width).
        params: Noise parameters used.
        noise_type: Noise kernel used.
        preset: Preset used.

    Returns:
        Path the heightmap was written to.
    """
    if path.suffix != ".npz":
        path = path.with_name(path.name + ".npz")
    height, width = heights.shape
    metadata = {
        "version": FORMAT_VERSION,
        "width": width,
        "height": height,
        "noise_type": noise_type.name,
        "preset": preset.name,
        "parameters": params.model_dump(),
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }

    np.savez_compressed(
        path,
        heights=heights,
        metadata=np.frombuffer(json.dumps(metadata).encode("utf-8"), dtype=np.uint8),
    )

    file_size = path.stat().st_size / 1024
    logger.info(f"Saved heightmap to {path} ({file_size:.1f} KB)")
    return path


def load_heightmap(path: Path) -> tuple[NDArray[np.float64], dict]:
    """Load a height grid from disk.

    Args:
        path: Path to .npz file.

    Returns:
        Tuple of (height grid, metadata dict).

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If file format is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Heightmap file not found: {path}")

    with np.load(path) as data:
        if "heights" not in data:
            raise ValueError("Invalid heightmap file: missing 'heights' array")
        heights = data["heights"]

        if "metadata" in data:
            metadata = json.loads(data["metadata"].tobytes().decode("utf-8"))
        else:
            metadata = {}

    logger.info(f"Loaded heightmap from {path}: {heights.shape[1]}x{heights.shape[0]}")
    return heights, metadata
