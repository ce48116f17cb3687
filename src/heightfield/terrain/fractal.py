"""Fractal (fBm) octave composition over the noise kernels."""

from typing import Callable

import numpy as np
from numpy.typing import NDArray

from ..types import NoiseType, Preset
from .config import NoiseParameters, validate_dimensions, validate_parameters
from .falloff import normalize
from .noise import perlin_noise, simplex_noise, value_noise, worley_noise
from .offsets import derive_octave_offsets

KernelSampler = Callable[[NDArray[np.float64], NDArray[np.float64]], NDArray[np.float64]]

# Coordinate scale applied to simplex samples per preset
SIMPLEX_COORDINATE_SCALE: dict[Preset, float] = {
    Preset.MOUNTAINS: 2.0,
    Preset.PLAINS: 0.8,
    Preset.HILLS: 1.5,
}
SIMPLEX_FRACTAL_OCTAVES = 3
SIMPLEX_FRACTAL_GAIN = 1.5


def _signed(kernel: KernelSampler) -> KernelSampler:
    def sample(x: NDArray[np.float64], y: NDArray[np.float64]) -> NDArray[np.float64]:
        return kernel(x, y) * 2.0 - 1.0

    return sample


_SIGNED_KERNELS: dict[NoiseType, KernelSampler] = {
    NoiseType.PERLIN: _signed(perlin_noise),
    NoiseType.VALUE: _signed(value_noise),
    NoiseType.WORLEY: _signed(worley_noise),
    NoiseType.SIMPLEX: simplex_noise,
}


def simplex_fractal(
    x: NDArray[np.float64],
    y: NDArray[np.float64],
    coordinate_scale: float = 1.0,
) -> NDArray[np.float64]:
    """Three-octave simplex detail used when simplex is the selected kernel.

    Args:
        x: X coordinates.
        y: Y coordinates.
        coordinate_scale: Multiplier on the input coordinates.

    Returns:
        Noise values, roughly in [-1.5, 1.5].
    """
    noise = np.zeros(np.broadcast(x, y).shape, dtype=np.float64)
    amplitude = 1.0
    frequency = 1.0
    max_value = 0.0

    for _ in range(SIMPLEX_FRACTAL_OCTAVES):
        factor = coordinate_scale * frequency
        noise += simplex_noise(x * factor, y * factor) * amplitude
        max_value += amplitude
        amplitude *= 0.5
        frequency *= 2.0

    return noise / max_value * SIMPLEX_FRACTAL_GAIN


def kernel_sampler(noise_type: NoiseType, preset: Preset) -> KernelSampler:
    """Select the sampler for a noise type, mapped to roughly [-1, 1].

    Perlin, value and Worley are rescaled from [0, 1]. Simplex uses the
    three-octave fractal at a preset-dependent coordinate scale.

    Args:
        noise_type: Selected noise kernel.
        preset: Active preset.

    Returns:
        Function of (x, y) arrays.
    """
    if noise_type == NoiseType.SIMPLEX:
        coordinate_scale = SIMPLEX_COORDINATE_SCALE.get(preset, 1.0)

        def sample(x: NDArray[np.float64], y: NDArray[np.float64]) -> NDArray[np.float64]:
            return simplex_fractal(x, y, coordinate_scale)

        return sample

    return _SIGNED_KERNELS.get(noise_type, _SIGNED_KERNELS[NoiseType.PERLIN])


def composite_octaves(
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
    sampler: KernelSampler,
    offsets: NDArray[np.float64],
    params: NoiseParameters,
) -> NDArray[np.float64]:
    """Sum octaves of noise with decaying amplitude and growing frequency.

    Args:
        xs: Pixel x coordinates.
        ys: Pixel y coordinates.
        sampler: Kernel sampler.
        offsets: Per-octave (x, y) offsets, at least params.octaves rows.
        params: Noise parameters (noise_scale, octaves, persistence, lacunarity).

    Returns:
        Unnormalized fractal noise with the shape of xs.
    """
    total = np.zeros(np.broadcast(xs, ys).shape, dtype=np.float64)
    amplitude = 1.0
    frequency = 1.0

    for i in range(params.octaves):
        sample_x = (xs + offsets[i, 0]) / params.noise_scale * frequency
        sample_y = (ys + offsets[i, 1]) / params.noise_scale * frequency
        total += sampler(sample_x, sample_y) * amplitude

        amplitude *= params.persistence
        frequency *= params.lacunarity

    return total


def generate_noise_map(
    width: int,
    height: int,
    params: NoiseParameters,
    noise_type: NoiseType = NoiseType.PERLIN,
    offset: tuple[float, float] = (0.0, 0.0),
) -> NDArray[np.float64]:
    """Generate a standalone centred fBm noise map.

    Unlike the preset pipeline this applies no shaping, falloff or clamping:
    the fractal sum is normalized to [0, 1], then scaled by
    height_multiplier and shifted by height_offset.

    Args:
        width: Map width.
        height: Map height.
        params: Noise parameters, including the seed.
        noise_type: Kernel to sample.
        offset: Extra (x, y) pan applied to every octave.

    Returns:
        Array of shape (height, width).
    """
    validate_dimensions(width, height)
    validate_parameters(params)

    offsets = derive_octave_offsets(params.seed, params.octaves)
    offsets = offsets + np.asarray(offset, dtype=np.float64)

    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    sampler = _SIGNED_KERNELS.get(noise_type, _SIGNED_KERNELS[NoiseType.PERLIN])
    raw = composite_octaves(xs - width / 2.0, ys - height / 2.0, sampler, offsets, params)

    return normalize(raw) * params.height_multiplier + params.height_offset
