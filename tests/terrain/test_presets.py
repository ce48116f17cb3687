"""Tests for preset shaping rules."""

import numpy as np
import pytest

from heightfield.terrain.config import NoiseParameters
from heightfield.terrain.fractal import kernel_sampler
from heightfield.terrain.noise import lerp, perlin_noise, smoothstep, worley_noise
from heightfield.terrain.offsets import derive_octave_offsets
from heightfield.terrain.presets import (
    POST_SHAPERS,
    RAW_SHAPERS,
    ShapingContext,
    coastal_raw,
    combined_raw,
    fractal_raw,
    hills_post,
    hills_raw,
    mountains_post,
    plains_post,
    shape_post,
    shape_raw,
)
from heightfield.types import NoiseType, Preset


def make_context(
    preset: Preset,
    noise_type: NoiseType = NoiseType.PERLIN,
    width: int = 32,
    height: int = 24,
    params: NoiseParameters | None = None,
) -> ShapingContext:
    params = params if params is not None else NoiseParameters(noise_scale=2.0, seed=5)
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    return ShapingContext(
        xs=xs,
        ys=ys,
        params=params,
        noise_type=noise_type,
        preset=preset,
        offsets=derive_octave_offsets(params.seed),
    )


class TestDispatch:
    """Tests for the preset dispatch tables."""

    def test_raw_shaper_keys(self) -> None:
        """Only Coastal, Combined and Hills replace the generic fBm."""
        assert set(RAW_SHAPERS) == {Preset.COASTAL, Preset.COMBINED, Preset.HILLS}

    def test_post_shaper_keys(self) -> None:
        """Only Plains, Mountains and Hills reshape after normalization."""
        assert set(POST_SHAPERS) == {Preset.PLAINS, Preset.MOUNTAINS, Preset.HILLS}

    def test_mountains_raw_is_fractal(self) -> None:
        """Presets without a raw rule use the generic fBm."""
        context = make_context(Preset.MOUNTAINS)
        np.testing.assert_array_equal(shape_raw(context), fractal_raw(context))

    def test_coastal_post_is_identity(self) -> None:
        """Presets without a post rule pass heights through."""
        heights = np.random.default_rng(0).random((24, 32))
        context = make_context(Preset.COASTAL)
        np.testing.assert_array_equal(shape_post(heights, heights, context), heights)


class TestShapingContext:
    """Tests for centred sample coordinates."""

    def test_centre_maps_to_offset(self) -> None:
        """The grid centre samples at the octave offset."""
        context = make_context(Preset.COASTAL)
        sample_x, sample_y = context.centred(4.0, 1)
        assert sample_x[12, 16] == context.offsets[1, 0]
        assert sample_y[12, 16] == context.offsets[1, 1]

    def test_zoom_divides_distance(self) -> None:
        """One cell right of centre moves 1 / (noise_scale * zoom)."""
        context = make_context(Preset.COASTAL)
        sample_x, _ = context.centred(4.0, 0)
        assert sample_x[12, 17] - sample_x[12, 16] == pytest.approx(1.0 / 8.0)


class TestRawShapers:
    """Tests for the raw-stage preset blends."""

    def test_coastal_range(self) -> None:
        """Coastal heights lie in [0, 1]."""
        result = coastal_raw(make_context(Preset.COASTAL, width=64, height=64))
        assert result.min() >= 0.0
        assert result.max() <= 1.0

    def test_hills_range(self) -> None:
        """Hills are capped at 0.6."""
        result = hills_raw(make_context(Preset.HILLS))
        assert result.min() >= 0.0
        assert result.max() <= 0.6

    @pytest.mark.parametrize("noise_type", list(NoiseType))
    def test_combined_finite(self, noise_type: NoiseType) -> None:
        """Negative blends keep their sign instead of producing NaN."""
        result = combined_raw(make_context(Preset.COMBINED, noise_type))
        assert np.all(np.isfinite(result))

    def test_coastal_blend(self) -> None:
        """Coastal splits a Worley/Perlin blend into water and land at 0.45."""
        context = make_context(Preset.COASTAL, width=64, height=64)
        blend = (
            worley_noise(*context.centred(8.0, 0)) * 0.5
            + perlin_noise(*context.centred(4.0, 1)) * 0.3
            + perlin_noise(*context.centred(2.0, 2)) * 0.2
        )

        result = coastal_raw(context)

        expected = np.where(
            blend < 0.45,
            smoothstep(0.1, 0.45, blend) * 0.3,
            lerp(0.3, 1.0, smoothstep(0.45, 0.9, blend)),
        )
        np.testing.assert_allclose(result, expected)
        np.testing.assert_array_equal(result < 0.3, blend < 0.45)

    @pytest.mark.parametrize("noise_type", list(NoiseType))
    def test_combined_blend(self, noise_type: NoiseType) -> None:
        """Combined mixes two kernel scales with Worley, then a signed 1.2 power."""
        context = make_context(Preset.COMBINED, noise_type)
        sampler = kernel_sampler(noise_type, Preset.COMBINED)
        blend = (
            sampler(*context.centred(4.0, 0)) * 0.5
            + worley_noise(*context.centred(2.0, 1)) * 0.3
            + sampler(*context.centred(1.0, 2)) * 0.2
        )

        result = combined_raw(context)

        np.testing.assert_allclose(result, np.abs(blend) ** 1.2 * np.sign(blend))

    def test_hills_ignores_noise_type(self) -> None:
        """Hills always blend Perlin layers."""
        np.testing.assert_array_equal(
            hills_raw(make_context(Preset.HILLS, NoiseType.WORLEY)),
            hills_raw(make_context(Preset.HILLS, NoiseType.VALUE)),
        )


class TestPostShapers:
    """Tests for the post-normalization preset rules."""

    def test_mountains_curve(self) -> None:
        """Mountains blend 70% toward h^3."""
        heights = np.array([[0.0, 0.5, 1.0]])
        result = mountains_post(heights, heights, make_context(Preset.MOUNTAINS))
        np.testing.assert_allclose(result, [[0.0, 0.2375, 1.0]])

    def test_plains_border_flattened_only(self) -> None:
        """Border cells get the power curve, interior cells are also smoothed."""
        heights = np.full((8, 8), 0.5)
        result = plains_post(heights, heights, make_context(Preset.PLAINS))

        flattened = 0.5**2.2 * 0.6
        assert result[0, 0] == pytest.approx(flattened)
        assert result[1, 5] == pytest.approx(flattened)
        assert result[4, 4] == pytest.approx(flattened + (0.5 - flattened) * 0.6)

    def test_plains_reads_unshaped_neighbours(self) -> None:
        """Neighbour means use the heights from before this pass."""
        heights = np.random.default_rng(3).random((10, 10))
        result = plains_post(heights, heights, make_context(Preset.PLAINS))

        y, x = 5, 4
        neighbours = [
            heights[y + dy, x + dx]
            for dy in range(-2, 3)
            for dx in range(-2, 3)
            if 0 < abs(dy) + abs(dx) <= 2
        ]
        flattened = heights[y, x] ** 2.2 * 0.6
        expected = flattened + (np.mean(neighbours) - flattened) * 0.6
        assert result[y, x] == pytest.approx(expected)

    def test_plains_simplex_curve(self) -> None:
        """Simplex plains use a gentler curve."""
        heights = np.full((3, 3), 0.5)
        result = plains_post(heights, heights, make_context(Preset.PLAINS, NoiseType.SIMPLEX))
        np.testing.assert_allclose(result, 0.5**1.8 * 0.5)

    def test_hills_non_simplex_returns_raw(self) -> None:
        """Non-simplex hills discard normalization and falloff."""
        heights = np.full((6, 6), 0.9)
        raw = np.linspace(0.0, 0.6, 36).reshape(6, 6)
        result = hills_post(heights, raw, make_context(Preset.HILLS))
        np.testing.assert_array_equal(result, raw)

    def test_hills_simplex_ridges(self) -> None:
        """Simplex hills fold into ridges, smooth the interior and scale by 1.2."""
        heights = np.full((8, 8), 0.5)
        result = hills_post(heights, heights, make_context(Preset.HILLS, NoiseType.SIMPLEX))

        ridged = (1.0 - 0.5**1.2) ** 2
        assert result[0, 0] == pytest.approx(ridged * 1.2)
        assert result[4, 4] == pytest.approx((ridged + (0.5 - ridged) * 0.3) * 1.2)
