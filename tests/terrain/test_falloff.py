"""Tests for the falloff mask and normalization."""

import numpy as np
import pytest

from heightfield.terrain.falloff import (
    apply_falloff,
    build_falloff_mask,
    finalize_heights,
    normalize,
)


class TestBuildFalloffMask:
    """Tests for build_falloff_mask."""

    def test_shape(self) -> None:
        """Mask is (height, width)."""
        assert build_falloff_mask(40, 30, 3.0, 2.2).shape == (30, 40)

    def test_range(self) -> None:
        """Values lie in [0, 1]."""
        mask = build_falloff_mask(64, 48, 3.0, 2.2)
        assert mask.min() >= 0.0
        assert mask.max() <= 1.0

    def test_center_zero_corner_one(self) -> None:
        """Mask is 0 at the center cell and 1 at the origin corner."""
        mask = build_falloff_mask(64, 64, 3.0, 2.2)
        assert mask[32, 32] == 0.0
        assert mask[0, 0] == 1.0

    def test_rises_toward_edges(self) -> None:
        """Mask grows monotonically from the center along a row."""
        mask = build_falloff_mask(64, 64, 3.0, 2.2)
        row = mask[32, 32:]
        assert np.all(np.diff(row) >= 0)

    def test_symmetric(self) -> None:
        """Cells equidistant from the center share a value."""
        mask = build_falloff_mask(64, 64, 3.0, 2.2)
        assert mask[32, 1] == pytest.approx(mask[32, 63])
        assert mask[1, 32] == pytest.approx(mask[63, 32])

    def test_zero_strength_finite(self) -> None:
        """A zero strength never divides by zero."""
        mask = build_falloff_mask(16, 16, 0.0, 2.2)
        assert np.all(np.isfinite(mask))
        assert mask[8, 8] == 0.0


class TestNormalize:
    """Tests for normalize."""

    def test_two_values_map_to_zero_and_one(self) -> None:
        """The minimum becomes exactly 0 and the maximum exactly 1."""
        result = normalize(np.array([[2.0, 5.0], [5.0, 2.0]]))
        np.testing.assert_array_equal(result, [[0.0, 1.0], [1.0, 0.0]])

    def test_constant_field_is_zero(self) -> None:
        """A constant field normalizes to zeros."""
        result = normalize(np.full((4, 6), 0.7))
        np.testing.assert_array_equal(result, np.zeros((4, 6)))

    def test_preserves_order(self) -> None:
        """Normalization is monotonic."""
        raw = np.array([-3.0, 0.5, 1.0, 4.0])
        assert np.all(np.diff(normalize(raw)) > 0)


class TestApplyFalloff:
    """Tests for apply_falloff and finalize_heights."""

    def test_zero_mask_unchanged(self) -> None:
        """A zero mask leaves heights alone."""
        heights = np.linspace(0.0, 1.0, 12).reshape(3, 4)
        np.testing.assert_allclose(apply_falloff(heights, np.zeros_like(heights)), heights)

    def test_full_mask_halves(self) -> None:
        """A full mask blends halfway toward zero."""
        heights = np.linspace(0.0, 1.0, 12).reshape(3, 4)
        np.testing.assert_allclose(apply_falloff(heights, np.ones_like(heights)), heights / 2)

    def test_finalize_clamps(self) -> None:
        """Multiplier and offset are applied, then clamped to [0, 1]."""
        heights = np.array([0.0, 0.25, 0.5, 1.0])
        result = finalize_heights(heights, 2.0, -0.25)
        np.testing.assert_allclose(result, [0.0, 0.25, 0.75, 1.0])
