"""Tests for heightmap save/load."""

import numpy as np
import pytest

from heightfield.terrain.config import NoiseParameters
from heightfield.terrain.persistence import FORMAT_VERSION, load_heightmap, save_heightmap
from heightfield.types import NoiseType, Preset


class TestSaveLoad:
    """Tests for save_heightmap and load_heightmap."""

    def test_heights_and_metadata_preserved(self, tmp_path, params: NoiseParameters) -> None:
        """Saved grids load back with their generation settings."""
        heights = np.random.default_rng(0).random((12, 20))
        path = tmp_path / "map.npz"

        save_heightmap(path, heights, params, NoiseType.SIMPLEX, Preset.COASTAL)
        loaded, metadata = load_heightmap(path)

        np.testing.assert_array_equal(loaded, heights)
        assert metadata["version"] == FORMAT_VERSION
        assert metadata["width"] == 20
        assert metadata["height"] == 12
        assert metadata["noise_type"] == "SIMPLEX"
        assert metadata["preset"] == "COASTAL"
        assert NoiseParameters.model_validate(metadata["parameters"]) == params
        assert "generated_at" in metadata

    def test_suffix_appended(self, tmp_path, params: NoiseParameters) -> None:
        """Paths without .npz get the suffix, and the written path is returned."""
        heights = np.zeros((4, 5))

        saved = save_heightmap(tmp_path / "map", heights, params, NoiseType.PERLIN, Preset.HILLS)

        assert saved == tmp_path / "map.npz"
        assert saved.exists()
        assert not (tmp_path / "map").exists()
        loaded, _ = load_heightmap(saved)
        assert loaded.shape == (4, 5)

    def test_npz_path_unchanged(self, tmp_path, params: NoiseParameters) -> None:
        """Paths already ending in .npz are written as given."""
        path = tmp_path / "exact.npz"
        assert save_heightmap(path, np.ones((2, 2)), params, NoiseType.VALUE, Preset.PLAINS) == path

    def test_missing_file_raises(self, tmp_path) -> None:
        """Loading a nonexistent file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_heightmap(tmp_path / "nope.npz")

    def test_missing_heights_raises(self, tmp_path) -> None:
        """An archive without a heights array is rejected."""
        path = tmp_path / "other.npz"
        np.savez_compressed(path, elevation=np.zeros((2, 2)))
        with pytest.raises(ValueError):
            load_heightmap(path)

    def test_missing_metadata_is_empty(self, tmp_path) -> None:
        """Archives without metadata load with an empty dict."""
        path = tmp_path / "bare.npz"
        np.savez_compressed(path, heights=np.ones((3, 3)))
        heights, metadata = load_heightmap(path)
        assert heights.shape == (3, 3)
        assert metadata == {}
