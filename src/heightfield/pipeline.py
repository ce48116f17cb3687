"""Stateful heightfield pipeline with the configuration command surface."""

import time

import numpy as np
import structlog
from numpy.typing import NDArray

from .exceptions import HeightfieldError, MissingDependencyError
from .logging import GenerationLogWriter, GenerationRecord
from .terrain.config import (
    PRESET_PROFILES,
    FalloffConfig,
    NoiseParameters,
    TerrainConfig,
    coerce_noise_type,
    coerce_preset,
    validate_dimensions,
    validate_parameters,
)
from .terrain.falloff import build_falloff_mask
from .terrain.generator import HeightGrid, generate_heights
from .terrain.metrics import GenerationMetrics, TerrainMetrics, analyze_terrain, format_analysis
from .terrain.surface import HeightmapSurface, TerrainSize
from .types import NoiseType, Preset

logger = structlog.get_logger()

# Range of seeds drawn by set_random_seed
RANDOM_SEED_MIN = -10000
RANDOM_SEED_MAX = 10000


class HeightfieldPipeline:
    """Owns the active generation settings and produces height grids.

    Configuration setters validate their input, update the settings, and
    regenerate the terrain when auto_regenerate is set, pushing the result
    to the attached surface if there is one. Generation durations are kept
    per (noise type, preset) for the lifetime of the pipeline.
    """

    def __init__(
        self,
        width: int = 256,
        height: int = 256,
        params: NoiseParameters | None = None,
        noise_type: NoiseType = NoiseType.PERLIN,
        preset: Preset = Preset.MOUNTAINS,
        falloff: FalloffConfig | None = None,
        surface: HeightmapSurface | None = None,
        rng: np.random.Generator | None = None,
        log_writer: GenerationLogWriter | None = None,
        auto_regenerate: bool = True,
    ):
        """Initialize HeightfieldPipeline.

        Args:
            width: Grid width in cells
            height: Grid height in cells
            params: Initial noise parameters (defaults if None)
            noise_type: Initial noise kernel
            preset: Initial preset; its profile is not applied until apply_preset
            falloff: Falloff settings (defaults if None)
            surface: Display surface to push regenerated grids to
            rng: Source of random seeds (fresh entropy if None)
            log_writer: Optional Parquet log of every generation
            auto_regenerate: Regenerate after every configuration change
        """
        validate_dimensions(width, height)
        self._params = params if params is not None else NoiseParameters()
        self._falloff = falloff if falloff is not None else FalloffConfig()
        validate_parameters(self._params, self._falloff)

        self._width = width
        self._height = height
        self._noise_type = noise_type
        self._preset = preset
        self._surface = surface
        self._rng = rng if rng is not None else np.random.default_rng()
        self._log_writer = log_writer
        self.auto_regenerate = auto_regenerate

        self._metrics = GenerationMetrics()
        self._falloff_key: tuple[int, int, float, float] | None = None
        self._falloff_mask: NDArray[np.float64] | None = None
        self._last_heights: HeightGrid | None = None
        self._generation_count = 0

    @classmethod
    def from_config(cls, config: TerrainConfig, **kwargs) -> "HeightfieldPipeline":
        """Create a pipeline from a TerrainConfig."""
        return cls(
            width=config.width,
            height=config.height,
            params=config.resolve_parameters(),
            noise_type=config.noise_type,
            preset=config.preset,
            falloff=config.falloff,
            **kwargs,
        )

    # --- State ---

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def parameters(self) -> NoiseParameters:
        return self._params

    @property
    def noise_type(self) -> NoiseType:
        return self._noise_type

    @property
    def preset(self) -> Preset:
        return self._preset

    @property
    def falloff(self) -> FalloffConfig:
        return self._falloff

    @property
    def metrics(self) -> GenerationMetrics:
        return self._metrics

    @property
    def last_heights(self) -> HeightGrid | None:
        """Most recently generated grid, or None before the first generation."""
        return self._last_heights

    @property
    def terrain_size(self) -> TerrainSize:
        """Physical (width, scale, height) of the terrain for the display surface."""
        return TerrainSize(width=self._width, scale=self._params.scale, height=self._height)

    @property
    def heightmap_resolution(self) -> int:
        return self._width + 1

    # --- Command surface ---

    def set_noise_type(self, noise_type: NoiseType | int | str) -> HeightGrid | None:
        """Select the noise kernel. Unrecognised values select Perlin."""
        self._noise_type = coerce_noise_type(noise_type)
        logger.debug("noise_type_changed", noise_type=self._noise_type.name)
        return self._after_change()

    def apply_preset(self, preset: Preset | int | str) -> HeightGrid | None:
        """Select a preset and overwrite the noise parameters with its profile.

        The seed is kept.

        Raises:
            InvalidParameterError: If the preset is unknown.
        """
        self._preset = coerce_preset(preset)
        self._params = PRESET_PROFILES[self._preset].to_parameters(self._params.seed)
        logger.debug("preset_applied", preset=self._preset.name)
        return self._after_change()

    def set_scale(self, scale: float) -> HeightGrid | None:
        return self._update(scale=float(scale))

    def set_noise_scale(self, noise_scale: float) -> HeightGrid | None:
        return self._update(noise_scale=float(noise_scale))

    def set_octaves(self, octaves: float) -> HeightGrid | None:
        # Slider values arrive as floats
        return self._update(octaves=int(round(octaves)))

    def set_persistence(self, persistence: float) -> HeightGrid | None:
        return self._update(persistence=float(persistence))

    def set_lacunarity(self, lacunarity: float) -> HeightGrid | None:
        return self._update(lacunarity=float(lacunarity))

    def set_seed(self, seed: int) -> HeightGrid | None:
        return self._update(seed=int(seed))

    def set_random_seed(self) -> HeightGrid | None:
        """Draw a new seed uniformly from [RANDOM_SEED_MIN, RANDOM_SEED_MAX)."""
        seed = int(self._rng.integers(RANDOM_SEED_MIN, RANDOM_SEED_MAX))
        logger.debug("random_seed_drawn", seed=seed)
        return self._update(seed=seed)

    def set_falloff_enabled(self, enabled: bool) -> HeightGrid | None:
        self._falloff = self._falloff.model_copy(update={"enabled": bool(enabled)})
        return self._after_change()

    def set_terrain_size(self, width: int, height: int) -> None:
        """Resize the grid and drop the cached falloff mask.

        Raises:
            InvalidParameterError: If either dimension is not positive.
        """
        validate_dimensions(width, height)
        self._width = width
        self._height = height
        self._falloff_key = None
        self._falloff_mask = None
        logger.debug("terrain_resized", width=width, height=height)

    def attach_surface(self, surface: HeightmapSurface | None) -> None:
        self._surface = surface

    # --- Generation ---

    def generate(self) -> HeightGrid:
        """Generate a height grid from the current settings.

        Returns:
            Array of shape (height, width) with values in [0, 1].
        """
        start = time.perf_counter()
        heights = generate_heights(
            self._width,
            self._height,
            self._params,
            noise_type=self._noise_type,
            preset=self._preset,
            falloff=self._falloff,
            falloff_mask=self._current_falloff_mask() if self._falloff.enabled else None,
        )
        duration = time.perf_counter() - start

        self._metrics.record(self._noise_type, self._preset, duration)
        self._last_heights = heights
        self._generation_count += 1

        logger.info(
            "terrain_generated",
            noise_type=self._noise_type.name,
            preset=self._preset.name,
            seed=self._params.seed,
            width=self._width,
            height=self._height,
            duration_ms=round(duration * 1000, 2),
        )

        if self._log_writer is not None:
            self._log_generation(heights, duration)

        return heights

    def regenerate(self) -> HeightGrid:
        """Generate and push the grid to the attached surface, if any."""
        heights = self.generate()
        if self._surface is not None:
            self.apply_height_map(heights)
        else:
            logger.debug("no_surface_attached")
        return heights

    def apply_height_map(self, heights: HeightGrid) -> None:
        """Push a height grid to the display surface.

        Raises:
            MissingDependencyError: If no surface is attached.
        """
        if self._surface is None:
            raise MissingDependencyError("No heightmap surface attached")
        self._surface.set_heights(heights, self.heightmap_resolution, self.terrain_size)

    # --- Metrics ---

    def get_generation_time(self, noise_type: NoiseType, preset: Preset) -> float:
        """Last generation duration in seconds for the pair, or 0.0 if never measured."""
        return self._metrics.get(noise_type, preset)

    def analyze(self) -> TerrainMetrics:
        """Analyze the most recently generated grid.

        Raises:
            HeightfieldError: If nothing has been generated yet.
        """
        if self._last_heights is None:
            raise HeightfieldError("No terrain has been generated yet")
        return analyze_terrain(
            self._last_heights,
            generation_time=self.get_generation_time(self._noise_type, self._preset),
        )

    def analysis_report(self) -> str:
        """Analysis of the latest grid with a noise performance comparison."""
        return format_analysis(self.analyze(), self._noise_type, self._preset, self._metrics)

    # --- Internals ---

    def _update(self, **changes: object) -> HeightGrid | None:
        params = self._params.model_copy(update=changes)
        validate_parameters(params, self._falloff)
        self._params = params
        logger.debug("parameters_changed", **changes)
        return self._after_change()

    def _after_change(self) -> HeightGrid | None:
        if not self.auto_regenerate:
            return None
        return self.regenerate()

    def _current_falloff_mask(self) -> NDArray[np.float64]:
        key = (self._width, self._height, self._falloff.strength, self._falloff.scale)
        if self._falloff_mask is None or self._falloff_key != key:
            self._falloff_mask = build_falloff_mask(
                self._width, self._height, self._falloff.strength, self._falloff.scale
            )
            self._falloff_key = key
            logger.debug("falloff_mask_built", width=self._width, height=self._height)
        return self._falloff_mask

    def _log_generation(self, heights: HeightGrid, duration: float) -> None:
        metrics = analyze_terrain(heights, generation_time=duration)
        self._log_writer.log_generation(
            GenerationRecord(
                generation_id=self._generation_count,
                timestamp_ms=int(time.time() * 1000),
                noise_type=self._noise_type.name,
                preset=self._preset.name,
                seed=self._params.seed,
                width=self._width,
                height=self._height,
                octaves=self._params.octaves,
                duration_ms=duration * 1000,
                average_height=metrics.average_height,
                height_variance=metrics.height_variance,
                peak_count=metrics.peak_count,
            )
        )
