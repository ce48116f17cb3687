"""Command-line interface for heightfield generation."""

import argparse
import logging
import sys
import tomllib
from pathlib import Path

import structlog


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for heightfield generation."""
    parser = argparse.ArgumentParser(
        description="Generate a procedural terrain heightfield"
    )
    parser.add_argument(
        "--config", "-c", type=str, default=None, help="Config name or path to TOML file"
    )
    parser.add_argument("--width", type=int, default=None, help="Grid width")
    parser.add_argument("--height", type=int, default=None, help="Grid height")
    parser.add_argument("--seed", type=int, default=None, help="Noise seed")
    parser.add_argument(
        "--random-seed", action="store_true", help="Draw a random seed before generating"
    )
    parser.add_argument(
        "--noise-type",
        type=str,
        default=None,
        help="Noise kernel: perlin, value, worley or simplex",
    )
    parser.add_argument(
        "--preset",
        type=str,
        default=None,
        help="Preset: mountains, plains, hills, coastal or combined (applies its profile)",
    )
    parser.add_argument("--no-falloff", action="store_true", help="Disable edge falloff")
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default="saves/heightmap.npz",
        help="Output path (default: saves/heightmap.npz)",
    )
    parser.add_argument(
        "--debug-images",
        type=str,
        default=None,
        help="Directory to save debug images (optional)",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help="Directory for the Parquet generation log (optional)",
    )
    parser.add_argument(
        "--analyze", action="store_true", help="Print a terrain analysis report"
    )
    parser.add_argument(
        "--benchmark",
        action="store_true",
        help="Time every noise type for the preset before the final generation",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )

    args = parser.parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )

    # Import here to avoid slow startup for --help
    from ..config import find_config, load_config
    from ..exceptions import HeightfieldError
    from ..logging import GenerationLogWriter
    from ..pipeline import HeightfieldPipeline
    from ..types import NoiseType
    from .config import TerrainConfig
    from .generator import dump_debug_images
    from .persistence import save_heightmap

    if args.config:
        try:
            config = load_config(find_config(args.config))
        except (FileNotFoundError, tomllib.TOMLDecodeError, HeightfieldError) as e:
            parser.error(str(e))
    else:
        config = TerrainConfig()

    log_writer = GenerationLogWriter(Path(args.log_dir)) if args.log_dir else None

    try:
        pipeline = HeightfieldPipeline.from_config(
            config, log_writer=log_writer, auto_regenerate=False
        )
        if args.width is not None or args.height is not None:
            pipeline.set_terrain_size(
                args.width if args.width is not None else config.width,
                args.height if args.height is not None else config.height,
            )
        if args.preset is not None:
            pipeline.apply_preset(args.preset)
        if args.noise_type is not None:
            pipeline.set_noise_type(args.noise_type)
        if args.seed is not None:
            pipeline.set_seed(args.seed)
        if args.random_seed:
            pipeline.set_random_seed()
        if args.no_falloff:
            pipeline.set_falloff_enabled(False)

        print(
            f"Generating {pipeline.width}x{pipeline.height} heightfield: "
            f"{pipeline.noise_type.label}, {pipeline.preset.label}, "
            f"seed {pipeline.parameters.seed}"
        )

        if args.benchmark:
            selected = pipeline.noise_type
            for noise_type in NoiseType:
                pipeline.set_noise_type(noise_type)
                pipeline.generate()
                seconds = pipeline.get_generation_time(noise_type, pipeline.preset)
                print(f"  {noise_type.label}: {seconds * 1000:.1f}ms")
            pipeline.set_noise_type(selected)

        heights = pipeline.generate()
    except HeightfieldError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        if log_writer is not None:
            log_writer.close()

    gen_time = pipeline.get_generation_time(pipeline.noise_type, pipeline.preset)
    print(f"Generation complete in {gen_time:.2f}s")

    if args.analyze:
        print()
        print(pipeline.analysis_report())
        print()

    if args.debug_images:
        dump_debug_images(Path(args.debug_images), heights=heights)

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path = save_heightmap(
        output_path, heights, pipeline.parameters, pipeline.noise_type, pipeline.preset
    )

    print(f"Saved to {output_path}")


if __name__ == "__main__":
    main()
