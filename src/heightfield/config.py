"""Terrain configuration loading from TOML files."""

import tomllib
from pathlib import Path

from pydantic import ValidationError

from .exceptions import InvalidParameterError
from .terrain.config import TerrainConfig

CONFIGS_DIR = Path(__file__).parent.parent.parent / "configs"


def load_config(config_path: Path) -> TerrainConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed TerrainConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        InvalidParameterError: If a value in the [terrain] table is invalid.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    try:
        return TerrainConfig.model_validate(data.get("terrain", {}))
    except ValidationError as e:
        raise InvalidParameterError(f"Invalid config {config_path}: {e}") from e


def find_config(name: str) -> Path:
    """Find a config file by name.

    Searches in the following order:
    1. Exact path if name contains path separator or ends in .toml
    2. configs/{name}.toml
    3. configs/{name}

    Args:
        name: Config name or path.

    Returns:
        Path to the config file.

    Raises:
        FileNotFoundError: If config file is not found.
    """
    if "/" in name or name.endswith(".toml"):
        path = Path(name)
        if path.exists():
            return path
        raise FileNotFoundError(f"Config file not found: {name}")

    config_path = CONFIGS_DIR / f"{name}.toml"
    if config_path.exists():
        return config_path

    config_path = CONFIGS_DIR / name
    if config_path.exists():
        return config_path

    raise FileNotFoundError(
        f"Config '{name}' not found in {CONFIGS_DIR}. "
        f"Available configs: {list_configs()}"
    )


def list_configs() -> list[str]:
    """List available config names."""
    if not CONFIGS_DIR.exists():
        return []
    return sorted(p.stem for p in CONFIGS_DIR.glob("*.toml"))
