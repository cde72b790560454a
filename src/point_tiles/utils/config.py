"""
Service Configuration

Settings are read from environment variables once at startup.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from ..tile_generation.addressing import UINT32_MAX


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class PointSourceConfig:
    """Location and column layout of the point CSV file."""
    path: Path = Path("./trees.csv")
    species_column: int = 2
    latitude_column: int = 15
    longitude_column: int = 16


@dataclass(frozen=True)
class Config:
    """Tile server configuration."""
    points: PointSourceConfig = field(default_factory=PointSourceConfig)
    extent: int = 4096
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    log_format: str = "json"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Config":
        """
        Build a configuration from environment variables.

        Args:
            env: Mapping to read instead of ``os.environ``

        Raises:
            ValueError: if a numeric variable does not parse or is out of range
        """
        if env is None:
            env = os.environ

        points = PointSourceConfig(
            path=Path(env.get("POINTS_CSV", "./trees.csv")),
            species_column=_get_int(env, "SPECIES_COLUMN", 2),
            latitude_column=_get_int(env, "LATITUDE_COLUMN", 15),
            longitude_column=_get_int(env, "LONGITUDE_COLUMN", 16),
        )
        for name, column in (
            ("SPECIES_COLUMN", points.species_column),
            ("LATITUDE_COLUMN", points.latitude_column),
            ("LONGITUDE_COLUMN", points.longitude_column),
        ):
            if column < 0:
                raise ValueError(f"{name} must be non-negative, got {column}")

        extent = _get_int(env, "TILE_EXTENT", 4096)
        # layer extent is a uint32 field of the tile
        if not 0 < extent <= UINT32_MAX:
            raise ValueError(f"TILE_EXTENT must be between 1 and {UINT32_MAX}, got {extent}")

        log_format = env.get("LOG_FORMAT", "json").lower()
        if log_format not in ("json", "console"):
            raise ValueError(f"LOG_FORMAT must be 'json' or 'console', got {log_format!r}")

        return cls(
            points=points,
            extent=extent,
            host=env.get("HOST", "0.0.0.0"),
            port=_get_int(env, "PORT", 8080),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            log_format=log_format,
        )
