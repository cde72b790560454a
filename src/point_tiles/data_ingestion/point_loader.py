"""
Point Set Loader

Reads point records (species label, latitude, longitude) from a CSV file and
freezes them, already projected to loc space, into a ``PointSet``.

The point set is built once at startup and shared read-only by every tile
request. It has no mutation or reload API.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Tuple, Union

import pandas as pd
import structlog

from ..tile_generation.projection import GeoPoint, Loc, geo_to_loc
from ..utils.config import PointSourceConfig


class PointSourceError(RuntimeError):
    """Raised when the point source cannot be read or lacks required columns."""


@dataclass(frozen=True)
class PointSet:
    """Immutable collection of loc-space points and their labels."""
    locs: Tuple[Loc, ...]
    species: Tuple[str, ...]

    def __post_init__(self):
        if len(self.locs) != len(self.species):
            raise ValueError("locs and species must have the same length")

    def __len__(self) -> int:
        return len(self.locs)

    def __iter__(self) -> Iterator[Loc]:
        return iter(self.locs)

    @classmethod
    def from_geo_points(cls, points, species=None) -> "PointSet":
        """Project geographic points and freeze them."""
        locs = tuple(geo_to_loc(point) for point in points)
        if species is None:
            species = ("",) * len(locs)
        return cls(locs=locs, species=tuple(species))


def _read_csv(path: Path) -> pd.DataFrame:
    try:
        return pd.read_csv(path, dtype=str, keep_default_na=False)
    except FileNotFoundError as e:
        raise PointSourceError(f"Point source not found: {path}") from e
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise PointSourceError(f"Unable to read point source {path}: {e}") from e


def load_point_set(source: Union[PointSourceConfig, str, Path]) -> PointSet:
    """
    Load the point set described by ``source``.

    Rows whose latitude or longitude does not parse as a number are skipped.

    Args:
        source: Point source configuration, or a CSV path using the default
            column layout

    Returns:
        Frozen point set in file order

    Raises:
        PointSourceError: if the file is missing, unreadable, or has fewer
            columns than the configured layout requires
    """
    if not isinstance(source, PointSourceConfig):
        source = PointSourceConfig(path=Path(source))

    logger = structlog.get_logger(__name__).bind(source=str(source.path))
    start_time = time.time()

    frame = _read_csv(source.path)

    required = max(source.species_column, source.latitude_column, source.longitude_column)
    if frame.shape[1] <= required:
        raise PointSourceError(
            f"Point source {source.path} has {frame.shape[1]} columns, "
            f"column {required} is required"
        )

    longitudes = pd.to_numeric(frame.iloc[:, source.longitude_column], errors="coerce")
    latitudes = pd.to_numeric(frame.iloc[:, source.latitude_column], errors="coerce")
    valid = longitudes.notna() & latitudes.notna()

    skipped = int((~valid).sum())
    if skipped:
        logger.warning("Skipped rows with unparsable coordinates", skipped_rows=skipped)

    species = frame.iloc[:, source.species_column][valid].tolist()
    points = [
        GeoPoint(longitude=lon, latitude=lat)
        for lon, lat in zip(longitudes[valid].tolist(), latitudes[valid].tolist())
    ]
    point_set = PointSet.from_geo_points(points, species)

    logger.info(
        "Point set loaded",
        points=len(point_set),
        duration_seconds=round(time.time() - start_time, 3)
    )
    return point_set
