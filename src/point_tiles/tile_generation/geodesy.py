"""
Geodesic distance between loc-space points.

Standalone helper; the tile endpoint does not use it.
"""

import math

from .projection import Loc

RE = 6378137.0  # GRS80 equatorial radius, meters
FE = 1 / 298.257223563  # flattening
E2 = FE * (2 - FE)  # first eccentricity squared


def _square(value: float) -> float:
    return value * value


def distance(p: Loc, q: Loc) -> float:
    """
    Approximate ellipsoidal distance in meters between two loc-space points.

    Both points come from ``geo_to_loc``. Accurate for points a few
    kilometers apart; the curvature is evaluated at their mid-latitude.
    """
    y2 = _square((p.y + q.y) / 2)
    coslat = (1 - y2) / (1 + y2)
    w2 = 1 / (1 - E2 * (1 - coslat * coslat))
    dx = (p.x - q.x) * coslat
    # d(lat) = 2 dy / (1 + y^2) radians, expressed in turns like dx
    dy = (p.y - q.y) / (1 + y2) / math.pi * w2 * (1 - E2)
    return math.sqrt((dx * dx + dy * dy) * w2) * 2 * math.pi * RE
