"""Great-circle geometry for the geo-radius filter.

Every kilometre → angle conversion in the code base goes through
:func:`km_to_radians`.  The SQL store registers :func:`great_circle_radians`
as a database function so SQL and Python agree on the same arithmetic.
"""

from __future__ import annotations

import math

# Mean Earth radius used by the store's spherical-cap queries.
EARTH_RADIUS_KM = 6371.0

# Slack on the inclusive boundary, about 6 micrometres on the surface.
# Absorbs float rounding in the haversine so a point exactly on the
# radius is not lost.
ANGLE_TOLERANCE_RADIANS = 1e-12


def km_to_radians(distance_km: float) -> float:
    """Angular size of *distance_km* on the mean-radius sphere."""
    return distance_km / EARTH_RADIUS_KM


def great_circle_radians(
    lat1: float | None,
    lng1: float | None,
    lat2: float | None,
    lng2: float | None,
) -> float | None:
    """Central angle between two points given in degrees (haversine).

    Returns None when any coordinate is missing, matching SQL NULL
    propagation when this runs as a database function.
    """
    if lat1 is None or lng1 is None or lat2 is None or lng2 is None:
        return None
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = math.radians(lng2 - lng1)
    h = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return 2 * math.asin(min(1.0, math.sqrt(h)))

