"""Spatial sampling of delivery targets around the depot."""

from __future__ import annotations

from math import pi, sqrt

import numpy as np

from dronefleet.unit import Kilometer, Length, Radian

from .geo_point import GeoPoint, planar_distance

RADIUS_SPREAD = 1.5
"""Upper bound of the sampled radius as a multiple of the effective radius.

With radius ``1.5 * r * sqrt(U)`` the expected radius is exactly ``r``.
"""


def sample_uniform_in_disk(
    center: GeoPoint,
    average_radius: Length,
    max_radius: Length,
    rng: np.random.Generator,
) -> tuple[GeoPoint, Kilometer]:
    """Draw a location with area-uniform density around ``center``.

    The effective radius is ``min(average_radius, max_radius)``. The radius
    magnitude is ``1.5 * effective * sqrt(U1)`` and the bearing ``2*pi*U2``,
    where ``U1`` and ``U2`` are independent draws on [0, 1). The sampled
    radius can reach 1.5x the effective radius, so the result may lie beyond
    ``max_radius``; rejecting such candidates is the caller's job.

    Args:
        center: Depot position.
        average_radius: Configured average delivery radius.
        max_radius: Operating range of the fleet.
        rng: Source of uniform draws.

    Returns:
        tuple[GeoPoint, Kilometer]: The candidate and its planar distance
        from ``center``.
    """
    effective = min(float(average_radius), float(max_radius))
    radius = RADIUS_SPREAD * effective * sqrt(rng.random())
    bearing = Radian(2 * pi * rng.random())
    point = center.offset(bearing, Kilometer.from_si(radius))
    return point, planar_distance(center, point)
