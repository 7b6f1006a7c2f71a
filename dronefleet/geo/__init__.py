"""Geographic utilities for single-depot delivery simulation.

Components:
    GeoPoint: Immutable latitude/longitude value with planar and geodesic distances
    Latitude / Longitude: Degree units with their own unit families
    planar_distance: Small-angle approximation used on the scheduling path
    sample_uniform_in_disk: Area-uniform target sampling around the depot

Typical Usage:
    >>> import numpy as np
    >>> from dronefleet.geo import GeoPoint, sample_uniform_in_disk
    >>> from dronefleet.unit import Kilometer
    >>> depot = GeoPoint.from_deg(37.5665, 126.9780)
    >>> rng = np.random.default_rng(7)
    >>> target, distance = sample_uniform_in_disk(depot, Kilometer(3), Kilometer(8), rng)
    >>> distance.to(Kilometer) < 4.6
    True
"""

from .geo_point import EARTH_MEAN_RADIUS, GeoPoint, Latitude, Longitude, planar_distance
from .sampling import RADIUS_SPREAD, sample_uniform_in_disk

__all__ = [
    "GeoPoint",
    "Latitude",
    "Longitude",
    "EARTH_MEAN_RADIUS",
    "planar_distance",
    "RADIUS_SPREAD",
    "sample_uniform_in_disk",
]
