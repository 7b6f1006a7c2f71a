"""Geographic points for the depot, delivery targets and flight segments.

Coordinates are unit-typed: ``Latitude`` and ``Longitude`` are degree units
stored in radians, so ``float(point.latitude)`` can be fed directly into
trigonometry and into pyproj with ``radians=True``.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import cos, hypot, sin

from pyproj import Geod

from dronefleet.unit import Angle, Degree, Kilometer, Length, Meter, Radian

# WGS84 ellipsoid for the geodesic reference distance
_WGS84 = Geod(ellps="WGS84")

EARTH_MEAN_RADIUS = Kilometer(6371.0088)
"""IUGG mean Earth radius used by the planar approximation."""


class Latitude(Degree):
    """Latitude in degrees (north positive), stored in radians."""

    IS_FAMILY_ROOT = True
    SYMBOL = "°N/S"


class Longitude(Degree):
    """Longitude in degrees (east positive), stored in radians."""

    IS_FAMILY_ROOT = True
    SYMBOL = "°E/W"


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """An immutable latitude/longitude pair.

    Points are value objects: orders, drones and flight segments share them
    freely because nothing can move a point in place.

    Attributes:
        latitude (Latitude): North/south coordinate.
        longitude (Longitude): East/west coordinate.

    Example:
        >>> depot = GeoPoint.from_deg(37.5665, 126.9780)
        >>> target = depot.offset(Degree(90), Kilometer(2))
        >>> round(planar_distance(depot, target).to(Kilometer), 6)
        2.0
    """

    latitude: Latitude
    longitude: Longitude

    @classmethod
    def from_deg(cls, lat: float, lon: float) -> GeoPoint:
        """Create a point from decimal degrees."""
        return cls(Latitude(lat), Longitude(lon))

    @classmethod
    def from_rad(cls, lat: float, lon: float) -> GeoPoint:
        """Create a point from radians."""
        return cls(Latitude.from_si(lat), Longitude.from_si(lon))

    @property
    def lat_deg(self) -> float:
        return self.latitude.to(Latitude)

    @property
    def lon_deg(self) -> float:
        return self.longitude.to(Longitude)

    def offset(self, bearing: Angle, distance: Length) -> GeoPoint:
        """Point reached by moving ``distance`` along ``bearing`` on the local plane.

        Inverse of :func:`planar_distance` evaluated at this point's latitude,
        so due east or west offsets round-trip exactly. Bearings are measured
        clockwise from north.
        """
        arc = float(distance) / float(EARTH_MEAN_RADIUS)
        theta = float(Radian.coerce(bearing))
        lat0 = float(self.latitude)
        d_lat = arc * cos(theta)
        d_lon = arc * sin(theta) / cos(lat0)
        return GeoPoint.from_rad(lat0 + d_lat, float(self.longitude) + d_lon)

    def distance_to(self, other: GeoPoint) -> Kilometer:
        """Planar small-span distance, see :func:`planar_distance`."""
        return planar_distance(self, other)

    def geodesic_distance_to(self, other: GeoPoint) -> Meter:
        """WGS84 geodesic distance computed with pyproj.

        Slower than the planar approximation; used as the accuracy reference
        for it.
        """
        _az12, _az21, dist = _WGS84.inv(
            float(self.longitude),
            float(self.latitude),
            float(other.longitude),
            float(other.latitude),
            radians=True,
        )
        return Meter(dist)

    def __str__(self) -> str:
        return f"({self.lat_deg:.6f}, {self.lon_deg:.6f})"


def planar_distance(origin: GeoPoint, point: GeoPoint) -> Kilometer:
    """Small-angle planar approximation of the great-circle distance.

    The longitude delta is scaled by the cosine of the mean latitude and
    combined with the latitude delta; the resulting arc is multiplied by the
    mean Earth radius. Stable for spans under roughly 50 km, which covers any
    single-depot delivery radius.

    Args:
        origin: Usually the depot.
        point: Delivery location.

    Returns:
        Kilometer: Non-negative distance.
    """
    lat1 = float(origin.latitude)
    lat2 = float(point.latitude)
    d_lon = (float(point.longitude) - float(origin.longitude)) * cos((lat1 + lat2) / 2)
    d_lat = lat2 - lat1
    return Kilometer.from_si(hypot(d_lon, d_lat) * float(EARTH_MEAN_RADIUS))
