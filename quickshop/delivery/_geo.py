"""
Great-circle distance.
"""

from __future__ import annotations

import math

from quickshop.delivery._types import Coordinate

EARTH_RADIUS_KM = 6371.0


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


def haversine_m(a: Coordinate, b: Coordinate) -> float:
    return haversine_km(a, b) * 1000


__all__ = ("EARTH_RADIUS_KM", "haversine_km", "haversine_m")
