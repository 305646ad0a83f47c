"""
Delivery: fulfillment centers, nearest-center lookup and eligibility.

    from quickshop import delivery as D

    zones = D.ZoneIndex(centers)
    resolver = D.EligibilityResolver(zones)
    resolver.calculate(D.Coordinate(12.93, 77.62))
"""

from __future__ import annotations

from quickshop.delivery._types import (
    Coordinate,
    FulfillmentCenter,
    DEFAULT_SERVICE_RADIUS_KM,
    EligibilityResult,
)
from quickshop.delivery._geo import EARTH_RADIUS_KM, haversine_km, haversine_m
from quickshop.delivery._eta import EtaModel
from quickshop.delivery._index import (
    CenterSource,
    StaticCenterSource,
    ZoneRefreshError,
    ZoneIndex,
)
from quickshop.delivery._resolver import (
    Clock,
    Idle,
    Resolved,
    ResolverState,
    IDLE,
    EligibilityResolver,
    DEFAULT_DEBOUNCE_SECONDS,
    DEFAULT_JITTER_METERS,
)

__all__ = (
    "Coordinate",
    "FulfillmentCenter",
    "DEFAULT_SERVICE_RADIUS_KM",
    "EligibilityResult",
    "EARTH_RADIUS_KM",
    "haversine_km",
    "haversine_m",
    "EtaModel",
    "CenterSource",
    "StaticCenterSource",
    "ZoneRefreshError",
    "ZoneIndex",
    "Clock",
    "Idle",
    "Resolved",
    "ResolverState",
    "IDLE",
    "EligibilityResolver",
    "DEFAULT_DEBOUNCE_SECONDS",
    "DEFAULT_JITTER_METERS",
)
