"""
Delivery types.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# ═══════════════════════════════════════════════════════════════════════════════
# Coordinate
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Coordinate:
    """WGS84 point in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")


# ═══════════════════════════════════════════════════════════════════════════════
# FulfillmentCenter
# ═══════════════════════════════════════════════════════════════════════════════

DEFAULT_SERVICE_RADIUS_KM = 3.0


@dataclass(frozen=True, slots=True)
class FulfillmentCenter:
    """
    Micro-warehouse serving everything within service_radius_km.

    Inactive centers stay in the index but are never selected.
    """

    id: str
    name: str
    coordinate: Coordinate
    service_radius_km: float = DEFAULT_SERVICE_RADIUS_KM
    is_active: bool = True
    address: str = ""

    def __post_init__(self) -> None:
        if self.service_radius_km < 0:
            raise ValueError("service_radius_km cannot be negative")


# ═══════════════════════════════════════════════════════════════════════════════
# EligibilityResult
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class EligibilityResult:
    """
    Outcome of one eligibility computation.

    center is None when no active center exists; distance_km is then inf.
    eta_minutes is 0 whenever serviceable is False.
    """

    center: FulfillmentCenter | None
    distance_km: float
    serviceable: bool
    eta_minutes: int
    coordinate: Coordinate
    computed_at: float

    @classmethod
    def unavailable(cls, coordinate: Coordinate, computed_at: float) -> EligibilityResult:
        return cls(
            center=None,
            distance_km=math.inf,
            serviceable=False,
            eta_minutes=0,
            coordinate=coordinate,
            computed_at=computed_at,
        )

    def formatted_eta(self) -> str:
        if not self.serviceable:
            return "Not available"
        return f"{self.eta_minutes} minutes"

    def formatted_distance(self) -> str:
        if math.isinf(self.distance_km):
            return "Not available"
        if self.distance_km < 1.0:
            return f"{int(self.distance_km * 1000)} m"
        return f"{self.distance_km:.1f} km"


__all__ = (
    "Coordinate",
    "FulfillmentCenter",
    "DEFAULT_SERVICE_RADIUS_KM",
    "EligibilityResult",
)
