"""
Zone index: the set of fulfillment centers and nearest-center lookup.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

import structlog
from combinators import lift as L
from kungfu import Result, Ok, Error

from quickshop._listeners import Listener, Listeners, Unsubscribe
from quickshop.delivery._geo import haversine_km
from quickshop.delivery._types import Coordinate, FulfillmentCenter

logger = structlog.get_logger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Source protocol
# ═══════════════════════════════════════════════════════════════════════════════


class CenterSource(Protocol):
    """Where centers come from (document store, config file, ...)."""

    async def fetch(self) -> Sequence[FulfillmentCenter]: ...


class StaticCenterSource:
    """In-memory source. Set fail to make the next fetches raise."""

    def __init__(self, centers: Iterable[FulfillmentCenter] = ()) -> None:
        self.centers = tuple(centers)
        self.fail: Exception | None = None
        self.fetches = 0

    async def fetch(self) -> Sequence[FulfillmentCenter]:
        self.fetches += 1
        if self.fail is not None:
            raise self.fail
        return self.centers


@dataclass(frozen=True, slots=True)
class ZoneRefreshError:
    message: str
    cause: Exception | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# ZoneIndex
# ═══════════════════════════════════════════════════════════════════════════════


class ZoneIndex:
    """
    Ordered, fully replaceable set of centers.

    nearest() considers active centers only; on equal distance the center
    that comes first wins.
    """

    def __init__(self, centers: Iterable[FulfillmentCenter] = ()) -> None:
        self._centers = tuple(centers)
        self._listeners: Listeners[tuple[FulfillmentCenter, ...]] = Listeners("zones")

    @property
    def centers(self) -> tuple[FulfillmentCenter, ...]:
        return self._centers

    def active(self) -> tuple[FulfillmentCenter, ...]:
        return tuple(c for c in self._centers if c.is_active)

    def get(self, center_id: str) -> FulfillmentCenter | None:
        for center in self._centers:
            if center.id == center_id:
                return center
        return None

    def nearest(self, coordinate: Coordinate) -> tuple[FulfillmentCenter, float] | None:
        """(center, distance_km) of the closest active center, or None."""
        best: tuple[FulfillmentCenter, float] | None = None
        for center in self.active():
            distance = haversine_km(center.coordinate, coordinate)
            if best is None or distance < best[1]:
                best = (center, distance)
        return best

    def in_range(self, coordinate: Coordinate) -> tuple[FulfillmentCenter, ...]:
        return tuple(
            c
            for c in self.active()
            if haversine_km(c.coordinate, coordinate) <= c.service_radius_km
        )

    def can_deliver(self, coordinate: Coordinate) -> bool:
        return bool(self.in_range(coordinate))

    def replace(self, centers: Iterable[FulfillmentCenter]) -> None:
        self._centers = tuple(centers)
        logger.info(
            "zones_replaced",
            total=len(self._centers),
            active=len(self.active()),
        )
        self._listeners.notify(self._centers)

    async def refresh(self, source: CenterSource) -> Result[int, ZoneRefreshError]:
        """
        Replace centers with what source yields.

        On failure the previous centers stay in place.
        """
        result = await L.catching_async(
            source.fetch,
            on_error=lambda e: ZoneRefreshError(str(e), e),
        )
        match result:
            case Ok(centers):
                self.replace(centers)
                return Ok(len(self._centers))
            case Error(e):
                logger.warning("zones_refresh_failed", error=e.message)
                return Error(e)

    def subscribe(self, listener: Listener[tuple[FulfillmentCenter, ...]]) -> Unsubscribe:
        return self._listeners.subscribe(listener)

    def __len__(self) -> int:
        return len(self._centers)


__all__ = ("CenterSource", "StaticCenterSource", "ZoneRefreshError", "ZoneIndex")
