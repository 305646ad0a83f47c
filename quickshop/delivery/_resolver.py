"""
Eligibility resolver: debounced nearest-center, serviceability and ETA.

States:
    Idle      nothing computed yet, the next calculate() always runs
    Resolved  holds the last result, its coordinate and computation time

A calculate() call inside the debounce window is dropped but remembered as
pending; flush() runs the latest pending coordinate once the caller decides
the burst is over.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from quickshop._listeners import Listener, Listeners, Unsubscribe
from quickshop.config import EngineConfig
from quickshop.delivery._eta import EtaModel
from quickshop.delivery._geo import haversine_m
from quickshop.delivery._index import ZoneIndex
from quickshop.delivery._types import Coordinate, EligibilityResult

logger = structlog.get_logger(__name__)

type Clock = Callable[[], float]
"""Monotonic seconds."""

DEFAULT_DEBOUNCE_SECONDS = 0.5
DEFAULT_JITTER_METERS = 10.0

# ═══════════════════════════════════════════════════════════════════════════════
# States
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Idle:
    pass


@dataclass(frozen=True, slots=True)
class Resolved:
    result: EligibilityResult

    @property
    def coordinate(self) -> Coordinate:
        return self.result.coordinate

    @property
    def computed_at(self) -> float:
        return self.result.computed_at


type ResolverState = Idle | Resolved

IDLE = Idle()

# ═══════════════════════════════════════════════════════════════════════════════
# EligibilityResolver
# ═══════════════════════════════════════════════════════════════════════════════


class EligibilityResolver:
    """
    Example:
        resolver = EligibilityResolver(zones)
        resolver.force_calculate(Coordinate(12.93, 77.62))
        resolver.result.formatted_eta()   # "9 minutes"
    """

    def __init__(
        self,
        zones: ZoneIndex,
        *,
        eta: EtaModel | None = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        jitter_meters: float = DEFAULT_JITTER_METERS,
        clock: Clock = time.monotonic,
    ) -> None:
        self._zones = zones
        self._eta = eta if eta is not None else EtaModel()
        self._debounce_seconds = debounce_seconds
        self._jitter_meters = jitter_meters
        self._clock = clock
        self._lock = threading.Lock()
        self._state: ResolverState = IDLE
        self._pending: Coordinate | None = None
        self._listeners: Listeners[EligibilityResult] = Listeners("eligibility")

    @classmethod
    def from_config(
        cls,
        zones: ZoneIndex,
        config: EngineConfig,
        *,
        clock: Clock = time.monotonic,
    ) -> EligibilityResolver:
        return cls(
            zones,
            eta=EtaModel.from_config(config),
            debounce_seconds=config.debounce_seconds,
            jitter_meters=config.jitter_meters,
            clock=clock,
        )

    @property
    def state(self) -> ResolverState:
        return self._state

    @property
    def result(self) -> EligibilityResult | None:
        match self._state:
            case Resolved(result):
                return result
            case _:
                return None

    @property
    def pending(self) -> Coordinate | None:
        return self._pending

    def subscribe(self, listener: Listener[EligibilityResult]) -> Unsubscribe:
        return self._listeners.subscribe(listener)

    # ═══════════════════════════════════════════════════════════════════════════
    # Entry points
    # ═══════════════════════════════════════════════════════════════════════════

    def calculate(self, coordinate: Coordinate) -> EligibilityResult | None:
        """
        Recompute for coordinate unless a guard drops the call.

        Returns the new result, or None when dropped by the debounce window
        or because the point is within jitter distance of the last one.
        """
        return self._resolve(coordinate, check_time=True, check_jitter=True)

    def force_calculate(self, coordinate: Coordinate) -> EligibilityResult:
        with self._lock:
            result = self._publish(coordinate, self._clock())
        self._listeners.publish(self._latest)
        return result

    def flush(self) -> EligibilityResult | None:
        """Recompute the pending coordinate, if any. The time guard is skipped."""
        with self._lock:
            pending = self._pending
        if pending is None:
            return None
        return self._resolve(pending, check_time=False, check_jitter=True)

    # ═══════════════════════════════════════════════════════════════════════════
    # Core
    # ═══════════════════════════════════════════════════════════════════════════

    def _resolve(
        self,
        coordinate: Coordinate,
        *,
        check_time: bool,
        check_jitter: bool,
    ) -> EligibilityResult | None:
        with self._lock:
            now = self._clock()

            if isinstance(self._state, Resolved):
                last = self._state
                if check_time and now - last.computed_at < self._debounce_seconds:
                    self._pending = coordinate
                    logger.debug("eligibility_debounced", elapsed=now - last.computed_at)
                    return None
                if check_jitter:
                    moved = haversine_m(last.coordinate, coordinate)
                    if moved < self._jitter_meters:
                        self._pending = None
                        logger.debug("eligibility_jitter_skipped", moved_m=moved)
                        return None

            result = self._publish(coordinate, now)

        self._listeners.publish(self._latest)
        return result

    def _publish(self, coordinate: Coordinate, now: float) -> EligibilityResult:
        result = self._compute(coordinate, now)
        self._state = Resolved(result)
        self._pending = None
        return result

    def _latest(self) -> EligibilityResult:
        match self._state:
            case Resolved(result):
                return result
        raise RuntimeError("no eligibility result published")

    def _compute(self, coordinate: Coordinate, now: float) -> EligibilityResult:
        found = self._zones.nearest(coordinate)
        if found is None:
            logger.info("eligibility_no_centers")
            return EligibilityResult.unavailable(coordinate, now)

        center, distance = found
        serviceable = distance <= center.service_radius_km
        result = EligibilityResult(
            center=center,
            distance_km=distance,
            serviceable=serviceable,
            eta_minutes=self._eta.minutes(distance) if serviceable else 0,
            coordinate=coordinate,
            computed_at=now,
        )
        logger.info(
            "eligibility_resolved",
            center_id=center.id,
            distance_km=round(distance, 3),
            serviceable=serviceable,
            eta_minutes=result.eta_minutes,
        )
        return result


__all__ = (
    "Clock",
    "Idle",
    "Resolved",
    "ResolverState",
    "IDLE",
    "EligibilityResolver",
    "DEFAULT_DEBOUNCE_SECONDS",
    "DEFAULT_JITTER_METERS",
)
