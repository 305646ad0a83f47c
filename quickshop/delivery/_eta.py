"""
ETA estimation: preparation time plus travel time, rounded up.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from quickshop.config import EngineConfig


@dataclass(frozen=True, slots=True)
class EtaModel:
    """
    eta = max(minimum_minutes, ceil(base_preparation_minutes + distance / speed))

    Example:
        EtaModel().minutes(2.0)   # ceil(5 + 6.67) = 12
        EtaModel().minutes(0.0)   # max(6, 5) = 6
    """

    base_preparation_minutes: int = 5
    travel_speed_km_per_minute: float = 0.3
    minimum_minutes: int = 6

    @classmethod
    def from_config(cls, config: EngineConfig) -> EtaModel:
        return cls(
            base_preparation_minutes=config.base_preparation_minutes,
            travel_speed_km_per_minute=config.travel_speed_km_per_minute,
            minimum_minutes=config.minimum_eta_minutes,
        )

    def minutes(self, distance_km: float) -> int:
        travel = distance_km / self.travel_speed_km_per_minute
        return max(self.minimum_minutes, math.ceil(self.base_preparation_minutes + travel))


__all__ = ("EtaModel",)
