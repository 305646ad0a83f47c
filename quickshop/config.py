"""
Engine configuration.

Immutable, fluent builder:

    config = (
        EngineConfig()
        .with_delivery_fee(30)
        .with_debounce(seconds=1.0)
        .with_eta(base_preparation_minutes=4, minimum_minutes=5)
    )

Or from the process environment:

    config = EngineConfig.from_env()
"""

from __future__ import annotations

import math
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation

from quickshop._types import Money, MoneyLike, money

ENV_PREFIX = "QUICKSHOP_"

# ═══════════════════════════════════════════════════════════════════════════════
# EngineConfig
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """
    Tunables for pricing, tips, debouncing and ETA estimation.

    Note: Immutable, each with_* method returns a new config.
    """

    delivery_fee: Money = Decimal(25)

    tip_options: tuple[int, ...] = (10, 20, 30)
    default_tip: int = 20
    max_tip: int = 1000

    debounce_seconds: float = 0.5
    jitter_meters: float = 10.0

    base_preparation_minutes: int = 5
    travel_speed_km_per_minute: float = 0.3  # ~18 km/h
    minimum_eta_minutes: int = 6

    log_level: str = "INFO"
    log_json: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "delivery_fee", money(self.delivery_fee))
        if self.delivery_fee < 0:
            raise ValueError("delivery_fee cannot be negative")
        if self.max_tip < 1:
            raise ValueError("max_tip must be at least 1")
        if any(t < 1 or t > self.max_tip for t in self.tip_options):
            raise ValueError("tip_options must lie within [1, max_tip]")
        if self.default_tip not in self.tip_options:
            raise ValueError("default_tip must be one of tip_options")
        if self.debounce_seconds < 0:
            raise ValueError("debounce_seconds cannot be negative")
        if self.jitter_meters < 0:
            raise ValueError("jitter_meters cannot be negative")
        if self.travel_speed_km_per_minute <= 0:
            raise ValueError("travel_speed_km_per_minute must be positive")
        if self.base_preparation_minutes < 0 or self.minimum_eta_minutes < 0:
            raise ValueError("ETA minutes cannot be negative")

    def with_delivery_fee(self, fee: MoneyLike) -> EngineConfig:
        return replace(self, delivery_fee=money(fee))

    def with_tips(
        self,
        options: tuple[int, ...] | None = None,
        default: int | None = None,
        maximum: int | None = None,
    ) -> EngineConfig:
        return replace(
            self,
            tip_options=options if options is not None else self.tip_options,
            default_tip=default if default is not None else self.default_tip,
            max_tip=maximum if maximum is not None else self.max_tip,
        )

    def with_debounce(
        self,
        seconds: float | None = None,
        jitter_meters: float | None = None,
    ) -> EngineConfig:
        return replace(
            self,
            debounce_seconds=seconds if seconds is not None else self.debounce_seconds,
            jitter_meters=(
                jitter_meters if jitter_meters is not None else self.jitter_meters
            ),
        )

    def with_eta(
        self,
        base_preparation_minutes: int | None = None,
        travel_speed_km_per_minute: float | None = None,
        minimum_minutes: int | None = None,
    ) -> EngineConfig:
        return replace(
            self,
            base_preparation_minutes=(
                base_preparation_minutes
                if base_preparation_minutes is not None
                else self.base_preparation_minutes
            ),
            travel_speed_km_per_minute=(
                travel_speed_km_per_minute
                if travel_speed_km_per_minute is not None
                else self.travel_speed_km_per_minute
            ),
            minimum_eta_minutes=(
                minimum_minutes if minimum_minutes is not None else self.minimum_eta_minutes
            ),
        )

    def with_logging(self, level: str | None = None, json: bool | None = None) -> EngineConfig:
        return replace(
            self,
            log_level=level if level is not None else self.log_level,
            log_json=json if json is not None else self.log_json,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineConfig:
        """
        Build config from QUICKSHOP_* variables, defaults for the rest.

        Raises ValueError naming the variable when a value does not parse.
        """
        env = os.environ if environ is None else environ
        config = cls()

        def get(name: str) -> str | None:
            raw = env.get(ENV_PREFIX + name)
            return raw.strip() if raw is not None and raw.strip() else None

        def load[T](
            name: str,
            parse: Callable[[str], T],
            build: Callable[[EngineConfig, T], EngineConfig],
        ) -> None:
            nonlocal config
            if (raw := get(name)) is None:
                return
            value = _parse(name=name, raw=raw, parse=parse)
            try:
                config = build(config, value)
            except ValueError as e:
                raise ValueError(f"{ENV_PREFIX}{name}: {e}") from e

        load("DELIVERY_FEE", Decimal, lambda c, v: c.with_delivery_fee(v))
        load("MAX_TIP", int, lambda c, v: c.with_tips(maximum=v))
        load("DEBOUNCE_SECONDS", float, lambda c, v: c.with_debounce(seconds=v))
        load("JITTER_METERS", float, lambda c, v: c.with_debounce(jitter_meters=v))
        load(
            "BASE_PREPARATION_MINUTES",
            int,
            lambda c, v: c.with_eta(base_preparation_minutes=v),
        )
        load(
            "TRAVEL_SPEED_KM_PER_MINUTE",
            float,
            lambda c, v: c.with_eta(travel_speed_km_per_minute=v),
        )
        load("MINIMUM_ETA_MINUTES", int, lambda c, v: c.with_eta(minimum_minutes=v))
        load("LOG_LEVEL", str.upper, lambda c, v: c.with_logging(level=v))
        load(
            "LOG_JSON",
            lambda raw: _parse_bool("LOG_JSON", raw),
            lambda c, v: c.with_logging(json=v),
        )

        return config


def _parse[T](*, name: str, raw: str, parse: Callable[[str], T]) -> T:
    try:
        value = parse(raw)
    except (ValueError, InvalidOperation) as e:
        raise ValueError(f"{ENV_PREFIX}{name}: cannot parse {raw!r}") from e
    if (isinstance(value, Decimal) and not value.is_finite()) or (
        isinstance(value, float) and not math.isfinite(value)
    ):
        raise ValueError(f"{ENV_PREFIX}{name}: {raw!r} is not a finite number")
    return value


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{ENV_PREFIX}{name}: cannot parse {raw!r}")


__all__ = ("EngineConfig", "ENV_PREFIX")
