"""
Promo rules: code → discount function.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from quickshop._types import Money, MoneyLike, money

type DiscountFn = Callable[[Money], Money]
"""Subtotal → discount amount."""


@dataclass(frozen=True, slots=True)
class PromoRule:
    code: str
    description: str
    discount: DiscountFn

    def matches(self, code: str) -> bool:
        return self.code.casefold() == code.strip().casefold()


def percent_of(percent: MoneyLike) -> DiscountFn:
    rate = money(percent) / 100

    def compute(subtotal: Money) -> Money:
        return subtotal * rate

    return compute


def flat(amount: MoneyLike) -> DiscountFn:
    value = money(amount)

    # may exceed the subtotal; no floor is applied here
    def compute(_subtotal: Money) -> Money:
        return value

    return compute


def capped_percent(percent: MoneyLike, cap: MoneyLike) -> DiscountFn:
    pct = percent_of(percent)
    ceiling = money(cap)

    def compute(subtotal: Money) -> Money:
        return min(pct(subtotal), ceiling)

    return compute


DEFAULT_RULES: tuple[PromoRule, ...] = (
    PromoRule("welcome10", "10% off your order", percent_of(10)),
    PromoRule("flat50", "Flat 50 off", flat(50)),
    PromoRule("welcome50", "50% off, up to 200", capped_percent(50, 200)),
)


__all__ = (
    "DiscountFn",
    "PromoRule",
    "percent_of",
    "flat",
    "capped_percent",
    "DEFAULT_RULES",
)
