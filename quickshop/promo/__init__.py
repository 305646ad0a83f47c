"""
Promo: discount codes.

    from quickshop import promo as Pr

    outcome = Pr.PromoEngine().apply("welcome10", subtotal)
"""

from __future__ import annotations

from quickshop.promo._rules import (
    DiscountFn,
    PromoRule,
    percent_of,
    flat,
    capped_percent,
    DEFAULT_RULES,
)
from quickshop.promo._engine import PromoOutcome, PromoEngine

__all__ = (
    "DiscountFn",
    "PromoRule",
    "percent_of",
    "flat",
    "capped_percent",
    "DEFAULT_RULES",
    "PromoOutcome",
    "PromoEngine",
)
