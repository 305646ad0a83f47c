"""
Pricing: totals for a set of cart lines.

    from quickshop import pricing as P

    result = P.calculate(lines, discount=50, tip=20, delivery_fee=25)
"""

from __future__ import annotations

from quickshop.pricing._types import Priceable, PricingResult
from quickshop.pricing._calc import calculate, line_subtotal, line_tax, line_savings
from quickshop.pricing._tip import TipPolicy

__all__ = (
    "Priceable",
    "PricingResult",
    "calculate",
    "line_subtotal",
    "line_tax",
    "line_savings",
    "TipPolicy",
)
