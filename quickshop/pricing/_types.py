"""
Pricing types.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from quickshop._types import Money, ZERO

# ═══════════════════════════════════════════════════════════════════════════════
# Priceable: anything with a unit price, quantity and tax rate
# ═══════════════════════════════════════════════════════════════════════════════


class Priceable(Protocol):
    """A cart line as seen by the calculator."""

    @property
    def quantity(self) -> int: ...

    @property
    def unit_price(self) -> Money: ...

    @property
    def list_price(self) -> Money: ...

    @property
    def tax_rate(self) -> Decimal: ...


# ═══════════════════════════════════════════════════════════════════════════════
# PricingResult
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PricingResult:
    """
    Derived totals. Never persisted on the ledger, recomputed on every read.

    grand_total = subtotal + tax + delivery_fee + tip - discount,
    with no floor at zero.
    """

    subtotal: Money = ZERO
    tax: Money = ZERO
    delivery_fee: Money = ZERO
    discount: Money = ZERO
    tip: Money = ZERO
    grand_total: Money = ZERO
    savings: Money = ZERO
    item_count: int = 0

    def to_document(self) -> dict[str, str | int]:
        """Plain values for the order document, amounts as strings."""
        return {
            "subtotal": str(self.subtotal),
            "tax": str(self.tax),
            "deliveryFee": str(self.delivery_fee),
            "discount": str(self.discount),
            "tip": str(self.tip),
            "totalAmount": str(self.grand_total),
            "savings": str(self.savings),
            "itemCount": self.item_count,
        }


__all__ = ("Priceable", "PricingResult")
