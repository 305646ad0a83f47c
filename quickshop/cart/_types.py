"""
Cart types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from quickshop._types import Money, ZERO
from quickshop.catalog import CatalogItem
from quickshop.pricing import PricingResult, line_subtotal, line_tax

# ═══════════════════════════════════════════════════════════════════════════════
# LineItem
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class LineItem:
    """
    One cart slot.

    id identifies the slot, item.id the product. Quantity is always
    within [1, item.stock_quantity].
    """

    id: str
    item: CatalogItem
    quantity: int

    @property
    def item_id(self) -> str:
        return self.item.id

    @property
    def unit_price(self) -> Money:
        return self.item.unit_price

    @property
    def list_price(self) -> Money:
        return self.item.price

    @property
    def tax_rate(self) -> Decimal:
        return self.item.tax_rate

    @property
    def subtotal(self) -> Money:
        return line_subtotal(self)

    @property
    def tax(self) -> Money:
        return line_tax(self)

    def with_quantity(self, quantity: int) -> LineItem:
        return LineItem(id=self.id, item=self.item, quantity=quantity)

    def to_document(self) -> dict[str, str | int]:
        return {
            "id": self.id,
            "productId": self.item.id,
            "name": self.item.name,
            "quantity": self.quantity,
            "unitPrice": str(self.unit_price),
            "price": str(self.item.price),
            "taxRate": str(self.item.tax_rate),
            "total": str(self.subtotal),
        }


# ═══════════════════════════════════════════════════════════════════════════════
# Promo state
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PromoState:
    code: str = ""
    discount: Money = ZERO
    applied: bool = False


NO_PROMO = PromoState()

# ═══════════════════════════════════════════════════════════════════════════════
# CartSnapshot: what readers and listeners see
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartSnapshot:
    lines: tuple[LineItem, ...] = ()
    promo: PromoState = NO_PROMO
    tip: int | None = None
    pricing: PricingResult = field(default_factory=PricingResult)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def line(self, line_id: str) -> LineItem | None:
        for line in self.lines:
            if line.id == line_id:
                return line
        return None

    def line_for_item(self, item_id: str) -> LineItem | None:
        for line in self.lines:
            if line.item.id == item_id:
                return line
        return None

    def quantity_of(self, item_id: str) -> int:
        line = self.line_for_item(item_id)
        return line.quantity if line is not None else 0


__all__ = ("LineItem", "PromoState", "NO_PROMO", "CartSnapshot")
