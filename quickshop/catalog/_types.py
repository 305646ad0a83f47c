"""
Catalog types.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from quickshop._types import Money, ZERO, money

# ═══════════════════════════════════════════════════════════════════════════════
# CatalogItem
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CatalogItem:
    """
    Sellable item as published by the catalog.

    price is the list price; discount_price, when set, is what the
    customer pays. tax_rate is a percentage (5 means 5%).
    """

    id: str
    name: str
    price: Money
    discount_price: Money | None = None
    tax_rate: Decimal = ZERO
    stock_quantity: int = 0
    is_available: bool = True
    category: str = ""
    description: str = ""
    is_featured: bool = False
    weight: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "price", money(self.price))
        if self.discount_price is not None:
            object.__setattr__(self, "discount_price", money(self.discount_price))
        object.__setattr__(self, "tax_rate", money(self.tax_rate))

    @property
    def unit_price(self) -> Money:
        return self.discount_price if self.discount_price is not None else self.price

    @property
    def savings(self) -> Money:
        """Per-unit difference between list and paid price."""
        return self.price - self.unit_price

    @property
    def discount_percentage(self) -> int | None:
        if self.discount_price is None or self.price == 0:
            return None
        return int((self.price - self.discount_price) / self.price * 100)

    @property
    def can_be_added(self) -> bool:
        return self.is_available and self.stock_quantity > 0


__all__ = ("CatalogItem",)
