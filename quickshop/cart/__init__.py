"""
Cart: the ledger of line items, promo and tip.

    from quickshop import cart as K

    ledger = K.CartLedger()
    line = ledger.add_item(item, 2)
    ledger.snapshot().pricing.grand_total
"""

from __future__ import annotations

from quickshop.cart._types import LineItem, PromoState, NO_PROMO, CartSnapshot
from quickshop.cart._ledger import (
    CartLedger,
    LineIdFactory,
    new_line_id,
    DEFAULT_DELIVERY_FEE,
)

__all__ = (
    "LineItem",
    "PromoState",
    "NO_PROMO",
    "CartSnapshot",
    "CartLedger",
    "LineIdFactory",
    "new_line_id",
    "DEFAULT_DELIVERY_FEE",
)
