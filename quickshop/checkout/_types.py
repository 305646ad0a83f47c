"""
Checkout types: orders, addresses, payment and status.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from quickshop._types import Money
from quickshop.cart import LineItem
from quickshop.delivery import Coordinate
from quickshop.pricing import PricingResult

type OrderId = str

# ═══════════════════════════════════════════════════════════════════════════════
# Enums
# ═══════════════════════════════════════════════════════════════════════════════


class PaymentMethod(Enum):
    CASH_ON_DELIVERY = "Cash On Delivery"
    CARD = "Credit/Debit Card"
    UPI = "UPI"
    CREDIT_CARD = "Credit Card"


class OrderStatus(Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    PREPARING = "Preparing"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    def next_status(self) -> OrderStatus | None:
        """Next step of the fulfillment flow. None for DELIVERED and CANCELLED."""
        try:
            index = _FLOW.index(self)
        except ValueError:
            return None
        return _FLOW[index + 1] if index + 1 < len(_FLOW) else None


_FLOW: tuple[OrderStatus, ...] = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
)

# ═══════════════════════════════════════════════════════════════════════════════
# Address
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Address:
    id: str
    title: str
    full_address: str
    landmark: str | None = None
    is_default: bool = False
    coordinate: Coordinate | None = None

    @property
    def short_address(self) -> str:
        parts = self.full_address.split(",")
        if len(parts) >= 2:
            return f"{parts[0].strip()}, {parts[1].strip()}"
        if len(self.full_address) > 30:
            return self.full_address[:30] + "..."
        return self.full_address

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "fullAddress": self.full_address,
            "landmark": self.landmark,
            "isDefault": self.is_default,
        }
        if self.coordinate is not None:
            doc["latitude"] = self.coordinate.latitude
            doc["longitude"] = self.coordinate.longitude
        return doc


# ═══════════════════════════════════════════════════════════════════════════════
# Order
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Order:
    """
    Immutable snapshot of a finalized cart.

    Built once per checkout and written once; the engine never updates it.
    """

    id: OrderId
    user_id: str
    lines: tuple[LineItem, ...]
    pricing: PricingResult
    address: Address
    payment_method: PaymentMethod
    created_at: datetime
    status: OrderStatus = OrderStatus.PENDING
    promo_code: str | None = None
    estimated_delivery_at: datetime | None = None
    fulfillment_center_id: str | None = None

    @property
    def payment_complete(self) -> bool:
        return self.payment_method is not PaymentMethod.CASH_ON_DELIVERY

    @property
    def total_amount(self) -> Money:
        return self.pricing.grand_total

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "items": [line.to_document() for line in self.lines],
            **self.pricing.to_document(),
            "address": self.address.to_document(),
            "orderDate": self.created_at.isoformat(),
            "estimatedDeliveryTime": (
                self.estimated_delivery_at.isoformat()
                if self.estimated_delivery_at is not None
                else None
            ),
            "status": self.status.value,
            "paymentMethod": self.payment_method.value,
            "paymentComplete": self.payment_complete,
            "promoCode": self.promo_code,
            "fulfillmentCenterId": self.fulfillment_center_id,
        }


__all__ = ("OrderId", "PaymentMethod", "OrderStatus", "Address", "Order")
