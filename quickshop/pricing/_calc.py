"""
Pricing calculator: pure functions, no state besides the inputs.
"""

from __future__ import annotations

from collections.abc import Iterable

from quickshop._types import Money, MoneyLike, ZERO, money
from quickshop.pricing._types import Priceable, PricingResult

HUNDRED = money(100)


def line_subtotal(line: Priceable) -> Money:
    return line.unit_price * line.quantity


def line_tax(line: Priceable) -> Money:
    """Tax from the line's own rate, never an order-wide rate."""
    return line.unit_price * line.quantity * line.tax_rate / HUNDRED


def line_savings(line: Priceable) -> Money:
    return (line.list_price - line.unit_price) * line.quantity


def calculate(
    lines: Iterable[Priceable],
    *,
    discount: MoneyLike = ZERO,
    tip: MoneyLike | None = None,
    delivery_fee: MoneyLike = ZERO,
) -> PricingResult:
    """
    Price a set of lines.

    Example:
        result = calculate(ledger.snapshot().lines, discount=50, tip=20, delivery_fee=25)
        result.grand_total
    """
    subtotal = ZERO
    tax = ZERO
    savings = ZERO
    count = 0
    for line in lines:
        subtotal += line_subtotal(line)
        tax += line_tax(line)
        savings += line_savings(line)
        count += line.quantity

    fee = money(delivery_fee)
    off = money(discount)
    tip_amount = money(tip) if tip is not None else ZERO

    return PricingResult(
        subtotal=subtotal,
        tax=tax,
        delivery_fee=fee,
        discount=off,
        tip=tip_amount,
        grand_total=subtotal + tax + fee + tip_amount - off,
        savings=savings,
        item_count=count,
    )


__all__ = ("calculate", "line_subtotal", "line_tax", "line_savings")
