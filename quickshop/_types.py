"""
Core types for quickshop.

Re-exports from kungfu + money helpers shared by every component.
"""

from __future__ import annotations

from decimal import Decimal

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════

type Money = Decimal
"""Currency amount. Never rounded inside the engine."""

type MoneyLike = Decimal | int | float | str

ZERO: Money = Decimal(0)


def money(value: MoneyLike) -> Money:
    """
    Coerce a number into Money.

    Floats go through str() so that 0.1 stays 0.1 instead of
    0.1000000000000000055511151231257827.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a money amount")
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Money
    "Money",
    "MoneyLike",
    "ZERO",
    "money",
)
