"""
quickshop: order pricing and delivery-eligibility engine.

    from quickshop import cart as K       # Cart ledger
    from quickshop import pricing as P    # Totals and tips
    from quickshop import promo as Pr     # Discount codes
    from quickshop import delivery as D   # Centers, eligibility, ETA
    from quickshop import checkout as C   # Order placement
"""

from quickshop import catalog
from quickshop import pricing
from quickshop import promo
from quickshop import cart
from quickshop import delivery
from quickshop import checkout
from quickshop.config import EngineConfig
from quickshop._engine import Engine, create_engine
from quickshop._logging import configure_logging
from quickshop._errors import (
    ValidationKind,
    ValidationError,
    PreconditionKind,
    PreconditionError,
    ExternalWriteError,
    CheckoutError,
    Errors,
)
from quickshop._types import Money, MoneyLike, money

__version__ = "0.1.0"

__all__ = (
    "catalog",
    "pricing",
    "promo",
    "cart",
    "delivery",
    "checkout",
    "EngineConfig",
    "Engine",
    "create_engine",
    "configure_logging",
    "ValidationKind",
    "ValidationError",
    "PreconditionKind",
    "PreconditionError",
    "ExternalWriteError",
    "CheckoutError",
    "Errors",
    "Money",
    "MoneyLike",
    "money",
)
