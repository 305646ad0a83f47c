"""
Error values.

Errors travel inside kungfu.Result, they are not raised across the public API.

    ValidationError     : bad input, recovered locally (rejected / no-op)
    PreconditionError   : checkout aborted before any side effect
    ExternalWriteError  : order sink failed, cart preserved

Stock clamps and debounce drops are not errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

# ═══════════════════════════════════════════════════════════════════════════════
# Validation
# ═══════════════════════════════════════════════════════════════════════════════


class ValidationKind(Enum):
    INVALID_PROMO_CODE = auto()
    INVALID_TIP = auto()


@dataclass(frozen=True, slots=True)
class ValidationError:
    """Input rejected by a local rule."""

    kind: ValidationKind
    message: str


# ═══════════════════════════════════════════════════════════════════════════════
# Preconditions
# ═══════════════════════════════════════════════════════════════════════════════


class PreconditionKind(Enum):
    EMPTY_CART = auto()
    NOT_AUTHENTICATED = auto()
    NO_ADDRESS = auto()
    CHECKOUT_IN_PROGRESS = auto()


@dataclass(frozen=True, slots=True)
class PreconditionError:
    """Checkout refused before anything was written."""

    kind: PreconditionKind
    message: str


# ═══════════════════════════════════════════════════════════════════════════════
# External writes
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ExternalWriteError:
    """
    Order sink failure.

    message is the sink's own failure text, unmodified.
    """

    message: str
    cause: Exception | None = None


type CheckoutError = PreconditionError | ExternalWriteError


# ═══════════════════════════════════════════════════════════════════════════════
# Factories
# ═══════════════════════════════════════════════════════════════════════════════


class Errors:
    @staticmethod
    def invalid_promo(code: str) -> ValidationError:
        return ValidationError(
            ValidationKind.INVALID_PROMO_CODE, f"Promo code {code!r} is not valid"
        )

    @staticmethod
    def invalid_tip(amount: object, maximum: int) -> ValidationError:
        return ValidationError(
            ValidationKind.INVALID_TIP,
            f"Tip must be a whole amount between 1 and {maximum}, got {amount!r}",
        )

    @staticmethod
    def empty_cart() -> PreconditionError:
        return PreconditionError(PreconditionKind.EMPTY_CART, "Your cart is empty")

    @staticmethod
    def not_authenticated() -> PreconditionError:
        return PreconditionError(
            PreconditionKind.NOT_AUTHENTICATED, "Sign in to place an order"
        )

    @staticmethod
    def no_address() -> PreconditionError:
        return PreconditionError(
            PreconditionKind.NO_ADDRESS, "Choose a delivery address"
        )

    @staticmethod
    def checkout_in_progress() -> PreconditionError:
        return PreconditionError(
            PreconditionKind.CHECKOUT_IN_PROGRESS, "An order is already being placed"
        )

    @staticmethod
    def write_failed(exc: Exception) -> ExternalWriteError:
        return ExternalWriteError(str(exc), exc)


__all__ = (
    "ValidationKind",
    "ValidationError",
    "PreconditionKind",
    "PreconditionError",
    "ExternalWriteError",
    "CheckoutError",
    "Errors",
)
