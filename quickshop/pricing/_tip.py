"""
Delivery tip policy.
"""

from __future__ import annotations

from dataclasses import dataclass

from kungfu import Result, Ok, Error

from quickshop._errors import Errors, ValidationError


@dataclass(frozen=True, slots=True)
class TipPolicy:
    """
    Preset tip buttons plus a bounded custom amount.

    Tips are whole currency units. None means no tip.
    """

    options: tuple[int, ...] = (10, 20, 30)
    default: int = 20
    maximum: int = 1000

    def validate(self, amount: int | None) -> Result[int | None, ValidationError]:
        if amount is None:
            return Ok(None)
        if isinstance(amount, bool) or not isinstance(amount, int):
            return Error(Errors.invalid_tip(amount, self.maximum))
        if amount < 1 or amount > self.maximum:
            return Error(Errors.invalid_tip(amount, self.maximum))
        return Ok(amount)

    def is_preset(self, amount: int | None) -> bool:
        return amount is not None and amount in self.options

    def parse_custom(self, text: str) -> Result[int | None, ValidationError]:
        """Digits typed into the custom tip field; other characters are ignored."""
        digits = "".join(ch for ch in text if ch.isdigit())
        if not digits:
            return Error(Errors.invalid_tip(text, self.maximum))
        return self.validate(int(digits))


__all__ = ("TipPolicy",)
