"""
Promo engine.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from quickshop._types import Money, MoneyLike, ZERO, money
from quickshop.promo._rules import PromoRule, DEFAULT_RULES

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PromoOutcome:
    """Result of applying a code. Rejected outcomes carry discount 0."""

    code: str
    discount: Money
    accepted: bool

    @classmethod
    def rejected(cls, code: str = "") -> PromoOutcome:
        return cls(code=code, discount=ZERO, accepted=False)


class PromoEngine:
    """
    Validates codes against a fixed rule table.

    Stateless: applying the same code to the same subtotal always gives
    the same outcome, so repeated calls are safe.

    Example:
        engine = PromoEngine()
        engine.apply("WELCOME50", 500)   # PromoOutcome("WELCOME50", 200, True)
    """

    def __init__(self, rules: Iterable[PromoRule] = DEFAULT_RULES) -> None:
        self._rules = tuple(rules)
        codes = [r.code.casefold() for r in self._rules]
        if len(codes) != len(set(codes)):
            raise ValueError("Promo codes must be unique (case-insensitive)")

    @property
    def rules(self) -> tuple[PromoRule, ...]:
        return self._rules

    def lookup(self, code: str) -> PromoRule | None:
        for rule in self._rules:
            if rule.matches(code):
                return rule
        return None

    def evaluate(self, code: str, subtotal: MoneyLike) -> PromoOutcome:
        """Same as apply(), without logging. Used to re-derive a held code."""
        rule = self.lookup(code)
        if rule is None:
            return PromoOutcome.rejected(code)
        return PromoOutcome(code=code, discount=rule.discount(money(subtotal)), accepted=True)

    def apply(self, code: str, subtotal: MoneyLike) -> PromoOutcome:
        outcome = self.evaluate(code, subtotal)
        if outcome.accepted:
            logger.info("promo_applied", code=code, discount=str(outcome.discount))
        else:
            logger.info("promo_rejected", code=code)
        return outcome

    def remove(self) -> PromoOutcome:
        return PromoOutcome.rejected()


__all__ = ("PromoOutcome", "PromoEngine")
