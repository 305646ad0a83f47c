"""
Cart ledger: line items, promo and tip with derived totals.

Every mutation is one read-compute-publish step under the ledger lock:
the current snapshot is read, the next one is built from it, priced, and
swapped in as a single immutable value. Two increments fired back to back
therefore always land as +2.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Callable, Iterable
from decimal import Decimal

import structlog
from kungfu import Result, Ok, Error

from quickshop._errors import Errors, ValidationError
from quickshop._listeners import Listener, Listeners, Unsubscribe
from quickshop._types import MoneyLike, ZERO, money
from quickshop.cart._types import LineItem, PromoState, NO_PROMO, CartSnapshot
from quickshop.catalog import CatalogItem, CatalogView
from quickshop.config import EngineConfig
from quickshop.pricing import PricingResult, TipPolicy, calculate
from quickshop.promo import PromoEngine

logger = structlog.get_logger(__name__)

DEFAULT_DELIVERY_FEE = Decimal(25)

type LineIdFactory = Callable[[], str]

# (lines, promo, tip), or None for "no change"
type _Next = tuple[tuple[LineItem, ...], PromoState, int | None] | None


def new_line_id() -> str:
    return uuid.uuid4().hex


def _replace_line(
    lines: tuple[LineItem, ...], line_id: str, new: LineItem | None
) -> tuple[LineItem, ...]:
    """Swap the line in place, or drop it when new is None."""
    if new is None:
        return tuple(line for line in lines if line.id != line_id)
    return tuple(new if line.id == line_id else line for line in lines)


class CartLedger:
    """
    Single owner of a shopping cart.

    Read with snapshot() (pull) or subscribe() (push). Listeners run after
    the new snapshot is published, only when something changed.

    Example:
        ledger = CartLedger()
        line = ledger.add_item(bananas, 2)
        ledger.increment(line.id)
        ledger.apply_promo("welcome10")
        ledger.snapshot().pricing.grand_total
    """

    def __init__(
        self,
        *,
        delivery_fee: MoneyLike = DEFAULT_DELIVERY_FEE,
        promos: PromoEngine | None = None,
        tips: TipPolicy | None = None,
        line_ids: LineIdFactory = new_line_id,
    ) -> None:
        self._delivery_fee = money(delivery_fee)
        self._promos = promos if promos is not None else PromoEngine()
        self._tips = tips if tips is not None else TipPolicy()
        self._line_ids = line_ids
        self._lock = threading.Lock()
        self._listeners: Listeners[CartSnapshot] = Listeners("cart")
        self._snapshot = self._build((), NO_PROMO, None)

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        *,
        promos: PromoEngine | None = None,
        line_ids: LineIdFactory = new_line_id,
    ) -> CartLedger:
        return cls(
            delivery_fee=config.delivery_fee,
            promos=promos,
            tips=TipPolicy(config.tip_options, config.default_tip, config.max_tip),
            line_ids=line_ids,
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # Reads
    # ═══════════════════════════════════════════════════════════════════════════

    def snapshot(self) -> CartSnapshot:
        return self._snapshot

    @property
    def lines(self) -> tuple[LineItem, ...]:
        return self._snapshot.lines

    @property
    def pricing(self) -> PricingResult:
        return self._snapshot.pricing

    @property
    def tips(self) -> TipPolicy:
        return self._tips

    def subscribe(self, listener: Listener[CartSnapshot]) -> Unsubscribe:
        return self._listeners.subscribe(listener)

    # ═══════════════════════════════════════════════════════════════════════════
    # Line mutations
    # ═══════════════════════════════════════════════════════════════════════════

    def add_item(self, item: CatalogItem, quantity: int = 1) -> LineItem | None:
        """
        Add or merge. Returns the resulting line, None if nothing is held.

        Merging clamps existing + quantity to item.stock_quantity; a new line
        is clamped to min(quantity, stock) and skipped when that is <= 0.
        """

        def change(cur: CartSnapshot) -> _Next:
            existing = cur.line_for_item(item.id)
            if existing is not None:
                merged = min(existing.quantity + quantity, item.stock_quantity)
                if merged != existing.quantity + quantity:
                    logger.debug(
                        "stock_clamped",
                        item_id=item.id,
                        requested=existing.quantity + quantity,
                        stock=item.stock_quantity,
                    )
                new = (
                    LineItem(id=existing.id, item=item, quantity=merged)
                    if merged > 0
                    else None
                )
                return _replace_line(cur.lines, existing.id, new), cur.promo, cur.tip

            if not item.is_available:
                logger.debug("item_unavailable", item_id=item.id)
                return None
            clamped = min(quantity, item.stock_quantity)
            if clamped <= 0:
                return None
            logger.info("adding_item", item_id=item.id, quantity=clamped)
            line = LineItem(id=self._line_ids(), item=item, quantity=clamped)
            return (*cur.lines, line), cur.promo, cur.tip

        return self._commit(change).line_for_item(item.id)

    def remove_item(self, line_id: str) -> bool:
        removed = False

        def change(cur: CartSnapshot) -> _Next:
            nonlocal removed
            if cur.line(line_id) is None:
                return None
            removed = True
            logger.info("removing_item", line_id=line_id)
            return _replace_line(cur.lines, line_id, None), cur.promo, cur.tip

        self._commit(change)
        return removed

    def set_quantity(self, line_id: str, quantity: int) -> LineItem | None:
        """quantity <= 0 removes the line; otherwise clamp to stock."""

        def change(cur: CartSnapshot) -> _Next:
            line = cur.line(line_id)
            if line is None:
                return None
            clamped = min(quantity, line.item.stock_quantity)
            new = line.with_quantity(clamped) if clamped > 0 else None
            return _replace_line(cur.lines, line_id, new), cur.promo, cur.tip

        return self._commit(change).line(line_id)

    def increment(self, line_id: str) -> LineItem | None:
        def change(cur: CartSnapshot) -> _Next:
            line = cur.line(line_id)
            if line is None or line.quantity >= line.item.stock_quantity:
                return None
            new = line.with_quantity(line.quantity + 1)
            return _replace_line(cur.lines, line_id, new), cur.promo, cur.tip

        return self._commit(change).line(line_id)

    def decrement(self, line_id: str) -> LineItem | None:
        """At quantity 1 the line is removed."""

        def change(cur: CartSnapshot) -> _Next:
            line = cur.line(line_id)
            if line is None:
                return None
            new = line.with_quantity(line.quantity - 1) if line.quantity > 1 else None
            return _replace_line(cur.lines, line_id, new), cur.promo, cur.tip

        return self._commit(change).line(line_id)

    def clear(self) -> None:
        """Empty the cart and reset promo and tip."""

        def change(cur: CartSnapshot) -> _Next:
            return (), NO_PROMO, None

        self._commit(change)
        logger.info("cart_cleared")

    def clear_ordered(self, ordered: Iterable[LineItem]) -> CartSnapshot:
        """
        Settle a submitted order against the cart.

        Each ordered line gives up the quantity it was ordered with; what was
        added on top since stays. Promo and tip are consumed by the order.
        """
        taken = {line.id: line.quantity for line in ordered}

        def change(cur: CartSnapshot) -> _Next:
            lines = tuple(
                line.with_quantity(line.quantity - taken.get(line.id, 0))
                for line in cur.lines
                if line.quantity > taken.get(line.id, 0)
            )
            return lines, NO_PROMO, None

        snapshot = self._commit(change)
        logger.info("ordered_lines_cleared", remaining=len(snapshot.lines))
        return snapshot

    def reconcile(self, view: CatalogView) -> CartSnapshot:
        """
        Apply a catalog snapshot to the held lines.

        Each line takes the fresh item copy and is re-clamped to its stock.
        Lines whose item vanished, went unavailable or out of stock are dropped.
        """

        def change(cur: CartSnapshot) -> _Next:
            lines: list[LineItem] = []
            for line in cur.lines:
                fresh = view.get(line.item.id)
                if fresh is None or not fresh.can_be_added:
                    logger.info("line_dropped", item_id=line.item.id)
                    continue
                lines.append(
                    LineItem(
                        id=line.id,
                        item=fresh,
                        quantity=min(line.quantity, fresh.stock_quantity),
                    )
                )
            return tuple(lines), cur.promo, cur.tip

        return self._commit(change)

    # ═══════════════════════════════════════════════════════════════════════════
    # Promo & tip
    # ═══════════════════════════════════════════════════════════════════════════

    def apply_promo(self, code: str) -> Result[Decimal, ValidationError]:
        """
        Apply a code to the current subtotal.

        An unknown code clears any previously applied promo.
        """
        accepted = False
        discount = ZERO

        def change(cur: CartSnapshot) -> _Next:
            nonlocal accepted, discount
            outcome = self._promos.apply(code, cur.pricing.subtotal)
            accepted, discount = outcome.accepted, outcome.discount
            promo = (
                PromoState(code=code.strip(), discount=outcome.discount, applied=True)
                if outcome.accepted
                else NO_PROMO
            )
            return cur.lines, promo, cur.tip

        self._commit(change)
        if not accepted:
            return Error(Errors.invalid_promo(code))
        return Ok(discount)

    def remove_promo(self) -> None:
        def change(cur: CartSnapshot) -> _Next:
            return cur.lines, NO_PROMO, cur.tip

        self._commit(change)

    def set_tip(self, amount: int | None) -> Result[int | None, ValidationError]:
        """Set or clear (None) the delivery tip. Invalid amounts change nothing."""
        match self._tips.validate(amount):
            case Ok(tip):
                self._commit(lambda cur: (cur.lines, cur.promo, tip))
                return Ok(tip)
            case Error(e):
                logger.info("tip_rejected", amount=amount)
                return Error(e)

    # ═══════════════════════════════════════════════════════════════════════════
    # Commit
    # ═══════════════════════════════════════════════════════════════════════════

    def _commit(self, change: Callable[[CartSnapshot], _Next]) -> CartSnapshot:
        with self._lock:
            current = self._snapshot
            nxt = change(current)
            if nxt is None:
                return current
            snapshot = self._build(*nxt)
            if snapshot == current:
                return current
            self._snapshot = snapshot

        self._listeners.publish(self.snapshot)
        return snapshot

    def _build(
        self,
        lines: tuple[LineItem, ...],
        promo: PromoState,
        tip: int | None,
    ) -> CartSnapshot:
        if promo.applied:
            # the held code follows the subtotal
            subtotal = sum((line.subtotal for line in lines), ZERO)
            outcome = self._promos.evaluate(promo.code, subtotal)
            promo = PromoState(code=promo.code, discount=outcome.discount, applied=True)

        pricing = calculate(
            lines,
            discount=promo.discount,
            tip=tip,
            delivery_fee=self._delivery_fee,
        )
        return CartSnapshot(lines=lines, promo=promo, tip=tip, pricing=pricing)


__all__ = ("CartLedger", "LineIdFactory", "new_line_id", "DEFAULT_DELIVERY_FEE")
