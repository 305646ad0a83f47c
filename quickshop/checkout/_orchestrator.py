"""
Checkout orchestrator: a finalized cart becomes exactly one order write.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import structlog
from kungfu import Result, Ok, Error, LazyCoroResult

from quickshop._errors import CheckoutError, Errors, PreconditionError
from quickshop.cart import CartLedger, CartSnapshot
from quickshop.checkout import _transaction as T
from quickshop.checkout._ports import AddressBook, OrderSink, SessionProvider
from quickshop.checkout._types import Address, Order, OrderId, PaymentMethod
from quickshop.delivery import EligibilityResolver

logger = structlog.get_logger(__name__)

type OrderIdFactory = Callable[[], OrderId]
type Now = Callable[[], datetime]


def new_order_id() -> OrderId:
    return "OD" + uuid.uuid4().hex[:16].upper()


def utc_now() -> datetime:
    return datetime.now(UTC)


class CheckoutOrchestrator:
    """
    Preconditions, order snapshot, then a two-step transaction:

        1. claim the submission slot   (compensator: release it)
        2. write the order document

    Only after the write succeeds are the ordered lines taken out of the
    ledger; anything added while the write was in flight stays. A failed
    write is reported as ExternalWriteError, never retried, and leaves the
    cart as is.

    Example:
        orchestrator = CheckoutOrchestrator(ledger, sink, session)
        match await orchestrator.checkout(address, PaymentMethod.UPI):
            case Ok(order_id): ...
            case Error(PreconditionError(kind=kind)): ...
            case Error(ExternalWriteError(message=msg)): ...
    """

    def __init__(
        self,
        ledger: CartLedger,
        sink: OrderSink,
        session: SessionProvider,
        *,
        address_book: AddressBook | None = None,
        resolver: EligibilityResolver | None = None,
        order_ids: OrderIdFactory = new_order_id,
        now: Now = utc_now,
    ) -> None:
        self._ledger = ledger
        self._sink = sink
        self._session = session
        self._address_book = address_book
        self._resolver = resolver
        self._order_ids = order_ids
        self._now = now
        self._claimed: OrderId | None = None

    @property
    def in_progress(self) -> bool:
        return self._claimed is not None

    async def checkout(
        self,
        address: Address | None = None,
        payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY,
    ) -> Result[OrderId, CheckoutError]:
        user_id = self._session.current_user_id()
        if user_id is None:
            return Error(Errors.not_authenticated())

        snapshot = self._ledger.snapshot()
        if snapshot.is_empty:
            return Error(Errors.empty_cart())

        if address is None and self._address_book is not None:
            address = self._address_book.default()
        if address is None:
            return Error(Errors.no_address())

        order = self._build_order(user_id, snapshot, address, payment_method)
        # once submitted the write runs to completion even if the caller goes away
        return await asyncio.shield(self._submit(order))

    # ═══════════════════════════════════════════════════════════════════════════
    # Transaction
    # ═══════════════════════════════════════════════════════════════════════════

    async def _submit(self, order: Order) -> Result[OrderId, CheckoutError]:
        tx = T.step(
            LazyCoroResult(lambda: self._claim(order.id)),
            compensate=self._release,
        ).then(
            lambda _: T.from_async(
                lambda: self._sink.write(order.id, order),
                on_error=Errors.write_failed,
            )
        )

        match await T.run_chain(tx):
            case Ok(_):
                await self._release(order.id)
                self._ledger.clear_ordered(order.lines)
                logger.info(
                    "order_written",
                    order_id=order.id,
                    user_id=order.user_id,
                    total=str(order.total_amount),
                    payment_method=order.payment_method.name,
                )
                return Ok(order.id)
            case Error(failure):
                logger.warning(
                    "checkout_failed",
                    order_id=order.id,
                    step_failed=failure.step_failed,
                    error=str(failure.error),
                )
                return Error(failure.error)

    async def _claim(self, order_id: OrderId) -> Result[OrderId, PreconditionError]:
        if self._claimed is not None:
            return Error(Errors.checkout_in_progress())
        self._claimed = order_id
        logger.info("checkout_started", order_id=order_id)
        return Ok(order_id)

    async def _release(self, order_id: OrderId) -> None:
        if self._claimed == order_id:
            self._claimed = None

    # ═══════════════════════════════════════════════════════════════════════════
    # Order snapshot
    # ═══════════════════════════════════════════════════════════════════════════

    def _build_order(
        self,
        user_id: str,
        snapshot: CartSnapshot,
        address: Address,
        payment_method: PaymentMethod,
    ) -> Order:
        created_at = self._now()
        estimated: datetime | None = None
        center_id: str | None = None

        eligibility = self._resolver.result if self._resolver is not None else None
        if eligibility is not None and eligibility.serviceable:
            estimated = created_at + timedelta(minutes=eligibility.eta_minutes)
            center_id = eligibility.center.id if eligibility.center is not None else None

        return Order(
            id=self._order_ids(),
            user_id=user_id,
            lines=snapshot.lines,
            pricing=snapshot.pricing,
            address=address,
            payment_method=payment_method,
            created_at=created_at,
            promo_code=snapshot.promo.code if snapshot.promo.applied else None,
            estimated_delivery_at=estimated,
            fulfillment_center_id=center_id,
        )


__all__ = ("CheckoutOrchestrator", "OrderIdFactory", "new_order_id", "utc_now")
