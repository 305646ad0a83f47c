"""Tests for checkout: preconditions, order snapshot, the write and its failure modes."""

import asyncio
from datetime import timedelta
from decimal import Decimal

import pytest
from kungfu import Ok, Error, LazyCoroResult

from quickshop import checkout as C
from quickshop import delivery as D
from quickshop._errors import ExternalWriteError, PreconditionError, PreconditionKind


def precondition(result) -> PreconditionKind:
    match result:
        case Error(PreconditionError(kind=kind)):
            return kind
        case _:
            pytest.fail(f"expected a precondition error, got {result!r}")


async def until(predicate, spins: int = 100) -> None:
    for _ in range(spins):
        if predicate():
            return
        await asyncio.sleep(0)
    pytest.fail("condition never became true")


class TestPreconditions:
    async def test_not_authenticated(self, ledger, sink, home, milk):
        ledger.add_item(milk)
        orchestrator = C.CheckoutOrchestrator(ledger, sink, C.StaticSession(None))

        result = await orchestrator.checkout(home)

        assert precondition(result) is PreconditionKind.NOT_AUTHENTICATED
        assert sink.attempts == 0

    async def test_empty_cart_performs_no_write(self, orchestrator, sink, home):
        result = await orchestrator.checkout(home)

        assert precondition(result) is PreconditionKind.EMPTY_CART
        assert sink.attempts == 0

    async def test_no_address(self, ledger, sink, session, milk):
        ledger.add_item(milk)
        orchestrator = C.CheckoutOrchestrator(
            ledger, sink, session, address_book=C.MemoryAddressBook()
        )

        result = await orchestrator.checkout()

        assert precondition(result) is PreconditionKind.NO_ADDRESS
        assert sink.attempts == 0

    async def test_default_address_used(self, orchestrator, ledger, sink, home, milk):
        ledger.add_item(milk)

        result = await orchestrator.checkout()

        assert isinstance(result, Ok)
        assert sink.orders[result.value].address == home


class TestSuccessfulCheckout:
    async def test_writes_once_and_clears_cart(self, orchestrator, ledger, sink, home, milk):
        ledger.add_item(milk, 2)
        expected_total = ledger.pricing.grand_total

        result = await orchestrator.checkout(home, C.PaymentMethod.UPI)

        assert isinstance(result, Ok)
        assert result.value == "OD-1"
        assert sink.attempts == 1
        order = sink.orders["OD-1"]
        assert order.user_id == "user-1"
        assert order.status is C.OrderStatus.PENDING
        assert order.total_amount == expected_total
        assert ledger.snapshot().is_empty
        assert not orchestrator.in_progress

    async def test_order_snapshot_is_isolated(self, orchestrator, ledger, sink, home, milk):
        ledger.add_item(milk, 2)

        await orchestrator.checkout(home)
        ledger.add_item(milk, 1)

        assert sink.orders["OD-1"].lines[0].quantity == 2

    async def test_eta_and_center_from_resolver(self, orchestrator, resolver, ledger, sink, home, milk):
        ledger.add_item(milk)
        eligibility = resolver.force_calculate(D.Coordinate(12.9352, 77.6245))

        await orchestrator.checkout(home)

        order = sink.orders["OD-1"]
        assert order.fulfillment_center_id == "koramangala"
        assert order.estimated_delivery_at == order.created_at + timedelta(
            minutes=eligibility.eta_minutes
        )

    async def test_no_eta_without_serviceable_result(self, orchestrator, ledger, sink, home, milk):
        ledger.add_item(milk)

        await orchestrator.checkout(home)

        order = sink.orders["OD-1"]
        assert order.estimated_delivery_at is None
        assert order.fulfillment_center_id is None

    async def test_order_document(self, orchestrator, ledger, sink, home, milk):
        ledger.add_item(milk, 2)
        ledger.apply_promo("welcome10")
        ledger.set_tip(20)

        await orchestrator.checkout(home, C.PaymentMethod.CASH_ON_DELIVERY)

        doc = sink.documents["OD-1"]
        assert doc["id"] == "OD-1"
        assert doc["userId"] == "user-1"
        assert doc["status"] == "Pending"
        assert doc["paymentMethod"] == "Cash On Delivery"
        assert doc["paymentComplete"] is False
        assert doc["promoCode"] == "welcome10"
        assert doc["orderDate"] == "2026-01-15T10:30:00+00:00"
        assert doc["address"]["fullAddress"] == home.full_address
        assert doc["items"][0]["productId"] == "milk"
        assert doc["items"][0]["quantity"] == 2
        # 120 + 6 + 25 + 20 - 12
        assert Decimal(doc["totalAmount"]) == Decimal(159)

    async def test_prepaid_marks_payment_complete(self, orchestrator, ledger, sink, home, milk):
        ledger.add_item(milk)

        await orchestrator.checkout(home, C.PaymentMethod.CARD)

        assert sink.documents["OD-1"]["paymentComplete"] is True


class TestFailedWrite:
    async def test_failure_keeps_cart(self, orchestrator, ledger, sink, home, milk):
        ledger.add_item(milk, 2)
        before = ledger.snapshot()
        sink.fail = ConnectionError("write timed out")

        result = await orchestrator.checkout(home)

        match result:
            case Error(ExternalWriteError(message=message, cause=cause)):
                assert message == "write timed out"
                assert isinstance(cause, ConnectionError)
            case _:
                pytest.fail("expected an external write error")
        assert ledger.snapshot() == before
        assert sink.attempts == 1
        assert not orchestrator.in_progress

    async def test_retry_after_failure(self, orchestrator, ledger, sink, home, milk):
        ledger.add_item(milk)
        sink.fail = ConnectionError("offline")
        await orchestrator.checkout(home)
        sink.fail = None

        result = await orchestrator.checkout(home)

        assert isinstance(result, Ok)
        assert ledger.snapshot().is_empty


class TestInFlight:
    async def test_cart_cleared_only_after_write_completes(self, orchestrator, ledger, sink, home, milk):
        ledger.add_item(milk)
        sink.gate = asyncio.Event()

        task = asyncio.create_task(orchestrator.checkout(home))
        await until(lambda: sink.attempts == 1)

        assert orchestrator.in_progress
        assert not ledger.snapshot().is_empty

        sink.gate.set()
        result = await task

        assert isinstance(result, Ok)
        assert ledger.snapshot().is_empty

    async def test_lines_added_during_write_are_kept(self, orchestrator, ledger, sink, home, milk, bread):
        ledger.add_item(milk)
        sink.gate = asyncio.Event()

        task = asyncio.create_task(orchestrator.checkout(home))
        await until(lambda: sink.attempts == 1)
        ledger.add_item(bread, 2)
        sink.gate.set()
        result = await task

        assert isinstance(result, Ok)
        assert [line.item_id for line in sink.orders[result.value].lines] == ["milk"]
        assert [(line.item_id, line.quantity) for line in ledger.lines] == [("bread", 2)]

    async def test_quantity_added_during_write_is_kept(self, orchestrator, ledger, sink, home, milk):
        ledger.add_item(milk, 2)
        sink.gate = asyncio.Event()

        task = asyncio.create_task(orchestrator.checkout(home))
        await until(lambda: sink.attempts == 1)
        ledger.add_item(milk, 3)
        sink.gate.set()
        result = await task

        assert sink.orders[result.value].lines[0].quantity == 2
        assert ledger.snapshot().quantity_of("milk") == 3

    async def test_double_submit_rejected(self, orchestrator, ledger, sink, home, milk):
        ledger.add_item(milk)
        sink.gate = asyncio.Event()

        first = asyncio.create_task(orchestrator.checkout(home))
        await until(lambda: sink.attempts == 1)
        second = await orchestrator.checkout(home)
        sink.gate.set()
        first_result = await first

        assert precondition(second) is PreconditionKind.CHECKOUT_IN_PROGRESS
        assert isinstance(first_result, Ok)
        assert sink.attempts == 1
        assert len(sink.orders) == 1

    async def test_delayed_write(self, orchestrator, ledger, sink, home, milk):
        ledger.add_item(milk)
        sink.delay = 0.01

        result = await orchestrator.checkout(home)

        assert isinstance(result, Ok)
        assert ledger.snapshot().is_empty


class TestTransaction:
    async def test_compensates_first_step_when_second_fails(self):
        released: list[str] = []

        async def claim():
            return Ok("slot")

        async def release(value: str) -> None:
            released.append(value)

        async def explode():
            raise RuntimeError("nope")

        tx = C.step(LazyCoroResult(claim), compensate=release).then(
            lambda _: C.from_async(explode, on_error=str)
        )

        result = await C.run_chain(tx)

        match result:
            case Error(failure):
                assert failure.error == "nope"
                assert failure.step_failed == 2
                assert failure.rollback_complete
            case _:
                pytest.fail("expected failure")
        assert released == ["slot"]

    async def test_success_runs_no_compensator(self):
        released: list[str] = []

        async def claim():
            return Ok("slot")

        async def release(value: str) -> None:
            released.append(value)

        async def write():
            return 42

        tx = C.step(LazyCoroResult(claim), compensate=release).then(
            lambda _: C.from_async(write, on_error=str)
        )

        result = await C.run_chain(tx)

        assert isinstance(result, Ok)
        assert result.value.value == 42
        assert released == []

    async def test_failing_compensator_is_counted(self):
        async def claim():
            return Ok("slot")

        async def release(value: str) -> None:
            raise RuntimeError("release lost")

        async def explode():
            raise RuntimeError("nope")

        tx = C.step(LazyCoroResult(claim), compensate=release).then(
            lambda _: C.from_async(explode, on_error=str)
        )

        result = await C.run_chain(tx)

        match result:
            case Error(failure):
                assert failure.compensators_run == 0
                assert failure.compensators_failed == 1
                assert not failure.rollback_complete
            case _:
                pytest.fail("expected failure")


class TestTypes:
    def test_status_flow(self):
        assert C.OrderStatus.PENDING.next_status() is C.OrderStatus.CONFIRMED
        assert C.OrderStatus.OUT_FOR_DELIVERY.next_status() is C.OrderStatus.DELIVERED
        assert C.OrderStatus.DELIVERED.next_status() is None
        assert C.OrderStatus.CANCELLED.next_status() is None

    def test_short_address(self):
        assert C.Address("a", "Home", "12 Park Street, Koramangala, Bengaluru").short_address == (
            "12 Park Street, Koramangala"
        )
        long = "A very long single line address without commas"
        assert C.Address("b", "Work", long).short_address == long[:30] + "..."
        assert C.Address("c", "Other", "Short").short_address == "Short"
