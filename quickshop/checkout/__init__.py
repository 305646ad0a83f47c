"""
Checkout: preconditions, order snapshot and the order write.

    from quickshop import checkout as C

    orchestrator = C.CheckoutOrchestrator(ledger, sink, session)
    result = await orchestrator.checkout(address, C.PaymentMethod.UPI)
"""

from __future__ import annotations

from quickshop.checkout._types import (
    OrderId,
    PaymentMethod,
    OrderStatus,
    Address,
    Order,
)
from quickshop.checkout._ports import OrderSink, SessionProvider, AddressBook
from quickshop.checkout._memory import MemoryOrderSink, StaticSession, MemoryAddressBook
from quickshop.checkout._transaction import (
    Compensator,
    Step,
    Then,
    Completed,
    TransactionFailure,
    step,
    from_async,
    run_chain,
)
from quickshop.checkout._orchestrator import (
    CheckoutOrchestrator,
    OrderIdFactory,
    new_order_id,
    utc_now,
)

__all__ = (
    "OrderId",
    "PaymentMethod",
    "OrderStatus",
    "Address",
    "Order",
    "OrderSink",
    "SessionProvider",
    "AddressBook",
    "MemoryOrderSink",
    "StaticSession",
    "MemoryAddressBook",
    "Compensator",
    "Step",
    "Then",
    "Completed",
    "TransactionFailure",
    "step",
    "from_async",
    "run_chain",
    "CheckoutOrchestrator",
    "OrderIdFactory",
    "new_order_id",
    "utc_now",
)
