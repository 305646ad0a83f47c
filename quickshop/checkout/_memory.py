"""
In-memory ports for tests and demos.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from typing import Any

from quickshop.checkout._types import Address, Order


class MemoryOrderSink:
    """
    Stores order documents in a dict.

    fail makes every write raise it; delay postpones completion; gate, when
    set, blocks each write until the event is set.
    """

    def __init__(
        self,
        *,
        fail: Exception | None = None,
        delay: float = 0.0,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.fail = fail
        self.delay = delay
        self.gate = gate
        self.documents: dict[str, dict[str, Any]] = {}
        self.orders: dict[str, Order] = {}
        self.attempts = 0

    async def write(self, document_id: str, order: Order) -> None:
        self.attempts += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail is not None:
            raise self.fail
        self.documents[document_id] = order.to_document()
        self.orders[document_id] = order


class StaticSession:
    def __init__(self, user_id: str | None = None) -> None:
        self.user_id = user_id

    def current_user_id(self) -> str | None:
        return self.user_id


class MemoryAddressBook:
    """Default is the first address flagged is_default, else None."""

    def __init__(self, addresses: Iterable[Address] = ()) -> None:
        self._addresses = tuple(addresses)

    def addresses(self) -> Sequence[Address]:
        return self._addresses

    def default(self) -> Address | None:
        return next((a for a in self._addresses if a.is_default), None)


__all__ = ("MemoryOrderSink", "StaticSession", "MemoryAddressBook")
