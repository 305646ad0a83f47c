"""
Checkout ports: what the orchestrator needs from the outside world.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from quickshop.checkout._types import Address, Order


class OrderSink(Protocol):
    """Durable order store. write() raises on failure."""

    async def write(self, document_id: str, order: Order) -> None: ...


class SessionProvider(Protocol):
    def current_user_id(self) -> str | None: ...


class AddressBook(Protocol):
    def addresses(self) -> Sequence[Address]: ...

    def default(self) -> Address | None: ...


__all__ = ("OrderSink", "SessionProvider", "AddressBook")
