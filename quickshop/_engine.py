"""
Wiring: one config in, a connected set of services out.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from quickshop.cart import CartLedger
from quickshop.catalog import CatalogFeed, CatalogItem
from quickshop.checkout import (
    AddressBook,
    CheckoutOrchestrator,
    OrderSink,
    SessionProvider,
)
from quickshop.config import EngineConfig
from quickshop.delivery import Clock, EligibilityResolver, FulfillmentCenter, ZoneIndex
from quickshop.promo import PromoEngine

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Engine:
    """
    The storefront core.

    Catalog replacements are reconciled into the cart automatically.
    """

    config: EngineConfig
    catalog: CatalogFeed
    promos: PromoEngine
    ledger: CartLedger
    zones: ZoneIndex
    resolver: EligibilityResolver
    checkout: CheckoutOrchestrator


def create_engine(
    config: EngineConfig | None = None,
    *,
    sink: OrderSink,
    session: SessionProvider,
    address_book: AddressBook | None = None,
    items: Iterable[CatalogItem] = (),
    centers: Iterable[FulfillmentCenter] = (),
    promos: PromoEngine | None = None,
    clock: Clock = time.monotonic,
) -> Engine:
    """
    Example:
        engine = create_engine(
            EngineConfig.from_env(),
            sink=MemoryOrderSink(),
            session=StaticSession("user-1"),
            centers=stores,
        )
        engine.ledger.add_item(item)
        await engine.checkout.checkout(address)
    """
    config = config if config is not None else EngineConfig()
    promos = promos if promos is not None else PromoEngine()

    catalog = CatalogFeed(items)
    ledger = CartLedger.from_config(config, promos=promos)
    catalog.subscribe(ledger.reconcile)

    zones = ZoneIndex(centers)
    resolver = EligibilityResolver.from_config(zones, config, clock=clock)

    orchestrator = CheckoutOrchestrator(
        ledger,
        sink,
        session,
        address_book=address_book,
        resolver=resolver,
    )

    logger.info(
        "engine_created",
        items=len(catalog.current),
        centers=len(zones),
        delivery_fee=str(config.delivery_fee),
    )
    return Engine(
        config=config,
        catalog=catalog,
        promos=promos,
        ledger=ledger,
        zones=zones,
        resolver=resolver,
        checkout=orchestrator,
    )


__all__ = ("Engine", "create_engine")
