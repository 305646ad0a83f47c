"""End-to-end: a wired engine from browsing to a written order."""

from decimal import Decimal

from kungfu import Ok

from quickshop import checkout as C
from quickshop import delivery as D
from quickshop import EngineConfig, create_engine
from quickshop.catalog import CatalogItem


async def test_browse_fill_and_checkout(milk, bread, centers, clock, home):
    sink = C.MemoryOrderSink()
    engine = create_engine(
        EngineConfig().with_delivery_fee(30),
        sink=sink,
        session=C.StaticSession("user-9"),
        address_book=C.MemoryAddressBook([home]),
        items=[milk, bread],
        centers=centers,
        clock=clock,
    )

    engine.ledger.add_item(engine.catalog.current.get("milk"), 2)
    engine.ledger.add_item(engine.catalog.current.get("bread"), 1)
    engine.resolver.calculate(D.Coordinate(12.9352, 77.6245))
    assert engine.ledger.pricing.grand_total == Decimal(155) + Decimal(6) + 30

    result = await engine.checkout.checkout()

    assert isinstance(result, Ok)
    order = sink.orders[result.value]
    assert order.fulfillment_center_id == "koramangala"
    assert order.pricing.delivery_fee == Decimal(30)
    assert engine.ledger.snapshot().is_empty


def test_catalog_replacement_reconciles_cart(milk, sink, session):
    engine = create_engine(sink=sink, session=session, items=[milk])
    engine.ledger.add_item(milk, 5)

    engine.catalog.replace([CatalogItem(id="milk", name="Milk", price=60, stock_quantity=3)])

    assert engine.ledger.snapshot().quantity_of("milk") == 3


async def test_zone_refresh(sink, session, centers):
    engine = create_engine(sink=sink, session=session)

    result = await engine.zones.refresh(D.StaticCenterSource(centers))

    assert isinstance(result, Ok)
    assert engine.zones.can_deliver(D.Coordinate(12.9121, 77.6446))
