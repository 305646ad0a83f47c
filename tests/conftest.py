"""Shared fixtures: catalog items, centers, a fake clock and wired services."""

import itertools
from datetime import UTC, datetime

import pytest

from quickshop import cart as K
from quickshop import checkout as C
from quickshop import delivery as D
from quickshop.catalog import CatalogItem


class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def sequential_ids(prefix: str):
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def milk() -> CatalogItem:
    return CatalogItem(
        id="milk",
        name="Full Cream Milk",
        price=60,
        tax_rate=5,
        stock_quantity=10,
        category="Dairy",
        description="1 litre pouch",
        is_featured=True,
    )


@pytest.fixture
def bread() -> CatalogItem:
    return CatalogItem(
        id="bread",
        name="Brown Bread",
        price=40,
        discount_price=35,
        stock_quantity=3,
        category="Bakery",
    )


@pytest.fixture
def chips() -> CatalogItem:
    return CatalogItem(id="chips", name="Potato Chips", price=20, tax_rate=12, stock_quantity=0)


@pytest.fixture
def soap() -> CatalogItem:
    return CatalogItem(id="soap", name="Soap", price=50, stock_quantity=5, is_available=False)


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def ledger() -> K.CartLedger:
    return K.CartLedger(line_ids=sequential_ids("line"))


# ═══════════════════════════════════════════════════════════════════════════════
# Delivery
# ═══════════════════════════════════════════════════════════════════════════════

KORAMANGALA = D.Coordinate(12.9352, 77.6245)
HSR = D.Coordinate(12.9121, 77.6446)
KONDAPUR = D.Coordinate(17.4639, 78.3489)


@pytest.fixture
def centers() -> tuple[D.FulfillmentCenter, ...]:
    return (
        D.FulfillmentCenter("koramangala", "QuickShop Koramangala", KORAMANGALA, 10.0),
        D.FulfillmentCenter("hsr", "QuickShop HSR Layout", HSR, 10.0),
        D.FulfillmentCenter("kondapur", "QuickShop Kondapur", KONDAPUR, 10.0),
    )


@pytest.fixture
def zones(centers) -> D.ZoneIndex:
    return D.ZoneIndex(centers)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def resolver(zones, clock) -> D.EligibilityResolver:
    return D.EligibilityResolver(zones, clock=clock)


# ═══════════════════════════════════════════════════════════════════════════════
# Checkout
# ═══════════════════════════════════════════════════════════════════════════════

FIXED_NOW = datetime(2026, 1, 15, 10, 30, tzinfo=UTC)


@pytest.fixture
def home() -> C.Address:
    return C.Address(
        id="addr-home",
        title="Home",
        full_address="12 Park Street, Koramangala, Bengaluru",
        is_default=True,
        coordinate=KORAMANGALA,
    )


@pytest.fixture
def sink() -> C.MemoryOrderSink:
    return C.MemoryOrderSink()


@pytest.fixture
def session() -> C.StaticSession:
    return C.StaticSession("user-1")


@pytest.fixture
def orchestrator(ledger, sink, session, home, resolver) -> C.CheckoutOrchestrator:
    return C.CheckoutOrchestrator(
        ledger,
        sink,
        session,
        address_book=C.MemoryAddressBook([home]),
        resolver=resolver,
        order_ids=sequential_ids("OD"),
        now=lambda: FIXED_NOW,
    )
