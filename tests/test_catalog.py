"""Tests for catalog items, views and the feed."""

from decimal import Decimal

from quickshop.catalog import CatalogFeed, CatalogItem, CatalogView


class TestCatalogItem:
    def test_unit_price_prefers_discount(self, bread, milk):
        assert bread.unit_price == Decimal(35)
        assert milk.unit_price == Decimal(60)

    def test_discount_percentage(self, bread, milk):
        assert bread.discount_percentage == 12
        assert milk.discount_percentage is None

    def test_savings(self, bread):
        assert bread.savings == Decimal(5)

    def test_can_be_added(self, milk, chips, soap):
        assert milk.can_be_added
        assert not chips.can_be_added
        assert not soap.can_be_added


class TestCatalogView:
    def test_lookup(self, milk, bread):
        view = CatalogView.of([milk, bread])

        assert view.get("milk") is milk
        assert "bread" in view
        assert view.get("nope") is None
        assert len(view) == 2

    def test_duplicate_id_later_wins_in_place(self, milk, bread):
        newer = CatalogItem(id="milk", name="Toned Milk", price=50, stock_quantity=4)

        view = CatalogView.of([milk, bread, newer])

        assert [i.id for i in view.items] == ["milk", "bread"]
        assert view.get("milk").name == "Toned Milk"

    def test_featured_and_categories(self, milk, bread, chips):
        view = CatalogView.of([milk, bread, chips])

        assert view.featured == (milk,)
        assert view.categories == ("Dairy", "Bakery")

    def test_filter(self, milk, bread):
        view = CatalogView.of([milk, bread])

        assert view.filter("BREAD") == (bread,)
        assert view.filter("pouch") == (milk,)
        assert view.filter(category="Dairy") == (milk,)
        assert view.filter("bread", category="Dairy") == ()
        assert view.filter("  ") == (milk, bread)

    def test_recent(self):
        items = [CatalogItem(id=str(n), name=f"Item {n}", price=1) for n in range(8)]

        assert [i.id for i in CatalogView.of(items).recent()] == ["0", "1", "2", "3", "4"]


class TestCatalogFeed:
    def test_replace_bumps_version_and_notifies(self, milk, bread):
        feed = CatalogFeed([milk])
        seen: list[CatalogView] = []
        feed.subscribe(seen.append)

        view = feed.replace([bread])

        assert view.version == 1
        assert feed.current is view
        assert seen == [view]
        assert "milk" not in feed.current

    def test_feed_drives_cart_reconcile(self, ledger, milk):
        feed = CatalogFeed([milk])
        feed.subscribe(ledger.reconcile)
        ledger.add_item(milk, 4)

        feed.replace([CatalogItem(id="milk", name="Full Cream Milk", price=60, stock_quantity=1)])

        assert ledger.snapshot().quantity_of("milk") == 1
