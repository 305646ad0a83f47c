"""
Catalog: read-only item snapshots.

    from quickshop import catalog as Cat

    feed = Cat.CatalogFeed(items)
    feed.current.filter("milk", category="Dairy")
"""

from __future__ import annotations

from quickshop.catalog._types import CatalogItem
from quickshop.catalog._feed import CatalogView, CatalogFeed, RECENT_LIMIT

__all__ = (
    "CatalogItem",
    "CatalogView",
    "CatalogFeed",
    "RECENT_LIMIT",
)
