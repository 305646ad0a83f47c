"""
Catalog feed: full-replacement snapshots of the live item list.

Every update replaces the whole list; featured and filtered views are
derived again from scratch, never patched.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import structlog

from quickshop._listeners import Listener, Listeners, Unsubscribe
from quickshop.catalog._types import CatalogItem

logger = structlog.get_logger(__name__)

RECENT_LIMIT = 5

# ═══════════════════════════════════════════════════════════════════════════════
# CatalogView: one immutable snapshot
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CatalogView:
    """Snapshot of the catalog with its derived views."""

    items: tuple[CatalogItem, ...] = ()
    version: int = 0
    _by_id: Mapping[str, CatalogItem] = field(
        default_factory=lambda: MappingProxyType({}), repr=False, compare=False
    )

    @classmethod
    def of(cls, items: Iterable[CatalogItem], version: int = 0) -> CatalogView:
        by_id: dict[str, CatalogItem] = {}
        ordered: list[CatalogItem] = []
        for item in items:
            if item.id in by_id:
                # later duplicate wins, position of the first is kept
                ordered[ordered.index(by_id[item.id])] = item
            else:
                ordered.append(item)
            by_id[item.id] = item
        return cls(tuple(ordered), version, MappingProxyType(by_id))

    def get(self, item_id: str) -> CatalogItem | None:
        return self._by_id.get(item_id)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._by_id

    def __len__(self) -> int:
        return len(self.items)

    @property
    def featured(self) -> tuple[CatalogItem, ...]:
        return tuple(i for i in self.items if i.is_featured)

    @property
    def categories(self) -> tuple[str, ...]:
        seen: dict[str, None] = {}
        for item in self.items:
            if item.category:
                seen.setdefault(item.category, None)
        return tuple(seen)

    def recent(self, limit: int = RECENT_LIMIT) -> tuple[CatalogItem, ...]:
        return self.items[:limit]

    def filter(
        self,
        search_text: str = "",
        category: str | None = None,
    ) -> tuple[CatalogItem, ...]:
        """
        Items in category (exact match) whose name, description or
        category contains search_text (case-insensitive).
        """
        matches = self.items
        if category is not None:
            matches = tuple(i for i in matches if i.category == category)
        needle = search_text.strip().casefold()
        if needle:
            matches = tuple(
                i
                for i in matches
                if needle in i.name.casefold()
                or needle in i.description.casefold()
                or needle in i.category.casefold()
            )
        return matches


# ═══════════════════════════════════════════════════════════════════════════════
# CatalogFeed: live holder
# ═══════════════════════════════════════════════════════════════════════════════


class CatalogFeed:
    """
    Holds the current CatalogView and fans out updates.

    Example:
        feed = CatalogFeed()
        feed.subscribe(ledger.reconcile)
        feed.replace(items_from_store)
    """

    def __init__(self, items: Iterable[CatalogItem] = ()) -> None:
        self._view = CatalogView.of(items)
        self._listeners: Listeners[CatalogView] = Listeners("catalog")

    @property
    def current(self) -> CatalogView:
        return self._view

    def replace(self, items: Iterable[CatalogItem]) -> CatalogView:
        view = CatalogView.of(items, version=self._view.version + 1)
        self._view = view
        logger.info(
            "catalog_replaced",
            version=view.version,
            items=len(view),
            featured=len(view.featured),
        )
        self._listeners.notify(view)
        return view

    def subscribe(self, listener: Listener[CatalogView]) -> Unsubscribe:
        return self._listeners.subscribe(listener)


__all__ = ("CatalogView", "CatalogFeed", "RECENT_LIMIT")
