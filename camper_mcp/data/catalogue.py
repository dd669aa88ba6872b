"""Store singletons: one shared SQLite database for every component.

Tool modules import the accessors from here; tests swap the backend with
:func:`set_store`.
"""

from __future__ import annotations

from camper_mcp.config import Settings
from camper_mcp.data.listings import ListingStore
from camper_mcp.data.seo import SeoStore, seed_seo_defaults
from camper_mcp.data.store import RowStore, SqliteRowStore

_store: RowStore | None = None


def get_store() -> RowStore:
    """Return the active RowStore singleton, creating + seeding if needed."""
    global _store  # noqa: PLW0603
    if _store is None:
        store = SqliteRowStore(Settings.from_env().db_path)
        seed_seo_defaults(store)
        _store = store
    return _store


def set_store(store: RowStore | None) -> None:
    """Inject a store instance for testing."""
    global _store  # noqa: PLW0603
    _store = store


def get_listing_store() -> ListingStore:
    return ListingStore(get_store())


def get_seo_store() -> SeoStore:
    return SeoStore(get_store())
