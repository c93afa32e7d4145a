# grocery_prices/adapters/registry.py

"""Select the adapter for a store."""

from grocery_prices.adapters.base_adapter import StoreAdapter
from grocery_prices.adapters.coles_adapter import ColesAdapter
from grocery_prices.adapters.woolies_adapter import WooliesAdapter
from grocery_prices.models.product import Store

_ADAPTERS: dict[Store, type[StoreAdapter]] = {
    Store.COLES: ColesAdapter,
    Store.WOOLIES: WooliesAdapter,
}


def get_adapter(store: Store) -> StoreAdapter:
    """Return a fresh adapter instance for *store*."""
    return _ADAPTERS[store]()
