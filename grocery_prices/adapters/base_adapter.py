# grocery_prices/adapters/base_adapter.py

"""Capability interface every retailer adapter implements."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any

from grocery_prices.models.price_snapshot import ProductSnapshot
from grocery_prices.models.product import Store


class StoreAdapter(ABC):
    """Translate one retailer's raw JSON into canonical snapshots.

    Raw values flow through three steps: :meth:`is_filtered` drops
    expected noise (ads, empty tiles), :meth:`decode_item` turns a raw
    value into typed items, and :meth:`to_snapshot` maps each typed item
    onto the canonical model.  The last two raise ``ConversionError``.
    """

    store: Store

    @abstractmethod
    def decode_category(self, page_text: str) -> tuple[list[Any], int]:
        """Return the raw items of a category page and its reported total."""
        ...

    @abstractmethod
    def is_filtered(self, raw: Any) -> bool:
        """Return True for raw values that are silently skipped."""
        ...

    @abstractmethod
    def decode_item(self, raw: Any) -> list[Any]:
        """Decode one raw value into retailer-specific typed items."""
        ...

    @abstractmethod
    def to_snapshot(self, item: Any, day: date) -> ProductSnapshot:
        """Map one typed item onto a snapshot for the capture *day*."""
        ...
