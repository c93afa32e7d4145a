# grocery_prices/errors.py

"""Exception hierarchy shared by the fetch, conversion and storage layers."""

from datetime import date
from typing import Any


class GroceryPricesError(Exception):
    """Base class for every error raised by grocery_prices."""


# ── Fetching ─────────────────────────────────────────────


class FetchError(GroceryPricesError):
    """A network fetch could not be completed."""


class TransportError(FetchError):
    """A single HTTP attempt failed (non-200 status or transport error)."""

    def __init__(
        self,
        url: str,
        status: int | None = None,
        message: str = "",
    ) -> None:
        self.url = url
        self.status = status
        self.message = message
        detail = f"HTTP {status}" if status is not None else message
        super().__init__(f"Request to {url} failed: {detail}")


class RetryExhaustedError(FetchError):
    """All attempts of a retried request failed."""

    def __init__(self, attempts: int, last_error: Exception) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Failed request after {attempts} attempts: {last_error}"
        )


class CategoryFetchError(FetchError):
    """A category page could not be fetched or decoded."""

    def __init__(self, store: str, category_id: str, page: int) -> None:
        self.store = store
        self.category_id = category_id
        self.page = page
        super().__init__(
            f"Failed to load page {page} of {store} "
            f"category '{category_id}'"
        )


class SetupError(FetchError):
    """The retailer bootstrap page did not contain the API configuration."""


# ── Conversion ───────────────────────────────────────────


class ConversionError(GroceryPricesError):
    """A raw retailer item could not be converted into a snapshot."""


class BatchConversionError(ConversionError):
    """Too many items of one store/day batch failed to convert."""

    def __init__(self, store: str, day: date, metrics: Any) -> None:
        self.store = store
        self.day = day
        self.metrics = metrics
        super().__init__(
            f"Error threshold for conversion of {store}/{day.isoformat()} "
            f"exceeded: {metrics}"
        )


# ── Storage ──────────────────────────────────────────────


class StorageError(GroceryPricesError):
    """A persisted history or archive is missing or corrupt."""
