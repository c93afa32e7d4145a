# grocery_prices/services/snapshot_converter.py

"""Threshold-gated conversion of a raw capture into product snapshots."""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from grocery_prices.adapters.base_adapter import StoreAdapter
from grocery_prices.config.settings import Settings
from grocery_prices.errors import (
    BatchConversionError,
    ConversionError,
    StorageError,
)
from grocery_prices.models.price_snapshot import ProductSnapshot

logger = logging.getLogger("grocery_prices.conversion")


@dataclass(frozen=True)
class ConversionMetrics:
    """Success and failure counts of one conversion batch."""

    success: int = 0
    failure: int = 0

    @property
    def total(self) -> int:
        return self.success + self.failure

    @property
    def failure_rate(self) -> float:
        """Fraction of failed items; 0.0 for an empty batch."""
        if self.total == 0:
            return 0.0
        return self.failure / self.total

    def exceeds(self, threshold: float) -> bool:
        """True when the failure rate is strictly above *threshold*."""
        return self.failure_rate > threshold

    def __str__(self) -> str:
        return (
            f"Success: {self.success}, Fail Product: {self.failure}, "
            f"Failure rate: {self.failure_rate * 100:.2f}%"
        )


@dataclass
class ConversionResult:
    """Snapshots of a batch with the metrics that gate it."""

    snapshots: list[ProductSnapshot] = field(
        default_factory=lambda: list[ProductSnapshot]()
    )
    metrics: ConversionMetrics = field(default_factory=ConversionMetrics)
    filtered: int = 0


def iter_raw_items(capture: Any) -> Iterator[Any]:
    """Flatten a raw capture (``[{category, products}, ...]``) into items.

    Raises:
        StorageError: if the capture does not have the archive shape.
    """
    if not isinstance(capture, list):
        raise StorageError("Raw capture must be a list of categories")
    for category in capture:
        if not isinstance(category, dict) or not isinstance(
            category.get("products"), list
        ):
            raise StorageError(
                f"Malformed category entry in raw capture: {category!r:.80}"
            )
        yield from category["products"]


class SnapshotConverter:
    """Convert one store's raw items into snapshots for a capture date."""

    def __init__(
        self,
        adapter: StoreAdapter,
        threshold: float = Settings.CONVERSION_FAILURE_THRESHOLD,
    ) -> None:
        self.adapter = adapter
        self.threshold = threshold

    def convert_batch(
        self, raw_items: Iterable[Any], day: date,
    ) -> ConversionResult:
        """Convert every item, absorbing item-level failures into metrics.

        Filtered items (ads, empty tiles) are counted separately and never
        contribute to the failure rate.
        """
        snapshots: list[ProductSnapshot] = []
        success = failure = filtered = 0
        store = self.adapter.store

        for raw in raw_items:
            if self.adapter.is_filtered(raw):
                filtered += 1
                continue
            try:
                items = self.adapter.decode_item(raw)
            except ConversionError as exc:
                failure += 1
                logger.debug(
                    "[%s] Failed to decode raw item: %s", store, exc
                )
                continue
            for item in items:
                try:
                    snapshots.append(self.adapter.to_snapshot(item, day))
                except ConversionError as exc:
                    failure += 1
                    logger.debug(
                        "[%s] Failed to convert %r: %s", store, item, exc
                    )
                    continue
                success += 1

        return ConversionResult(
            snapshots=snapshots,
            metrics=ConversionMetrics(success=success, failure=failure),
            filtered=filtered,
        )

    def convert(
        self, raw_items: Iterable[Any], day: date,
    ) -> list[ProductSnapshot]:
        """Convert a batch, rejecting it when too many items fail.

        Raises:
            BatchConversionError: if the failure rate exceeds the
                threshold.
        """
        result = self.convert_batch(raw_items, day)
        store = self.adapter.store.value
        if result.metrics.exceeds(self.threshold):
            logger.error(
                "Conversion of %s/%s exceeds threshold of %s: %s",
                store,
                day.isoformat(),
                self.threshold,
                result.metrics,
            )
            raise BatchConversionError(store, day, result.metrics)

        logger.info(
            "Conversion of %s/%s succeeded: %s (%d filtered)",
            store,
            day.isoformat(),
            result.metrics,
            result.filtered,
        )
        return result.snapshots
