# grocery_prices/services/analysis.py

"""Conversion and merge pipeline driven by the ``analysis`` command."""

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from grocery_prices.adapters.registry import get_adapter
from grocery_prices.models.price_snapshot import ProductSnapshot
from grocery_prices.models.product import ProductHistory, Store
from grocery_prices.services.price_history_merger import (
    MergeResult,
    PriceHistoryMerger,
)
from grocery_prices.services.snapshot_converter import (
    SnapshotConverter,
    iter_raw_items,
)
from grocery_prices.storage.file_manager import FileManager

logger = logging.getLogger("grocery_prices.analysis")


@dataclass
class AnalysisResult:
    """Summary of one analysis run."""

    days: list[date] = field(default_factory=lambda: list[date]())
    products: int = 0
    merges: list[MergeResult] = field(
        default_factory=lambda: list[MergeResult]()
    )


def _selected_stores(store: Store | None) -> list[Store]:
    return [store] if store is not None else list(Store)


def load_daily_snapshot(
    file_manager: FileManager, day: date, stores: list[Store],
) -> list[ProductSnapshot]:
    """Convert the raw archives of *stores* on *day* into snapshots.

    Raises:
        StorageError: if an archive is missing or corrupt.
        BatchConversionError: if a store's batch exceeds the failure
            threshold.
    """
    snapshots: list[ProductSnapshot] = []
    for store in stores:
        capture = file_manager.load_daily_snapshot_archive(store, day)
        converter = SnapshotConverter(get_adapter(store))
        snapshots.extend(converter.convert(iter_raw_items(capture), day))
    logger.debug("Loaded %d products for %s", len(snapshots), day)
    return snapshots


def _rebuild_base(
    file_manager: FileManager, store: Store | None,
) -> list[ProductHistory]:
    """Starting set for a rebuild: other stores' records, when filtered."""
    if store is None or not file_manager.history_path.exists():
        return []
    return [p for p in file_manager.load_history() if p.store != store]


def _merge_day(
    history: list[ProductHistory],
    file_manager: FileManager,
    day: date,
    stores: list[Store],
    store_filter: Store | None,
) -> MergeResult:
    snapshots = load_daily_snapshot(file_manager, day, stores)
    return PriceHistoryMerger.merge(history, snapshots, store_filter)


def do_analysis(
    day: date | None,
    store: Store | None,
    compress: bool,
    history: bool,
    output_dir: Path,
    data_dir: Path,
) -> AnalysisResult:
    """Merge a day's captures (or replay all of them) into the history.

    In day mode the existing history must be present.  In history mode
    the history is rebuilt from an empty set by replaying every archived
    day in ascending order.  The canonical file is written once, after
    the whole merge has succeeded.
    """
    file_manager = FileManager(output_dir)
    stores = _selected_stores(store)
    result = AnalysisResult()

    if history:
        products = _rebuild_base(file_manager, store)
        days_by_store = {s: set(file_manager.available_days(s)) for s in stores}
        all_days = sorted(set().union(*days_by_store.values()))
        logger.info("Rebuilding history from %d days", len(all_days))
        for replay_day in all_days:
            day_stores = [s for s in stores if replay_day in days_by_store[s]]
            merge = _merge_day(
                products, file_manager, replay_day, day_stores, store
            )
            products = merge.products
            result.merges.append(merge)
            result.days.append(replay_day)
    else:
        day = day or date.today()
        previous = file_manager.load_history()
        merge = _merge_day(previous, file_manager, day, stores, store)
        products = merge.products
        result.merges.append(merge)
        result.days.append(day)

    file_manager.save_history(products)
    file_manager.save_to_site(products, data_dir, compress)
    result.products = len(products)
    return result
