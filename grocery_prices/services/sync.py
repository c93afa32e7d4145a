# grocery_prices/services/sync.py

"""Daily catalogue capture for one store."""

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from grocery_prices.models.product import Store
from grocery_prices.scrapers.registry import SCRAPERS
from grocery_prices.scrapers.retry_policy import RetryPolicy
from grocery_prices.storage.disk_cache import DiskCache, cache_dir_for
from grocery_prices.storage.file_manager import FileManager

logger = logging.getLogger("grocery_prices.sync")


@dataclass
class SyncResult:
    """Outcome of one store's sync."""

    store: Store
    day: date
    path: Path
    skipped: bool = False
    categories: int = 0
    products: int = 0


def save_path(store: Store, day: date) -> str:
    """Archive path relative to the output directory (``coles/2024-01-02.json.gz``)."""
    return f"{store.value}/{day.isoformat()}.json.gz"


def do_sync(
    store: Store,
    output_dir: Path,
    cache_root: Path,
    day: date | None = None,
    quick: bool = False,
    skip_existing: bool = False,
    retry_policy: RetryPolicy | None = None,
) -> SyncResult:
    """Fetch *store*'s catalogue for *day* and archive the raw capture.

    Pages are cached under ``<cache_root>/<store>/<day>/`` so a failed
    run can be resumed the same day; the cache is removed only after the
    archive has been written.
    """
    day = day or date.today()
    file_manager = FileManager(output_dir)
    archive = file_manager.snapshot_path(store, day)

    if skip_existing and archive.exists():
        logger.info("Archive %s already exists, skipping sync", archive)
        return SyncResult(store=store, day=day, path=archive, skipped=True)

    cache_dir = cache_dir_for(cache_root, store.value, day.isoformat())
    scraper = SCRAPERS[store](DiskCache(cache_dir), retry_policy)
    capture = scraper.fetch(quick=quick)

    path = file_manager.save_daily_snapshot_archive(capture, store, day)
    file_manager.remove_cache(cache_dir)
    return SyncResult(
        store=store,
        day=day,
        path=path,
        categories=len(capture),
        products=sum(len(c["products"]) for c in capture),
    )
