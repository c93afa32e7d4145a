# grocery_prices/storage/disk_cache.py

"""File-backed memoisation of fetched pages for one store and day."""

import logging
from collections.abc import Callable
from pathlib import Path

logger = logging.getLogger("grocery_prices.cache")


class DiskCache:
    """Cache that stores each fetched response as a file under ``root``.

    There is no expiry: callers give every calendar day its own root
    directory (see :func:`cache_dir_for`) and delete it after a
    successful run.  Not safe for concurrent use.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def path_for(self, key: str) -> Path:
        """Return the file path backing *key*."""
        return self.root / key

    def get_or_fetch(self, key: str, fetch: Callable[[], str]) -> str:
        """Return the cached content for *key*, fetching it on a miss.

        I/O errors propagate unchanged; they are not retried.
        """
        path = self.path_for(key)
        if path.exists():
            logger.debug("Cache hit for '%s'", key)
            return path.read_text(encoding="utf-8")

        logger.debug("Cache miss for '%s', loading from backend", key)
        content = fetch()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return content


def cache_dir_for(cache_root: Path, store: str, day_iso: str) -> Path:
    """Per-store, per-day cache directory: ``<root>/<store>/<YYYY-MM-DD>``."""
    return cache_root / store / day_iso
