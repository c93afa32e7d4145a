# grocery_prices/storage/file_manager.py

"""Handles reading and writing raw captures and canonical history on disk."""

import gzip
import json
import logging
import os
import re
import shutil
from datetime import date
from pathlib import Path
from typing import Any, cast

from grocery_prices.config.settings import Settings
from grocery_prices.errors import StorageError
from grocery_prices.models.product import ProductHistory, Store

logger = logging.getLogger("grocery_prices.storage")

# Archive filename pattern: {YYYY-MM-DD}.json.gz
_ARCHIVE_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})\.json\.gz$")


class FileManager:
    """Handles raw daily archives and the canonical history file.

    Layout under ``output_dir``::

        latest-canonical.json.gz
        <store>/<YYYY-MM-DD>.json.gz
    """

    def __init__(self, output_dir: Path | None = None) -> None:
        self.output_dir: Path = output_dir or Settings.OUTPUT_DIR
        logger.debug("FileManager initialised, output_dir=%s", self.output_dir)

    @property
    def history_path(self) -> Path:
        return self.output_dir / Settings.HISTORY_FILENAME

    # ── Canonical history ────────────────────────────────

    def load_history(self) -> list[ProductHistory]:
        """Load the canonical history.

        Raises:
            StorageError: if the file is absent or cannot be decoded.
        """
        path = self.history_path
        try:
            with gzip.open(path, "rt", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as exc:
            raise StorageError(f"Failed to open history file {path}") from exc
        except (OSError, ValueError) as exc:
            raise StorageError(f"Failed to load history from {path}") from exc

        if not isinstance(data, list):
            raise StorageError(f"History in {path} is not a list")
        rows = cast(list[dict[str, object]], data)
        products = [ProductHistory.from_dict(row) for row in rows]
        logger.debug("Loaded %d products from history", len(products))
        return products

    def save_history(self, products: list[ProductHistory]) -> Path:
        """Write the canonical history, replacing the old file atomically."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.history_path
        tmp_path = path.with_name(path.name + ".tmp")
        data = [p.to_dict() for p in products]
        with gzip.open(tmp_path, "wt", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        os.replace(tmp_path, path)
        logger.info("Saved %d products to %s", len(products), path)
        return path

    # ── Raw daily archives ───────────────────────────────

    def snapshot_path(self, store: Store, day: date) -> Path:
        """Path of the raw archive for *store* on *day*."""
        return self.output_dir / store.value / f"{day.isoformat()}.json.gz"

    def save_daily_snapshot_archive(
        self, raw_capture: list[dict[str, Any]], store: Store, day: date,
    ) -> Path:
        """Write one day's raw capture as a gzip-compressed JSON file."""
        path = self.snapshot_path(store, day)
        path.parent.mkdir(parents=True, exist_ok=True)
        with gzip.open(path, "wt", encoding="utf-8") as f:
            json.dump(raw_capture, f, ensure_ascii=False)
        logger.info(
            "Saved raw capture of %d categories to %s",
            len(raw_capture),
            path,
        )
        return path

    def load_daily_snapshot_archive(self, store: Store, day: date) -> Any:
        """Load the raw capture of *store* on *day*.

        Raises:
            StorageError: if the archive is absent or cannot be decoded.
        """
        path = self.snapshot_path(store, day)
        logger.debug("Loading %s", path)
        try:
            with gzip.open(path, "rt", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError as exc:
            raise StorageError(
                f"Failed to open daily snapshot {path}"
            ) from exc
        except (OSError, ValueError) as exc:
            raise StorageError(
                f"Failed to decode daily snapshot {path}"
            ) from exc

    def available_days(self, store: Store) -> list[date]:
        """Dates with a raw archive for *store*, oldest first."""
        store_dir = self.output_dir / store.value
        if not store_dir.exists():
            return []
        days: list[date] = []
        for path in store_dir.iterdir():
            match = _ARCHIVE_RE.match(path.name)
            if match:
                days.append(date.fromisoformat(match.group(1)))
        return sorted(days)

    # ── Public output ────────────────────────────────────

    def save_to_site(
        self,
        products: list[ProductHistory],
        data_dir: Path,
        compress: bool = False,
    ) -> list[Path]:
        """Write one public JSON file per store into *data_dir*."""
        data_dir.mkdir(parents=True, exist_ok=True)
        suffix = ".gz" if compress else ""
        written: list[Path] = []

        for store in Store:
            path = data_dir / (
                f"latest-canonical.{store.value}.compressed.json{suffix}"
            )
            data = [p.to_dict() for p in products if p.store == store]
            if compress:
                with gzip.open(path, "wt", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False)
            else:
                with open(path, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False)
            logger.info(
                "Exported %d %s products to %s", len(data), store, path
            )
            written.append(path)
        return written

    # ── Cache lifecycle ──────────────────────────────────

    @staticmethod
    def remove_cache(cache_dir: Path) -> None:
        """Delete a per-day cache directory after a successful sync."""
        logger.info("Removing cache directory %s", cache_dir)
        shutil.rmtree(cache_dir)
