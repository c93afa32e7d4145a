# tests/test_analysis.py

"""End-to-end tests for the analysis pipeline."""

import json
import tempfile
import unittest
from datetime import date
from pathlib import Path
from typing import Any

from grocery_prices.errors import BatchConversionError, StorageError
from grocery_prices.models.product import ProductHistory, Store
from grocery_prices.services.analysis import do_analysis
from grocery_prices.storage.file_manager import FileManager
from helpers import make_history

FIXTURES_DIR = Path(__file__).parent / "fixtures"
DAY = date(2024, 1, 2)


def _fixture_json(name: str) -> Any:
    return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))


class TestAnalysis(unittest.TestCase):
    """do_analysis in day and history modes."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        root = Path(self._tmp.name)
        self.output_dir = root / "output"
        self.data_dir = root / "data"
        self.fm = FileManager(self.output_dir)

    def _write_capture(self, day: date) -> None:
        capture = _fixture_json("coles_one_product_capture.json")
        self.fm.save_daily_snapshot_archive(
            capture, Store.COLES, day
        )

    def _write_history(self) -> None:
        rows = _fixture_json("canonical_one_product.json")
        self.fm.save_history(
            [ProductHistory.from_dict(r) for r in rows]
        )

    def test_price_change_is_recorded(self) -> None:
        """12.00 then 6.70 yields a two-point history, newest first."""
        self._write_history()
        self._write_capture(DAY)

        result = do_analysis(
            DAY, Store.COLES, False, False, self.output_dir, self.data_dir
        )

        self.assertEqual(result.products, 1)
        (product,) = self.fm.load_history()
        self.assertEqual(
            product.to_dict()["priceHistory"],
            [
                {"date": "2024-01-02", "price": 6.7},
                {"date": "2024-01-01", "price": 12.0},
            ],
        )
        site = json.loads(
            (self.data_dir / "latest-canonical.coles.compressed.json")
            .read_text(encoding="utf-8")
        )
        self.assertEqual(len(site), 1)

    def test_missing_history(self) -> None:
        """Day mode needs an existing history."""
        self._write_capture(DAY)
        with self.assertRaises(StorageError):
            do_analysis(
                DAY, Store.COLES, False, False,
                self.output_dir, self.data_dir,
            )

    def test_missing_archive(self) -> None:
        """Day mode needs the day's archive."""
        self._write_history()
        with self.assertRaises(StorageError):
            do_analysis(
                DAY, Store.COLES, False, False,
                self.output_dir, self.data_dir,
            )

    def test_failed_conversion_leaves_history(self) -> None:
        """A rejected batch does not touch the canonical file."""
        self._write_history()
        before = self.fm.history_path.read_bytes()
        self.fm.save_daily_snapshot_archive(
            [{"category": "x", "products": [{"_type": "PRODUCT"}]}],
            Store.COLES,
            DAY,
        )
        with self.assertRaises(BatchConversionError):
            do_analysis(
                DAY, Store.COLES, False, False,
                self.output_dir, self.data_dir,
            )
        self.assertEqual(self.fm.history_path.read_bytes(), before)

    def test_history_rebuild(self) -> None:
        """History mode replays every archived day from scratch."""
        self._write_capture(date(2024, 1, 1))
        self._write_capture(DAY)

        result = do_analysis(
            None, Store.COLES, True, True, self.output_dir, self.data_dir
        )

        self.assertEqual(result.days, [date(2024, 1, 1), DAY])
        (product,) = self.fm.load_history()
        self.assertEqual(len(product.price_history), 1)
        self.assertEqual(product.last_seen, DAY)
        self.assertTrue(
            (self.data_dir / "latest-canonical.coles.compressed.json.gz")
            .exists()
        )

    def test_history_rebuild_keeps_other_stores(self) -> None:
        """A filtered rebuild keeps the other store's records."""
        self.fm.save_history([make_history(9, store=Store.WOOLIES)])
        self._write_capture(DAY)

        do_analysis(
            None, Store.COLES, False, True, self.output_dir, self.data_dir
        )

        stores = sorted(p.store.value for p in self.fm.load_history())
        self.assertEqual(stores, ["coles", "woolies"])
