# tests/test_sync.py

"""Tests for the daily sync pipeline."""

import tempfile
import unittest
from datetime import date
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

from grocery_prices.errors import CategoryFetchError
from grocery_prices.models.product import Store
from grocery_prices.scrapers.retry_policy import RetryPolicy
from grocery_prices.services.sync import do_sync, save_path
from grocery_prices.storage.file_manager import FileManager

FIXTURES_DIR = Path(__file__).parent / "fixtures"
DAY = date(2024, 1, 2)


def _response(text: str = "", status: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    return resp


def _woolies_session() -> MagicMock:
    session = MagicMock()

    def get(url: str, **_: Any) -> MagicMock:
        if url.endswith("PiesCategoriesWithSpecials"):
            return _response(
                (FIXTURES_DIR / "woolies_categories.json").read_text(
                    encoding="utf-8"
                )
            )
        return _response("<html></html>")

    session.get.side_effect = get
    session.post.return_value = _response(
        (FIXTURES_DIR / "woolies_page_1.json").read_text(encoding="utf-8")
    )
    return session


class TestSync(unittest.TestCase):
    """do_sync archive and cache handling."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        root = Path(self._tmp.name)
        self.output_dir = root / "output"
        self.cache_root = root / "cache"

    def test_save_path(self) -> None:
        """Archive paths are relative to the output directory."""
        self.assertEqual(
            save_path(Store.COLES, DAY), "coles/2024-01-02.json.gz"
        )

    @patch("grocery_prices.scrapers.base_scraper.curl_requests.Session")
    def test_sync_writes_archive_and_clears_cache(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """A successful sync archives the capture and drops the cache."""
        mock_session_cls.return_value = _woolies_session()

        result = do_sync(
            Store.WOOLIES, self.output_dir, self.cache_root, day=DAY
        )

        self.assertFalse(result.skipped)
        self.assertEqual(result.categories, 1)
        self.assertEqual(result.products, 2)
        self.assertEqual(
            result.path, self.output_dir / save_path(Store.WOOLIES, DAY)
        )
        capture = FileManager(self.output_dir).load_daily_snapshot_archive(
            Store.WOOLIES, DAY
        )
        self.assertEqual(len(capture[0]["products"]), 2)
        self.assertFalse(
            (self.cache_root / "woolies" / "2024-01-02").exists()
        )

    @patch("grocery_prices.scrapers.base_scraper.curl_requests.Session")
    def test_failed_sync_keeps_cache(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """A failed run leaves the cache for the next attempt."""
        session = _woolies_session()
        session.post.return_value = _response(status=500)
        mock_session_cls.return_value = session

        with self.assertRaises(CategoryFetchError):
            do_sync(
                Store.WOOLIES,
                self.output_dir,
                self.cache_root,
                day=DAY,
                retry_policy=RetryPolicy(max_attempts=1),
            )

        cache_dir = self.cache_root / "woolies" / "2024-01-02"
        self.assertTrue((cache_dir / "categories.json").exists())
        self.assertFalse(
            FileManager(self.output_dir).snapshot_path(
                Store.WOOLIES, DAY
            ).exists()
        )

    @patch("grocery_prices.scrapers.base_scraper.curl_requests.Session")
    def test_skip_existing(self, mock_session_cls: MagicMock) -> None:
        """An existing archive short-circuits the sync."""
        FileManager(self.output_dir).save_daily_snapshot_archive(
            [], Store.WOOLIES, DAY
        )
        result = do_sync(
            Store.WOOLIES,
            self.output_dir,
            self.cache_root,
            day=DAY,
            skip_existing=True,
        )
        self.assertTrue(result.skipped)
        mock_session_cls.assert_not_called()
