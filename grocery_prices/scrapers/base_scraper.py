# grocery_prices/scrapers/base_scraper.py

"""Abstract base class for all retailer catalogue scrapers."""

import logging
from abc import ABC, abstractmethod
from typing import Any

import cloudscraper  # type: ignore[import-untyped]
from curl_cffi import requests as curl_requests

from grocery_prices.adapters.registry import get_adapter
from grocery_prices.config.settings import Settings
from grocery_prices.errors import RetryExhaustedError, TransportError
from grocery_prices.models.product import Store
from grocery_prices.scrapers.category_iterator import (
    PaginatedCategoryIterator,
)
from grocery_prices.scrapers.retry_policy import RetryPolicy
from grocery_prices.storage.disk_cache import DiskCache

# Raw capture: one entry per category, in fetch order
RawCapture = list[dict[str, Any]]


class BaseStoreScraper(ABC):
    """Fetch a retailer's full catalogue, one category at a time.

    Every HTTP call runs through :class:`RetryPolicy`, and every
    category list and page goes through the per-day :class:`DiskCache`,
    so an interrupted sync resumes without refetching.
    """

    store: Store
    BASE_URL: str

    def __init__(
        self,
        cache: DiskCache,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self.logger = logging.getLogger(
            f"grocery_prices.{self.store.value}"
        )
        self.settings = Settings()
        self.cache = cache
        self.retry_policy = retry_policy or RetryPolicy()
        self.adapter = get_adapter(self.store)
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self.headers: dict[str, str] = {
            **self.settings.DEFAULT_HEADERS,
            "Origin": self.BASE_URL,
            "Referer": self._get_referer(),
        }

    # ── Single attempts ──────────────────────────────────

    def _send(
        self,
        method: str,
        url: str,
        payload: dict[str, Any] | None = None,
    ) -> str:
        """Perform one HTTP attempt and return the body.

        Raises:
            TransportError: on a connection failure or non-200 status.
        """
        self.logger.debug("[%s] %s %s", self.store, method, url)
        try:
            if method == "POST":
                resp = self.session.post(
                    url,
                    headers=self.headers,
                    json=payload,
                    timeout=self.settings.REQUEST_TIMEOUT,
                )
            else:
                resp = self.session.get(
                    url,
                    headers=self.headers,
                    timeout=self.settings.REQUEST_TIMEOUT,
                )
        except Exception as exc:
            raise TransportError(url, message=str(exc)) from exc

        if resp.status_code != 200:
            raise TransportError(url, status=resp.status_code)
        return str(resp.text)

    # ── Retried requests ─────────────────────────────────

    def _fetch_get(self, url: str) -> str:
        """GET with exponential-backoff retries."""
        return self.retry_policy.execute(lambda: self._send("GET", url))

    def _fetch_post(self, url: str, payload: dict[str, Any]) -> str:
        """POST a JSON payload with exponential-backoff retries."""
        return self.retry_policy.execute(
            lambda: self._send("POST", url, payload)
        )

    def _get_page(self, url: str) -> str:
        """Fetch an HTML page, falling back to cloudscraper on failure."""
        try:
            return self._fetch_get(url)
        except RetryExhaustedError as exc:
            self.logger.info(
                "[%s] curl_cffi exhausted, falling back to cloudscraper",
                self.store,
            )
            try:
                _cs: Any = cloudscraper
                scraper: Any = _cs.create_scraper()
                fallback_resp: Any = scraper.get(
                    url,
                    headers=self.headers,
                    timeout=self.settings.REQUEST_TIMEOUT,
                )
            except Exception as fallback_exc:
                self.logger.error(
                    "[%s] cloudscraper fallback also failed: %s",
                    self.store,
                    fallback_exc,
                    exc_info=True,
                )
                raise exc from fallback_exc
            if fallback_resp.status_code != 200:
                raise exc
            return str(fallback_resp.text)

    # ── Catalogue walk ───────────────────────────────────

    def categories(self) -> list[str]:
        """Return the identifiers of every category worth fetching."""
        text = self.cache.get_or_fetch(
            "categories.json", self.get_category_list
        )
        category_ids = self.parse_categories(text)
        self.logger.info(
            "[%s] Loaded %d categories", self.store, len(category_ids)
        )
        return category_ids

    def iter_category(
        self, category_id: str,
    ) -> PaginatedCategoryIterator:
        """Return a fresh single-pass iterator over one category."""

        def fetch_page(page: int) -> str:
            return self.cache.get_or_fetch(
                f"categories/{category_id}/page_{page}.json",
                lambda: self.get_category_page(category_id, page),
            )

        return PaginatedCategoryIterator(
            self.store.value,
            category_id,
            fetch_page,
            self.adapter.decode_category,
        )

    def fetch(self, quick: bool = False) -> RawCapture:
        """Fetch the whole catalogue sequentially.

        With *quick*, only the first category is fetched (smoke runs).
        """
        self.logger.info("Starting fetch for %s", self.store)
        self.prepare()
        category_ids = self.categories()
        if quick:
            category_ids = category_ids[:1]

        capture: RawCapture = []
        for category_id in category_ids:
            products = list(self.iter_category(category_id))
            self.logger.info(
                "[%s] Category '%s': %d products",
                self.store,
                category_id,
                len(products),
            )
            capture.append({"category": category_id, "products": products})
        return capture

    # ── Retailer specifics ───────────────────────────────

    def prepare(self) -> None:
        """Bootstrap the session before category calls (optional)."""

    @abstractmethod
    def _get_referer(self) -> str:
        """Return the Referer header sent with every request."""
        ...

    @abstractmethod
    def get_setup_data(self) -> str:
        """Fetch the bootstrap page of the retailer site."""
        ...

    @abstractmethod
    def get_category_list(self) -> str:
        """Fetch the raw category list JSON."""
        ...

    @abstractmethod
    def get_category_page(self, category_id: str, page: int) -> str:
        """Fetch one raw page of a category."""
        ...

    @abstractmethod
    def parse_categories(self, text: str) -> list[str]:
        """Extract the wanted category identifiers from the list JSON."""
        ...
