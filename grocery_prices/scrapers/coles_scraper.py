# grocery_prices/scrapers/coles_scraper.py

"""Scraper for coles.com.au via its Next.js data routes."""

import json
from typing import Any

from bs4 import BeautifulSoup

from grocery_prices.errors import SetupError
from grocery_prices.models.product import Store
from grocery_prices.scrapers.base_scraper import BaseStoreScraper

# Promotional groupings that duplicate regular categories
SKIP_CATEGORIES: frozenset[str] = frozenset({"down-down", "back-to-school"})


def parse_setup_data(html: str) -> tuple[str, str]:
    """Extract ``(api_key, build_id)`` from the Coles home page.

    Raises:
        SetupError: if the ``__NEXT_DATA__`` script is missing or does
            not carry the subscription key and build id.
    """
    soup = BeautifulSoup(html, "lxml")
    script = soup.select_one("script#__NEXT_DATA__")
    if script is None:
        raise SetupError("couldn't find __NEXT_DATA__ script in HTML")
    try:
        next_data: dict[str, Any] = json.loads(script.get_text())
        api_key = str(
            next_data["runtimeConfig"]["BFF_API_SUBSCRIPTION_KEY"]
        )
        build_id = str(next_data["buildId"])
    except (ValueError, KeyError, TypeError) as exc:
        raise SetupError(f"Invalid __NEXT_DATA__ payload: {exc!r}") from exc
    return api_key, build_id


class ColesScraper(BaseStoreScraper):
    """Scraper for Coles.

    Category pages are served from ``/_next/data/<buildId>/``, so the
    build id and the BFF subscription key are scraped from the home page
    before any category call.
    """

    store = Store.COLES
    BASE_URL = "https://www.coles.com.au"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.version: str | None = None

    def _get_referer(self) -> str:
        return self.BASE_URL

    def prepare(self) -> None:
        html = self.cache.get_or_fetch("index.html", self.get_setup_data)
        api_key, version = parse_setup_data(html)
        self.headers["ocp-apim-subscription-key"] = api_key
        self.version = version
        self.logger.info("[coles] Using site version %s", version)

    def get_setup_data(self) -> str:
        return self._get_page(self.BASE_URL)

    def get_category_list(self) -> str:
        return self._fetch_get(
            f"{self.BASE_URL}/api/bff/products/categories"
            f"?storeId={self.settings.COLES_STORE_ID}"
        )

    def get_category_page(self, category_id: str, page: int) -> str:
        if self.version is None:
            raise SetupError("Must load setup data before category pages")
        return self._fetch_get(
            f"{self.BASE_URL}/_next/data/{self.version}/en/browse/"
            f"{category_id}.json?page={page}&slug={category_id}"
        )

    def parse_categories(self, text: str) -> list[str]:
        data: dict[str, Any] = json.loads(text)
        return [
            str(group["seoToken"])
            for group in data["catalogGroupView"]
            if group["seoToken"] not in SKIP_CATEGORIES
        ]
