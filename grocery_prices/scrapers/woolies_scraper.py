# grocery_prices/scrapers/woolies_scraper.py

"""Scraper for woolworths.com.au using their internal browse API."""

import json
from typing import Any

from grocery_prices.models.product import Store
from grocery_prices.scrapers.base_scraper import BaseStoreScraper


def is_filtered_category(node_id: str, description: str) -> bool:
    """Specials, front-of-store and liquor groupings are not fetched."""
    if node_id == "specialsgroup":
        return True
    if description == "Front of Store":
        return True
    return description == "Beer, Wine & Spirits" or node_id == "1_8E4DA6F"


class WooliesScraper(BaseStoreScraper):
    """Scraper for Woolworths.

    The browse endpoint only answers sessions that already hold the
    site cookies, so :meth:`prepare` loads the home page first.
    """

    store = Store.WOOLIES
    BASE_URL = "https://www.woolworths.com.au"
    BROWSE_PATH = "/shop/browse/fruit-veg"

    def _get_referer(self) -> str:
        return f"{self.BASE_URL}{self.BROWSE_PATH}"

    def prepare(self) -> None:
        # Cookie priming only; the body is not needed
        self.get_setup_data()

    def get_setup_data(self) -> str:
        return self._get_page(self.BASE_URL)

    def get_category_list(self) -> str:
        return self._fetch_get(
            f"{self.BASE_URL}/apis/ui/PiesCategoriesWithSpecials"
        )

    def get_category_page(self, category_id: str, page: int) -> str:
        return self._fetch_post(
            f"{self.BASE_URL}/apis/ui/browse/category",
            self._browse_payload(category_id, page),
        )

    def _browse_payload(self, category_id: str, page: int) -> dict[str, Any]:
        """Build the JSON body for one browse page."""
        return {
            "categoryId": category_id,
            "pageNumber": page,
            "pageSize": self.settings.WOOLIES_PAGE_SIZE,
            "sortType": "Name",
            "url": self.BROWSE_PATH,
            "location": self.BROWSE_PATH,
            "formatObject": '{"name":"Fruit & Veg"}',
            "isSpecial": False,
            "isBundle": False,
            "isMobile": False,
            "filters": [
                {"Items": [{"Term": "Woolworths"}], "Key": "SoldBy"},
            ],
            "token": "",
            "gpBoost": 0,
            "isHideUnavailableProducts": False,
            "enableAdReRanking": False,
            "groupEdmVariants": True,
            "categoryVersion": "v2",
        }

    def parse_categories(self, text: str) -> list[str]:
        data: dict[str, Any] = json.loads(text)
        return [
            str(c["NodeId"])
            for c in data["Categories"]
            if not is_filtered_category(
                str(c["NodeId"]), str(c["Description"])
            )
        ]
