# grocery_prices/scrapers/registry.py

"""Select the scraper class for a store."""

from grocery_prices.models.product import Store
from grocery_prices.scrapers.base_scraper import BaseStoreScraper
from grocery_prices.scrapers.coles_scraper import ColesScraper
from grocery_prices.scrapers.woolies_scraper import WooliesScraper

SCRAPERS: dict[Store, type[BaseStoreScraper]] = {
    Store.COLES: ColesScraper,
    Store.WOOLIES: WooliesScraper,
}
