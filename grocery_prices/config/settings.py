# grocery_prices/config/settings.py

"""Central configuration for the grocery_prices tracker."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


def _env_path(name: str, default: Path) -> Path:
    """Return a path from the environment, falling back to *default*."""
    value = os.getenv(name)
    return Path(value) if value else default


class Settings:
    """Central configuration for the grocery_prices tracker."""

    # --- Fetching ---
    REQUEST_TIMEOUT: int = 30           # Seconds before a request times out
    MAX_RETRIES: int = 10               # Attempts per logical request
    MAX_BACKOFF: float = 120.0          # Ceiling for exponential backoff

    # --- Conversion ---
    CONVERSION_FAILURE_THRESHOLD: float = 0.05
    WOOLIES_MIN_DERIVED_QUANTITY: float = 10.0
    WOOLIES_PAGE_SIZE: int = 36
    COLES_STORE_ID: str = "0584"

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json, text/plain, */*",
        "Accept-Language": "en-AU,en;q=0.9",
        "sec-ch-ua": (
            '"Google Chrome";v="131", '
            '"Chromium";v="131", '
            '"Not_A Brand";v="24"'
        ),
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    OUTPUT_DIR: Path = _env_path("GROCERY_OUTPUT_DIR", BASE_DIR / "output")
    DATA_DIR: Path = _env_path(
        "GROCERY_DATA_DIR", BASE_DIR / "static" / "data"
    )
    CACHE_DIR: Path = _env_path("GROCERY_CACHE_DIR", BASE_DIR / "cache")
    LOGS_DIR: Path = _env_path("GROCERY_LOGS_DIR", BASE_DIR / "logs")

    HISTORY_FILENAME: str = "latest-canonical.json.gz"

    # --- Stores ---
    AVAILABLE_STORES: list[dict[str, str]] = [
        {"id": "coles", "label": "Coles"},
        {"id": "woolies", "label": "Woolworths"},
    ]
