# src/config/settings.py

"""Central configuration for the storefront."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the storefront."""

    # --- Catalog fetching ---
    REQUEST_DELAY: float = 1.0          # Base backoff between retries
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    MAX_RETRIES: int = 3                # Retry count on transient failures
    CATALOG_LOAD_TIMEOUT: float = 45.0  # Upper bound for a full catalog load

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Cart ---
    CART_STORAGE_KEY: str = "cart"
    FILTER_ALL: str = "all"

    # --- Money ---
    CURRENCY: str = "usd"               # Sent to the payment processor
    CURRENCY_SYMBOL: str = "€"          # Used for display only

    # --- Payments ---
    STRIPE_SECRET_KEY: str = os.getenv("STRIPE_SECRET_KEY", "")
    STRIPE_WEBHOOK_SECRET: str = os.getenv("STRIPE_WEBHOOK_SECRET", "")

    # --- Server ---
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "4242"))

    # --- Health ---
    HEALTH_TIMEOUT: int = 10            # Seconds per source probe
    HEALTH_SLOW_MS: float = 5000.0

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = Path(
        os.getenv("STOREFRONT_DATA_DIR", str(BASE_DIR / "data"))
    )
    STORAGE_PATH: Path = DATA_DIR / "local_storage.json"
    CATALOG_DB_PATH: Path = DATA_DIR / "catalog.db"
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Sources (order here is the catalog order) ---
    CATALOG_SOURCES: list[dict[str, str]] = [
        {
            "id": "fakestoreapi",
            "label": "Store 1",
            "url": "https://fakestoreapi.com/products",
            "loader": "src.sources.fakestore_source.FakeStoreSource",
        },
        {
            "id": "dummyjson",
            "label": "Store 2",
            "url": "https://dummyjson.com/products",
            "loader": "src.sources.dummyjson_source.DummyJsonSource",
        },
    ]

    @classmethod
    def source_ids(cls) -> list[str]:
        """Return the registered source ids in catalog order."""
        return [s["id"] for s in cls.CATALOG_SOURCES]
