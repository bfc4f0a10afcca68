# sharebox/config/settings.py

"""Central configuration for the ShareBox catalog."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the ShareBox catalog."""

    # --- Persistence ---
    STORAGE_PREFIX: str = "beusharebox"  # Key prefix in the kv store
    EXPORT_FILE_PREFIX: str = "beusharebox-export"

    # --- Defaults ---
    DEFAULT_USER_NAME: str = "Guest User"
    DEFAULT_TITLE: str = "Untitled"
    DEFAULT_CATEGORY: str = "Other"
    DEFAULT_THEME: str = "light"
    THEMES: list[str] = ["light", "dark"]

    # --- Filtering ---
    ALL_CATEGORIES: str = "all"
    DEFAULT_SORT: str = "newest"
    SORT_OPTIONS: list[dict[str, str]] = [
        {"id": "newest", "label": "Newest"},
        {"id": "price-low", "label": "Price: Low to High"},
        {"id": "price-high", "label": "Price: High to Low"},
        {"id": "most-liked", "label": "Most Liked"},
    ]

    # Categories offered by the add-product form
    CATEGORIES: list[str] = [
        "Electronics",
        "Clothing",
        "Books",
        "Home",
        "Sports",
        "Other",
    ]

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = Path(
        os.getenv("SHAREBOX_DATA_DIR", str(BASE_DIR / "data"))
    )
    DB_PATH: Path = DATA_DIR / "sharebox.db"
    EXPORTS_DIR: Path = BASE_DIR / "exports"
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Logging ---
    # Level for the stderr handler; the run log always records DEBUG
    CONSOLE_LOG_LEVEL: str = os.getenv("SHAREBOX_LOG_LEVEL", "WARNING").upper()

    @classmethod
    def storage_key(cls, name: str) -> str:
        """Build a namespaced storage key, e.g. ``beusharebox_products``."""
        return f"{cls.STORAGE_PREFIX}_{name}"
