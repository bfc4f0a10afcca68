# tests/test_settings.py

"""Tests for the Settings configuration class."""

import unittest
from pathlib import Path

from sharebox.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants."""

    def test_storage_keys(self) -> None:
        """Keys follow the ``<prefix>_<name>`` layout."""
        self.assertEqual(
            Settings.storage_key("products"), "beusharebox_products"
        )
        self.assertEqual(Settings.storage_key("user"), "beusharebox_user")
        self.assertEqual(
            Settings.storage_key("filters"), "beusharebox_filters"
        )

    def test_sort_options(self) -> None:
        ids = [s["id"] for s in Settings.SORT_OPTIONS]
        self.assertEqual(
            ids, ["newest", "price-low", "price-high", "most-liked"]
        )
        self.assertIn(Settings.DEFAULT_SORT, ids)

    def test_each_sort_option_has_label(self) -> None:
        for option in Settings.SORT_OPTIONS:
            with self.subTest(option=option.get("id", "?")):
                self.assertTrue(option.get("label"))

    def test_default_category_offered(self) -> None:
        self.assertIn(Settings.DEFAULT_CATEGORY, Settings.CATEGORIES)
        self.assertNotIn(Settings.ALL_CATEGORIES, Settings.CATEGORIES)

    def test_categories_unique(self) -> None:
        self.assertEqual(
            len(Settings.CATEGORIES), len(set(Settings.CATEGORIES))
        )

    def test_themes(self) -> None:
        self.assertEqual(Settings.THEMES, ["light", "dark"])
        self.assertIn(Settings.DEFAULT_THEME, Settings.THEMES)

    def test_console_log_level_is_upper_case(self) -> None:
        level = Settings.CONSOLE_LOG_LEVEL
        self.assertEqual(level, level.upper())

    def test_path_constants_are_paths(self) -> None:
        self.assertIsInstance(Settings.BASE_DIR, Path)
        self.assertIsInstance(Settings.DATA_DIR, Path)
        self.assertIsInstance(Settings.DB_PATH, Path)
        self.assertIsInstance(Settings.EXPORTS_DIR, Path)
        self.assertIsInstance(Settings.LOGS_DIR, Path)


if __name__ == "__main__":
    unittest.main()
