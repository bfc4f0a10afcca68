# tests/test_app.py

"""Smoke tests for the TUI application using Textual's Pilot."""

import json
import tempfile
import unittest
from pathlib import Path
from typing import Any

from textual.widgets import Checkbox, DataTable, Input, Select, Static

from sharebox.config.settings import Settings
from sharebox.services.product_store import ProductStore
from sharebox.storage.file_manager import FileManager
from sharebox.storage.kv_storage import MemoryStorage
from sharebox.ui.app import ShareBoxApp
from sharebox.ui.screens import (
    AddProductScreen,
    ConfirmScreen,
    ProductDetailScreen,
    ProfileScreen,
)


def _catalog() -> list[dict[str, Any]]:
    return [
        {"id": "lamp", "title": "Red lamp", "price": 30, "category": "Home",
         "createdAt": "2026-01-02T00:00:00Z"},
        {"id": "book", "title": "Blue book", "price": 10,
         "category": "Books", "createdAt": "2026-01-01T00:00:00Z"},
    ]


class TestShareBoxApp(unittest.IsolatedAsyncioTestCase):
    """Smoke tests for the Textual TUI."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.exports_dir = Path(self._tmp.name)
        self.storage = MemoryStorage(
            {Settings.storage_key("products"): json.dumps(_catalog())}
        )
        self.store = ProductStore(self.storage).init()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _app(self) -> ShareBoxApp:
        return ShareBoxApp(
            store=self.store, file_manager=FileManager(self.exports_dir)
        )

    async def test_app_composes_without_crash(self) -> None:
        """Verify the app starts and renders all widgets."""
        app = self._app()
        async with app.run_test() as pilot:
            app.query_one("#search_input", Input)
            app.query_one("#category_select", Select)
            app.query_one("#sort_select", Select)
            app.query_one("#mine_toggle", Checkbox)
            app.query_one("#stats", Static)
            table = app.query_one("#products_table", DataTable)
            await pilot.pause()
            self.assertEqual(table.row_count, 2)
            self.assertEqual(
                [p.id for p in app.visible_products], ["lamp", "book"]
            )

    async def test_like_key_likes_selected_row(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await pilot.press("l")
            await pilot.pause()
            self.assertEqual(self.store.get_product("lamp").likes, 1)

    async def test_search_input_filters_table(self) -> None:
        """Typing into the search box narrows the visible rows."""
        app = self._app()
        async with app.run_test() as pilot:
            app.query_one("#search_input", Input).value = "blue"
            await pilot.pause()
            self.assertEqual(self.store.filters.search, "blue")
            self.assertEqual(
                [p.id for p in app.visible_products], ["book"]
            )
            self.assertEqual(
                app.query_one("#products_table", DataTable).row_count, 1
            )

    async def test_sort_select_updates_filters(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            app.query_one("#sort_select", Select).value = "price-low"
            await pilot.pause()
            self.assertEqual(self.store.filters.sort, "price-low")
            self.assertEqual(
                [p.id for p in app.visible_products], ["book", "lamp"]
            )

    async def test_toggle_theme(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await pilot.pause()
            self.assertEqual(app.theme, "textual-light")
            await pilot.press("t")
            await pilot.pause()
            self.assertEqual(self.store.user.theme, "dark")
            self.assertEqual(app.theme, "textual-dark")

    async def test_delete_confirmed(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await pilot.press("d")
            await pilot.pause()
            self.assertIsInstance(app.screen, ConfirmScreen)
            await pilot.press("y")
            await pilot.pause()
            self.assertIsNone(self.store.get_product("lamp"))
            self.assertEqual(len(app.visible_products), 1)

    async def test_delete_cancelled(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await pilot.press("d")
            await pilot.pause()
            await pilot.press("n")
            await pilot.pause()
            self.assertIsNotNone(self.store.get_product("lamp"))
            self.assertNotIsInstance(app.screen, ConfirmScreen)

    async def test_clear_filters_resets_controls(self) -> None:
        self.store.set_filters(search="zzz", sort="most-liked")
        app = self._app()
        async with app.run_test() as pilot:
            await pilot.pause()
            self.assertEqual(app.visible_products, [])
            await pilot.press("x")
            await pilot.pause()
            self.assertFalse(self.store.filters.is_active)
            self.assertEqual(
                app.query_one("#search_input", Input).value, ""
            )
            self.assertEqual(
                app.query_one("#sort_select", Select).value,
                Settings.DEFAULT_SORT,
            )
            self.assertEqual(len(app.visible_products), 2)

    async def test_export_writes_file(self) -> None:
        app = self._app()
        async with app.run_test(notifications=True) as pilot:
            await pilot.press("e")
            await pilot.pause()
        files = list(self.exports_dir.glob("beusharebox-export-*.json"))
        self.assertEqual(len(files), 1)
        data = json.loads(files[0].read_text(encoding="utf-8"))
        self.assertEqual(len(data["products"]), 2)

    async def test_add_product_form(self) -> None:
        """Filling the add form inserts the product at the top."""
        app = self._app()
        async with app.run_test() as pilot:
            await pilot.press("a")
            await pilot.pause()
            self.assertIsInstance(app.screen, AddProductScreen)
            app.screen.query_one("#title_input", Input).value = "Mug"
            app.screen.query_one(
                "#description_input", Input
            ).value = "Coffee mug"
            app.screen.query_one("#price_input", Input).value = "8"
            app.screen.query_one("#category_input", Select).value = "Home"
            await pilot.click("#save_btn")
            await pilot.pause()
            self.assertEqual(self.store.products[0].title, "Mug")
            self.assertEqual(self.store.products[0].price, 8)
            self.assertEqual(len(app.visible_products), 3)

    async def test_move_down_reorders_ties(self) -> None:
        """With equal timestamps the manual order shows through."""
        for product in self.store.products:
            self.store.update_product(
                product.id, created_at="2026-01-01T00:00:00Z"
            )
        app = self._app()
        async with app.run_test() as pilot:
            await pilot.press("n")
            await pilot.pause()
            self.assertEqual(
                [p.id for p in self.store.products], ["book", "lamp"]
            )
            self.assertEqual(
                app.query_one("#products_table", DataTable).cursor_row, 1
            )

    async def test_enter_opens_detail_and_comments(self) -> None:
        """The detail view lists comments and accepts new ones."""
        self.store.add_comment("lamp", "Bright enough")
        app = self._app()
        async with app.run_test() as pilot:
            await pilot.press("enter")
            await pilot.pause()
            screen = app.screen
            self.assertIsInstance(screen, ProductDetailScreen)
            assert isinstance(screen, ProductDetailScreen)
            self.assertEqual(screen.product_id, "lamp")
            self.assertEqual(screen.shown_comments, ["Bright enough"])

            comment_box = screen.query_one("#detail_comment", Input)
            comment_box.value = "Bought one"
            await pilot.press("enter")
            await pilot.pause()
            self.assertEqual(
                screen.shown_comments, ["Bright enough", "Bought one"]
            )
            self.assertEqual(comment_box.value, "")
            product = self.store.get_product("lamp")
            assert product is not None
            self.assertEqual(product.comments[-1], "Bought one")

            await pilot.press("escape")
            await pilot.pause()
            self.assertNotIsInstance(app.screen, ProductDetailScreen)

    async def test_view_key_opens_detail(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await pilot.press("v")
            await pilot.pause()
            self.assertIsInstance(app.screen, ProductDetailScreen)

    async def test_profile_form_updates_name_and_avatar(self) -> None:
        avatar = self.exports_dir / "me.png"
        avatar.write_bytes(b"png")
        app = self._app()
        async with app.run_test() as pilot:
            await pilot.press("p")
            await pilot.pause()
            self.assertIsInstance(app.screen, ProfileScreen)
            app.screen.query_one("#name_input", Input).value = "Alice"
            app.screen.query_one("#avatar_input", Input).value = (
                str(avatar)
            )
            await pilot.click("#save_btn")
            await pilot.pause()
        self.assertEqual(self.store.user.name, "Alice")
        self.assertTrue(
            (self.store.user.avatar or "").startswith(
                "data:image/png;base64,"
            )
        )

    async def test_profile_bad_avatar_keeps_profile(self) -> None:
        app = self._app()
        async with app.run_test(notifications=True) as pilot:
            await pilot.press("p")
            await pilot.pause()
            app.screen.query_one(
                "#avatar_input", Input
            ).value = "/nonexistent/me.png"
            await pilot.click("#save_btn")
            await pilot.pause()
        self.assertIsNone(self.store.user.avatar)
        self.assertEqual(self.store.user.name, "Guest User")

    async def test_unmount_keeps_injected_store_open(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await pilot.pause()
        # Subscriptions are dropped; store is still usable
        self.assertTrue(self.store.like_product("lamp"))


if __name__ == "__main__":
    unittest.main()
