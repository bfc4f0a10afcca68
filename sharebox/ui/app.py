# sharebox/ui/app.py

"""Terminal UI for the ShareBox product catalog."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Checkbox,
    DataTable,
    Footer,
    Header,
    Input,
    Select,
    Static,
)

from sharebox.config.settings import Settings
from sharebox.models.errors import ProductValidationError
from sharebox.models.product import Product
from sharebox.services.notifications import Severity
from sharebox.services.product_store import ProductStore, build_store
from sharebox.storage.file_manager import FileManager
from sharebox.ui.screens import (
    AddProductScreen,
    ConfirmScreen,
    ProductDetailScreen,
    ProfileScreen,
    TextPromptScreen,
)

logger = logging.getLogger("sharebox.ui")


class ShareBoxApp(App[object]):
    """Terminal UI for the ShareBox product catalog."""

    CSS_PATH = "styles.css"
    AUTO_FOCUS = "#products_table"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("a", "add_product", "Add"),
        Binding("l", "like", "Like"),
        Binding("v", "view", "View"),
        Binding("c", "comment", "Comment"),
        Binding("d", "delete", "Delete"),
        Binding("u", "move_up", "Move Up"),
        Binding("n", "move_down", "Move Down"),
        Binding("p", "profile", "Profile"),
        Binding("t", "toggle_theme", "Theme"),
        Binding("x", "clear_filters", "Clear Filters"),
        Binding("e", "export", "Export"),
        Binding("i", "import", "Import"),
    ]

    def __init__(
        self,
        store: ProductStore | None = None,
        file_manager: FileManager | None = None,
    ) -> None:
        super().__init__()
        self._owns_store = store is None
        self.store = store or build_store(notifier=self.toast)
        self.file_manager = file_manager or FileManager()
        self.visible_products: list[Product] = []
        self._unsubscribe: Callable[[], None] | None = None

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        filters = self.store.filters
        sort_options = [
            (s["label"], s["id"]) for s in Settings.SORT_OPTIONS
        ]
        category_options = [("All categories", Settings.ALL_CATEGORIES)]
        category_options += [(c, c) for c in Settings.CATEGORIES]

        yield Header()
        yield Container(
            Static("📦 ShareBox", id="title"),
            Horizontal(
                Input(
                    value=filters.search,
                    placeholder="Search products...",
                    id="search_input",
                ),
                Select(
                    category_options,
                    value=filters.category
                    if filters.category in dict(category_options).values()
                    else Settings.ALL_CATEGORIES,
                    allow_blank=False,
                    id="category_select",
                ),
                Select(
                    sort_options,
                    value=filters.sort
                    if filters.sort in dict(sort_options).values()
                    else Settings.DEFAULT_SORT,
                    allow_blank=False,
                    id="sort_select",
                ),
                Checkbox(
                    "My products",
                    value=filters.show_my_products,
                    id="mine_toggle",
                ),
                id="filter_bar",
            ),
            Static("", id="stats"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="products_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            Static("", id="status"),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Set up table columns and start listening to the store."""
        # Modal screens change what App.query_one sees, so keep handles
        self._products_table = cast(
            DataTable[str | Text],
            self.query_one("#products_table", DataTable),
        )
        self._stats_line = self.query_one("#stats", Static)
        self._status_line = self.query_one("#status", Static)
        table = self._table()
        table.add_columns(
            "Title", "Price", "Category", "Likes", "Comments", "By"
        )
        self._unsubscribe = self.store.subscribe(self.refresh_view)
        self.refresh_view()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._owns_store:
            self.store.close()

    # ── Store → view ─────────────────────────────────────

    def toast(self, message: str, severity: Severity) -> None:
        """Notifier handed to the store; maps onto Textual toasts."""
        self.notify(
            message,
            severity="error" if severity == "error" else "information",
        )

    def refresh_view(self) -> None:
        """Re-render the table, stats line and theme from the store."""
        self.visible_products = self.store.get_filtered_products()
        table = self._table()
        cursor_row = table.cursor_row
        table.clear()

        for p in self.visible_products:
            table.add_row(
                p.title[:50],
                Text(f"{p.price:,.2f}", style="green"),
                p.category,
                f"♥ {p.likes}",
                str(len(p.comments)),
                p.created_by,
                key=p.id,
            )
        if self.visible_products:
            table.move_cursor(
                row=min(cursor_row, len(self.visible_products) - 1)
            )

        stats = self.store.get_stats()
        user = self.store.user
        icon = "🖼" if user.avatar else "👤"
        self._stats_line.update(
            Text(
                f"{icon} {user.name} · "
                f"{stats.user_products} shared · "
                f"{stats.total_products} products · "
                f"{stats.total_likes} likes"
            )
        )
        status = self._status_line
        if not self.visible_products:
            hint = (
                "No products match, press x to clear filters"
                if self.store.filters.is_active
                else "No products yet, press a to add one"
            )
            status.update(hint)
        else:
            status.update(
                f"Showing {len(self.visible_products)} of "
                f"{stats.total_products}"
            )
        self.theme = (
            "textual-dark" if user.theme == "dark" else "textual-light"
        )

    def _sync_filter_controls(self) -> None:
        filters = self.store.filters
        search = self.query_one("#search_input", Input)
        if search.value != filters.search:
            search.value = filters.search
        category = self.query_one("#category_select", Select)
        if category.value != filters.category:
            category.value = filters.category
        sort = self.query_one("#sort_select", Select)
        if sort.value != filters.sort:
            sort.value = filters.sort
        mine = self.query_one("#mine_toggle", Checkbox)
        if mine.value != filters.show_my_products:
            mine.value = filters.show_my_products

    # ── View → store ─────────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        """Live search as the user types."""
        if event.input.id == "search_input":
            if event.value != self.store.filters.search:
                self.store.set_filters(search=event.value)

    def on_select_changed(self, event: Select.Changed) -> None:
        value = event.value
        if not isinstance(value, str):
            return
        if event.select.id == "category_select":
            if value != self.store.filters.category:
                self.store.set_filters(category=value)
        elif event.select.id == "sort_select":
            if value != self.store.filters.sort:
                self.store.set_filters(sort=value)

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        if event.checkbox.id == "mine_toggle":
            if event.value != self.store.filters.show_my_products:
                self.store.set_filters(show_my_products=event.value)

    def selected_product(self) -> Product | None:
        """Return the product under the table cursor, if any."""
        row = self._table().cursor_row
        if 0 <= row < len(self.visible_products):
            return self.visible_products[row]
        return None

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Enter on a row opens its detail view."""
        self.action_view()

    def action_view(self) -> None:
        product = self.selected_product()
        if product is not None:
            self.push_screen(ProductDetailScreen(self.store, product.id))

    def action_like(self) -> None:
        product = self.selected_product()
        if product is not None:
            self.store.like_product(product.id)

    def action_comment(self) -> None:
        product = self.selected_product()
        if product is None:
            return

        def _submit(text: str | None) -> None:
            if text:
                self.store.add_comment(product.id, text)

        self.push_screen(
            TextPromptScreen(
                f"Comment on {product.title}", "Write a comment..."
            ),
            _submit,
        )

    def action_delete(self) -> None:
        product = self.selected_product()
        if product is None:
            return
        confirmation = self.store.request_delete(product.id)
        if confirmation is None:
            return

        def _answer(confirmed: bool | None) -> None:
            if confirmed:
                self.store.confirm_delete(confirmation)
            else:
                self.store.cancel_delete(confirmation)

        self.push_screen(
            ConfirmScreen(
                f"Are you sure you want to delete '{confirmation.title}'?"
            ),
            _answer,
        )

    def action_add_product(self) -> None:
        self.push_screen(AddProductScreen(), self._add_from_form)

    def _add_from_form(self, fields: dict[str, Any] | None) -> None:
        if fields is None:
            return
        image: str | None = None
        image_path = str(fields.get("image") or "").strip()
        try:
            if image_path:
                image = self.file_manager.read_image_data_uri(
                    Path(image_path).expanduser()
                )
            self.store.add_product(
                title=fields["title"],
                description=fields["description"],
                price=fields["price"],
                category=fields["category"],
                image=image,
            )
        except ProductValidationError as exc:
            self.notify(str(exc), severity="error")
        except (OSError, ValueError) as exc:
            logger.error("Failed to attach image", exc_info=True)
            self.notify(f"Image failed: {exc}", severity="error")

    def _move(self, offset: int) -> None:
        product = self.selected_product()
        row = self._table().cursor_row
        target_row = row + offset
        if product is None or not (
            0 <= target_row < len(self.visible_products)
        ):
            return
        target = self.visible_products[target_row]
        if self.store.reorder_products(product.id, target.id):
            # The active sort decides where the product lands
            ids = [p.id for p in self.visible_products]
            if product.id in ids:
                self._table().move_cursor(row=ids.index(product.id))

    def action_move_up(self) -> None:
        self._move(-1)

    def action_move_down(self) -> None:
        self._move(1)

    def action_profile(self) -> None:
        self.push_screen(ProfileScreen(self.store.user), self._save_profile)

    def _save_profile(self, fields: dict[str, str] | None) -> None:
        if fields is None:
            return
        self.store.set_user_name(fields.get("name", ""))
        avatar_path = fields.get("avatar", "").strip()
        if not avatar_path:
            return
        try:
            self.store.set_avatar(
                self.file_manager.read_image_data_uri(
                    Path(avatar_path).expanduser()
                )
            )
        except (OSError, ValueError) as exc:
            logger.error("Failed to load avatar", exc_info=True)
            self.notify(f"Avatar failed: {exc}", severity="error")

    def action_toggle_theme(self) -> None:
        self.store.toggle_theme()

    def action_clear_filters(self) -> None:
        self.store.clear_filters()
        self._sync_filter_controls()

    def action_export(self) -> None:
        """Write the export document to the exports directory."""
        try:
            path = self.file_manager.save_export(self.store.export_data())
            logger.info("Exported catalog to %s", path)
            self.notify(f"Data exported to {path}")
        except OSError as e:
            logger.error("Failed to export catalog", exc_info=True)
            self.notify(f"Export failed: {e}", severity="error")

    def action_import(self) -> None:
        def _submit(path: str | None) -> None:
            if path and path.strip():
                self.run_worker(
                    self.store.import_data(
                        Path(path.strip()).expanduser()
                    ),
                    exclusive=True,
                )

        self.push_screen(
            TextPromptScreen("Import data", "Path to export .json"),
            _submit,
        )

    def _table(self) -> DataTable[str | Text]:
        return self._products_table
