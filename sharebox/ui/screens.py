# sharebox/ui/screens.py

"""Modal dialogs used by the catalog TUI."""

from collections.abc import Callable
from typing import Any

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select, Static

from sharebox.config.settings import Settings
from sharebox.models.user_profile import UserProfile
from sharebox.services.product_store import ProductStore


class AddProductScreen(ModalScreen[dict[str, Any] | None]):
    """Form for a new product; dismisses with the raw field values."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static("Share a product", classes="dialog_title"),
            Input(placeholder="Title", id="title_input"),
            Input(placeholder="Description", id="description_input"),
            Input(placeholder="Price", id="price_input"),
            Select(
                [(c, c) for c in Settings.CATEGORIES],
                prompt="Category",
                id="category_input",
            ),
            Input(
                placeholder="Image file (optional)", id="image_input"
            ),
            Horizontal(
                Button("Add", variant="primary", id="save_btn"),
                Button("Cancel", id="cancel_btn"),
                classes="dialog_buttons",
            ),
            classes="dialog",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save_btn":
            category = self.query_one("#category_input", Select).value
            self.dismiss(
                {
                    "title": self.query_one("#title_input", Input).value,
                    "description": self.query_one(
                        "#description_input", Input
                    ).value,
                    "price": self.query_one("#price_input", Input).value,
                    "category": (
                        category if isinstance(category, str) else ""
                    ),
                    "image": self.query_one("#image_input", Input).value,
                }
            )
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class TextPromptScreen(ModalScreen[str | None]):
    """Single-line prompt, used for comments and import paths."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, title: str, placeholder: str = "") -> None:
        super().__init__()
        self._title = title
        self._placeholder = placeholder

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static(self._title, classes="dialog_title"),
            Input(placeholder=self._placeholder, id="prompt_input"),
            Horizontal(
                Button("OK", variant="primary", id="ok_btn"),
                Button("Cancel", id="cancel_btn"),
                classes="dialog_buttons",
            ),
            classes="dialog",
        )

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "ok_btn":
            self.dismiss(self.query_one("#prompt_input", Input).value)
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class ConfirmScreen(ModalScreen[bool]):
    """Yes/No confirmation."""

    BINDINGS = [
        Binding("y", "confirm", "Yes"),
        Binding("n,escape", "cancel", "No"),
    ]

    def __init__(self, question: str) -> None:
        super().__init__()
        self._question = question

    def compose(self) -> ComposeResult:
        yield Vertical(
            Label(self._question, classes="dialog_title"),
            Horizontal(
                Button("Delete", variant="error", id="yes_btn"),
                Button("Cancel", id="no_btn"),
                classes="dialog_buttons",
            ),
            classes="dialog",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "yes_btn")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


def _image_label(image: str | None) -> str:
    if not image:
        return "No image"
    if image.startswith("data:"):
        mime = image[5:].split(";", 1)[0] or "unknown type"
        return f"Image attached ({mime})"
    return f"Image: {image}"


class ProductDetailScreen(ModalScreen[None]):
    """Full view of one product, with its comments and a comment box.

    Follows the store while open, so new likes and comments show up
    immediately.
    """

    BINDINGS = [Binding("escape", "close", "Close")]

    def __init__(self, store: ProductStore, product_id: str) -> None:
        super().__init__()
        self._store = store
        self.product_id = product_id
        self.shown_comments: list[str] = []
        self._unsubscribe: Callable[[], None] | None = None

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static("", id="detail_title", classes="dialog_title"),
            Static("", id="detail_meta"),
            Static("", id="detail_description"),
            Static("", id="detail_image"),
            Label("Comments", classes="section_label"),
            VerticalScroll(
                Static("", id="detail_comments"),
                id="detail_comments_box",
            ),
            Input(placeholder="Write a comment...", id="detail_comment"),
            Horizontal(
                Button("Close", id="close_btn"),
                classes="dialog_buttons",
            ),
            classes="dialog",
        )

    def on_mount(self) -> None:
        self._unsubscribe = self._store.subscribe(self.refresh_detail)
        self.refresh_detail()
        self.query_one("#detail_comment", Input).focus()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def refresh_detail(self) -> None:
        product = self._store.get_product(self.product_id)
        if product is None:
            self.shown_comments = []
            self.query_one("#detail_title", Static).update(
                "This product has been deleted"
            )
            return

        self.shown_comments = list(product.comments)
        self.query_one("#detail_title", Static).update(Text(product.title))
        self.query_one("#detail_meta", Static).update(
            Text(
                f"{product.price:,.2f} · {product.category} · "
                f"♥ {product.likes} · by {product.created_by}"
            )
        )
        self.query_one("#detail_description", Static).update(
            Text(product.description or "No description")
        )
        self.query_one("#detail_image", Static).update(
            Text(_image_label(product.image))
        )
        self.query_one("#detail_comments", Static).update(
            Text("\n".join(f"• {c}" for c in product.comments))
            if product.comments
            else Text("No comments yet", style="dim")
        )

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if self._store.add_comment(self.product_id, event.value):
            event.input.value = ""

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "close_btn":
            self.dismiss(None)

    def action_close(self) -> None:
        self.dismiss(None)


class ProfileScreen(ModalScreen[dict[str, str] | None]):
    """Edit the display name and pick an avatar image file."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, user: UserProfile) -> None:
        super().__init__()
        self._user = user

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static("Your profile", classes="dialog_title"),
            Label(
                "Avatar: set" if self._user.avatar else "Avatar: none"
            ),
            Input(
                value=self._user.name, placeholder="Name", id="name_input"
            ),
            Input(
                placeholder="Avatar image file (optional)",
                id="avatar_input",
            ),
            Horizontal(
                Button("Save", variant="primary", id="save_btn"),
                Button("Cancel", id="cancel_btn"),
                classes="dialog_buttons",
            ),
            classes="dialog",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save_btn":
            self.dismiss(
                {
                    "name": self.query_one("#name_input", Input).value,
                    "avatar": self.query_one("#avatar_input", Input).value,
                }
            )
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
