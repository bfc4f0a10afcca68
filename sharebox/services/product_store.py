# sharebox/services/product_store.py

"""The catalog state container: products, user profile and filters.

``ProductStore`` is the single owner of catalog state.  Views read it
through :meth:`ProductStore.get_filtered_products` and
:meth:`ProductStore.get_stats`, change it only through the mutation
methods, and learn about changes by subscribing.  Every mutation ends in
:meth:`ProductStore.notify`, which calls subscribers and then writes the
full state back to the key-value storage backend.
"""

import asyncio
import dataclasses
import json
import logging
import math
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from types import TracebackType
from typing import Any

from sharebox.config.settings import Settings
from sharebox.filters.normalizer import (
    generate_id,
    normalize_filters,
    normalize_product,
    normalize_products,
    normalize_user,
    parse_import_document,
    utc_now_iso,
)
from sharebox.filters.product_filter import ProductFilter
from sharebox.models.errors import ProductValidationError, StorageError
from sharebox.models.filter_state import FilterState
from sharebox.models.product import Product
from sharebox.models.user_profile import UserProfile
from sharebox.services.notifications import (
    Notifier,
    Severity,
    safe_notify,
)
from sharebox.storage.file_manager import FileManager
from sharebox.storage.kv_storage import KeyValueStorage, SQLiteStorage
from sharebox.storage.seed_data import sample_products

logger = logging.getLogger("sharebox.store")

Subscriber = Callable[[], None]

_MUTABLE_FIELDS: frozenset[str] = frozenset(
    f.name for f in dataclasses.fields(Product) if f.name != "id"
)



def _copy(product: Product) -> Product:
    return dataclasses.replace(product, comments=list(product.comments))

@dataclass(frozen=True)
class DeleteConfirmation:
    """Pending, single-use permission to delete one product."""

    token: str
    product_id: str
    title: str


@dataclass
class ImportResult:
    """Outcome of :meth:`ProductStore.import_data`."""

    ok: bool
    added: int = 0
    skipped: int = 0
    error: str = ""


@dataclass
class StoreStats:
    """Summary figures for the sidebar / ``stats`` command."""

    total_products: int = 0
    total_likes: int = 0
    most_liked: Product | None = None
    category_distribution: dict[str, int] = field(
        default_factory=lambda: dict[str, int]()
    )
    user_products: int = 0


@dataclass
class _Subscription:
    callback: Subscriber


class ProductStore:
    """Reactive, persisted holder of the catalog state."""

    def __init__(
        self,
        storage: KeyValueStorage,
        notifier: Notifier | None = None,
        id_factory: Callable[[], str] = generate_id,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._storage = storage
        self._notifier = notifier
        self._id_factory = id_factory
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        self._products: list[Product] = []
        self._user = UserProfile(
            name=Settings.DEFAULT_USER_NAME, theme=Settings.DEFAULT_THEME
        )
        self._filters = FilterState()
        self._subscriptions: list[_Subscription] = []
        self._pending_deletes: dict[str, str] = {}

        self.products_key = Settings.storage_key("products")
        self.user_key = Settings.storage_key("user")
        self.filters_key = Settings.storage_key("filters")

    # ── Lifecycle ────────────────────────────────────────

    def init(self) -> "ProductStore":
        """Load persisted state, falling back to seed data, and write it back."""
        self._products = self._load_products()
        self._user = self._load_user()
        self._filters = self._load_filters()
        # Seeded or repaired records get their ids here; write them now so
        # the next process sees the same ids
        self.save()
        logger.info(
            "Store initialised with %d products (user=%s)",
            len(self._products),
            self._user.name,
        )
        return self

    def close(self) -> None:
        """Drop subscribers and pending deletes, then close storage."""
        self._subscriptions.clear()
        self._pending_deletes.clear()
        close = getattr(self._storage, "close", None)
        if callable(close):
            close()
        logger.debug("Store closed")

    def __enter__(self) -> "ProductStore":
        return self.init()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ── Read access ──────────────────────────────────────

    @property
    def products(self) -> list[Product]:
        """Copies of the products in manual (insertion/drag) order."""
        return [_copy(p) for p in self._products]

    @property
    def user(self) -> UserProfile:
        return dataclasses.replace(self._user)

    @property
    def filters(self) -> FilterState:
        return dataclasses.replace(self._filters)

    def get_product(self, product_id: str) -> Product | None:
        """Return a copy of the product with *product_id*, or ``None``."""
        product = self._find(product_id)
        return _copy(product) if product is not None else None

    # ── Subscriptions ────────────────────────────────────

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback*; the returned handle unregisters it.

        The handle removes exactly this registration, even if the same
        callable was subscribed more than once, and is safe to call twice.
        """
        subscription = _Subscription(callback)
        self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            self._subscriptions = [
                s for s in self._subscriptions if s is not subscription
            ]

        return unsubscribe

    def notify(self) -> None:
        """Call every subscriber in registration order, then persist.

        A failing subscriber is logged and skipped; it does not stop
        later subscribers or the write to storage.
        """
        for subscription in list(self._subscriptions):
            try:
                subscription.callback()
            except Exception:
                logger.error(
                    "Subscriber %r raised during notify",
                    subscription.callback,
                    exc_info=True,
                )
        self.save()

    # ── Persistence ──────────────────────────────────────

    def save(self) -> bool:
        """Overwrite all three storage keys with the current state.

        Returns ``False`` (after logging and notifying) on a write
        failure; in-memory state stays authoritative.
        """
        try:
            self._storage.set_item(
                self.products_key,
                json.dumps([p.to_dict() for p in self._products]),
            )
            self._storage.set_item(
                self.user_key, json.dumps(self._user.to_dict())
            )
            self._storage.set_item(
                self.filters_key, json.dumps(self._filters.to_dict())
            )
        except (StorageError, OSError) as exc:
            logger.error("Failed to save state: %s", exc, exc_info=True)
            self._emit("Failed to save data", "error")
            return False
        return True

    def _read_json(self, key: str) -> Any:
        raw = self._storage.get_item(key)
        return None if raw is None else json.loads(raw)

    def _seed_products(self) -> list[Product]:
        return normalize_products(
            list(sample_products()),
            self._id_factory,
            utc_now_iso(self._clock()),
        )

    def _load_products(self) -> list[Product]:
        try:
            data = self._read_json(self.products_key)
            if data is None:
                logger.info("No saved products, loading seed data")
                return self._seed_products()
            if not isinstance(data, list):
                raise ValueError(
                    f"expected a JSON array, got {type(data).__name__}"
                )
            return normalize_products(
                data, self._id_factory, utc_now_iso(self._clock())
            )
        except (StorageError, OSError, ValueError) as exc:
            logger.error(
                "Error loading products, using seed data: %s",
                exc,
                exc_info=True,
            )
            return self._seed_products()

    def _load_user(self) -> UserProfile:
        try:
            return normalize_user(self._read_json(self.user_key))
        except (StorageError, OSError, ValueError) as exc:
            logger.error("Error loading user profile: %s", exc)
            return normalize_user(None)

    def _load_filters(self) -> FilterState:
        try:
            return normalize_filters(self._read_json(self.filters_key))
        except (StorageError, OSError, ValueError) as exc:
            logger.error("Error loading filters: %s", exc)
            return FilterState()

    # ── Product mutations ────────────────────────────────

    def add_product(
        self,
        title: str,
        description: str,
        price: float | str | None,
        category: str,
        image: str | None = None,
    ) -> Product:
        """Create a product at the front of the collection.

        Raises ``ProductValidationError`` when a field is blank, the price
        is not a number, or the price is negative.
        """
        title = (title or "").strip()
        description = (description or "").strip()
        category = (category or "").strip()
        if isinstance(price, bool) or price is None:
            raise ProductValidationError("Please fill in all fields")
        try:
            amount = float(price)
        except (TypeError, ValueError) as exc:
            raise ProductValidationError(
                f"Price is not a number: {price!r}"
            ) from exc
        if not title or not description or not category:
            raise ProductValidationError("Please fill in all fields")
        if not math.isfinite(amount):
            raise ProductValidationError("Price must be a finite number")
        if amount < 0:
            raise ProductValidationError("Price cannot be negative")

        existing = {p.id for p in self._products}
        new_id = self._id_factory()
        while new_id in existing:
            new_id = self._id_factory()

        product = Product(
            id=new_id,
            title=title,
            description=description,
            price=amount,
            category=category,
            image=image or None,
            likes=0,
            comments=[],
            created_at=utc_now_iso(self._clock()),
            created_by=self._user.name,
        )
        self._products.insert(0, product)
        logger.info(
            "Product added: %s (%s), total=%d",
            product.title,
            product.id,
            len(self._products),
        )
        self.notify()
        self._emit("Product added successfully!", "success")
        return _copy(product)

    def update_product(self, product_id: str, **updates: Any) -> bool:
        """Shallow-merge *updates* into a product; unknown ids are a no-op.

        ``id`` and unrecognised field names are ignored.  The merged
        record is re-normalised.
        """
        index = self._index_of(product_id)
        if index == -1:
            logger.debug("update_product: unknown id %s", product_id)
            return False

        ignored = sorted(set(updates) - _MUTABLE_FIELDS)
        if ignored:
            logger.warning("update_product ignoring fields: %s", ignored)
        merged = dataclasses.asdict(self._products[index])
        merged.update(
            {k: v for k, v in updates.items() if k in _MUTABLE_FIELDS}
        )
        self._products[index] = normalize_product(
            merged, self._id_factory, self._products[index].created_at
        )
        self.notify()
        return True

    def request_delete(
        self, product_id: str
    ) -> DeleteConfirmation | None:
        """Start a deletion; returns a token for :meth:`confirm_delete`."""
        product = self._find(product_id)
        if product is None:
            return None
        token = uuid.uuid4().hex
        self._pending_deletes[token] = product_id
        logger.debug("Delete requested for %s (token=%s)", product_id, token)
        return DeleteConfirmation(
            token=token, product_id=product_id, title=product.title
        )

    def confirm_delete(
        self, confirmation: DeleteConfirmation | str
    ) -> bool:
        """Remove the product named by a pending token.

        Tokens are single-use.  Returns ``False`` for an unknown or spent
        token, or when the product is already gone.
        """
        token = (
            confirmation.token
            if isinstance(confirmation, DeleteConfirmation)
            else confirmation
        )
        product_id = self._pending_deletes.pop(token, None)
        if product_id is None:
            logger.warning("confirm_delete: unknown token %s", token)
            return False
        index = self._index_of(product_id)
        if index == -1:
            return False

        removed = self._products.pop(index)
        logger.info("Product deleted: %s (%s)", removed.title, removed.id)
        self.notify()
        self._emit("Product deleted", "info")
        return True

    def cancel_delete(
        self, confirmation: DeleteConfirmation | str
    ) -> bool:
        """Discard a pending delete token."""
        token = (
            confirmation.token
            if isinstance(confirmation, DeleteConfirmation)
            else confirmation
        )
        return self._pending_deletes.pop(token, None) is not None

    def like_product(self, product_id: str) -> bool:
        """Add exactly one like; unknown ids are a no-op."""
        product = self._find(product_id)
        if product is None:
            return False
        product.likes += 1
        self.notify()
        self._emit("Product liked!", "success")
        return True

    def add_comment(self, product_id: str, text: str) -> bool:
        """Append a trimmed comment; blank text or unknown ids are no-ops."""
        comment = (text or "").strip()
        product = self._find(product_id)
        if product is None or not comment:
            return False
        product.comments.append(comment)
        self.notify()
        self._emit("Comment added", "success")
        return True

    def reorder_products(self, source_id: str, target_id: str) -> bool:
        """Move *source_id* to the index currently held by *target_id*."""
        source_index = self._index_of(source_id)
        target_index = self._index_of(target_id)
        if source_index == -1 or target_index == -1:
            return False
        if source_index == target_index:
            return False

        moved = self._products.pop(source_index)
        self._products.insert(target_index, moved)
        logger.debug(
            "Moved %s from %d to %d", source_id, source_index, target_index
        )
        self.notify()
        self._emit("Products reordered", "info")
        return True

    # ── User and filter mutations ────────────────────────

    def toggle_theme(self) -> str:
        """Flip between light and dark; returns the new theme."""
        self._user.theme = "dark" if self._user.theme == "light" else "light"
        self.notify()
        self._emit(f"Theme changed to {self._user.theme}", "info")
        return self._user.theme

    def set_user_name(self, name: str) -> bool:
        """Rename the current user; past attributions are unchanged."""
        cleaned = (name or "").strip()
        if not cleaned or cleaned == self._user.name:
            return False
        self._user.name = cleaned
        self.notify()
        return True

    def set_avatar(self, data_uri: str | None) -> None:
        """Set (or clear, with ``None``) the avatar image data URI."""
        self._user.avatar = data_uri or None
        self.notify()
        self._emit("Profile picture updated", "success")

    def set_filters(
        self,
        search: str | None = None,
        category: str | None = None,
        sort: str | None = None,
        show_my_products: bool | None = None,
    ) -> None:
        """Change any subset of the filter fields and notify."""
        if search is not None:
            self._filters.search = search
        if category is not None:
            self._filters.category = category or Settings.ALL_CATEGORIES
        if sort is not None:
            self._filters.sort = sort or Settings.DEFAULT_SORT
        if show_my_products is not None:
            self._filters.show_my_products = show_my_products
        self.notify()

    def clear_filters(self) -> None:
        """Reset search, category, sort and ownership filters."""
        self._filters = FilterState()
        self.notify()
        self._emit("Filters cleared", "info")

    # ── Derived queries ──────────────────────────────────

    def get_filtered_products(self) -> list[Product]:
        """Return the display list for the current filters."""
        return [
            _copy(p)
            for p in ProductFilter.apply(
                self._products, self._filters, self._user.name
            )
        ]

    def get_stats(self) -> StoreStats:
        """Summarise the whole collection (filters are not applied)."""
        stats = StoreStats(total_products=len(self._products))
        for product in self._products:
            stats.total_likes += product.likes
            if (
                stats.most_liked is None
                or product.likes > stats.most_liked.likes
            ):
                stats.most_liked = product
            category = product.category or Settings.DEFAULT_CATEGORY
            stats.category_distribution[category] = (
                stats.category_distribution.get(category, 0) + 1
            )
            if product.created_by == self._user.name:
                stats.user_products += 1
        if stats.most_liked is not None:
            stats.most_liked = _copy(stats.most_liked)
        return stats

    # ── Import / export ──────────────────────────────────

    def export_data(self) -> dict[str, object]:
        """Return the export document ``{products, user, exportDate}``."""
        return {
            "products": [p.to_dict() for p in self._products],
            "user": self._user.to_dict(),
            "exportDate": utc_now_iso(self._clock()),
        }

    async def import_data(self, source: Path | str | bytes) -> ImportResult:
        """Merge an export document into the store.

        *source* is a file path (read off the event loop) or the document
        text.  Products whose id already exists are skipped; an incoming
        ``user`` is shallow-merged.  Bad input leaves state untouched.
        """
        if isinstance(source, Path):
            try:
                text: str | bytes = await asyncio.to_thread(
                    FileManager.read_text, source
                )
            except (OSError, UnicodeDecodeError) as exc:
                return self._import_failed(f"Cannot read {source}: {exc}")
        else:
            text = source

        # Everything below runs without awaiting, so no other callback
        # can observe a half-merged import.
        result = parse_import_document(
            text, self._id_factory, utc_now_iso(self._clock())
        )
        if not result.ok or result.value is None:
            return self._import_failed(result.error)
        document = result.value

        known_ids = {p.id for p in self._products}
        new_products: list[Product] = []
        for product in document.products:
            if product.id in known_ids:
                continue
            known_ids.add(product.id)
            new_products.append(product)

        self._products.extend(new_products)
        if document.user is not None:
            self._user = normalize_user(document.user, self._user)

        logger.info(
            "Imported %d new products (%d already present)",
            len(new_products),
            len(document.products) - len(new_products),
        )
        self.notify()
        self._emit(f"Imported {len(new_products)} new products", "success")
        return ImportResult(
            ok=True,
            added=len(new_products),
            skipped=len(document.products) - len(new_products),
        )

    def _import_failed(self, error: str) -> ImportResult:
        logger.error("Import failed: %s", error)
        self._emit("Failed to import data", "error")
        return ImportResult(ok=False, error=error)

    # ── Helpers ──────────────────────────────────────────

    def _find(self, product_id: str) -> Product | None:
        index = self._index_of(product_id)
        return self._products[index] if index != -1 else None

    def _index_of(self, product_id: str) -> int:
        for index, product in enumerate(self._products):
            if product.id == product_id:
                return index
        return -1

    def _emit(self, message: str, severity: Severity) -> None:
        safe_notify(self._notifier, message, severity)


def build_store(
    notifier: Notifier | None = None,
    db_path: Path | None = None,
) -> ProductStore:
    """Construct and initialise a store over the default SQLite file."""
    store = ProductStore(SQLiteStorage(db_path), notifier=notifier)
    return store.init()
