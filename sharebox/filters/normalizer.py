# sharebox/filters/normalizer.py

"""Parse-and-normalise external JSON into fully-shaped models.

Every record that enters the store (seed data, persisted state, import
files) passes through here, so the in-memory collection never holds a
partially-shaped product.  All functions are idempotent: normalising an
already-normalised record returns an equal record.
"""

import json
import logging
import math
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, cast

from sharebox.config.settings import Settings
from sharebox.models.filter_state import FilterState
from sharebox.models.product import Product
from sharebox.models.user_profile import UserProfile

logger = logging.getLogger("sharebox.normalizer")

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def generate_id() -> str:
    """Return a fresh opaque product id."""
    return uuid.uuid4().hex


def utc_now_iso(now: datetime | None = None) -> str:
    """Format *now* (default: current UTC time) as ISO-8601 with ``Z``."""
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    stamp = moment.astimezone(timezone.utc).isoformat(
        timespec="milliseconds"
    )
    return stamp.replace("+00:00", "Z")


def parse_timestamp(value: object) -> datetime:
    """Parse an ISO-8601 string into an aware datetime.

    Missing or unparseable values sort as the earliest possible moment.
    Naive timestamps are taken to be UTC.
    """
    if not isinstance(value, str) or not value.strip():
        return _EARLIEST
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return _EARLIEST
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def coerce_price(value: object) -> float:
    """Return a non-negative finite price, or ``0`` when not numeric."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value if value >= 0 else 0
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0
    else:
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return number


def _coerce_likes(value: object) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float) and math.isfinite(value):
        return max(int(value), 0)
    return 0


def _non_empty_str(value: object, default: str) -> str:
    if isinstance(value, str) and value:
        return value
    return default


def _optional_str(value: object) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def normalize_product(
    raw: dict[str, Any],
    id_factory: Callable[[], str] = generate_id,
    now: str | None = None,
) -> Product:
    """Build a Product with every field populated from an untrusted dict.

    Accepts both the camelCase wire keys (``createdAt``) and the Python
    attribute names (``created_at``).
    """
    raw_id = raw.get("id")
    if isinstance(raw_id, bool):
        raw_id = None
    if isinstance(raw_id, int):
        raw_id = str(raw_id)

    raw_comments = raw.get("comments")
    comments: list[str] = []
    if isinstance(raw_comments, list):
        comments = [
            c for c in cast(list[object], raw_comments)
            if isinstance(c, str)
        ]

    created_at = raw.get("createdAt", raw.get("created_at"))
    created_by = raw.get("createdBy", raw.get("created_by"))

    return Product(
        id=_non_empty_str(raw_id, "") or id_factory(),
        title=_non_empty_str(raw.get("title"), Settings.DEFAULT_TITLE),
        description=_non_empty_str(raw.get("description"), ""),
        price=coerce_price(raw.get("price")),
        category=_non_empty_str(
            raw.get("category"), Settings.DEFAULT_CATEGORY
        ),
        image=_optional_str(raw.get("image")),
        likes=_coerce_likes(raw.get("likes")),
        comments=comments,
        created_at=_non_empty_str(created_at, "") or (now or utc_now_iso()),
        created_by=_non_empty_str(
            created_by, Settings.DEFAULT_USER_NAME
        ),
    )


def normalize_products(
    items: list[object],
    id_factory: Callable[[], str] = generate_id,
    now: str | None = None,
) -> list[Product]:
    """Normalise a list of raw records, skipping non-object entries."""
    products: list[Product] = []
    skipped = 0
    for item in items:
        if not isinstance(item, dict):
            skipped += 1
            continue
        products.append(
            normalize_product(
                cast(dict[str, Any], item), id_factory, now
            )
        )
    if skipped:
        logger.warning(
            "Skipped %d non-object product entries", skipped
        )
    return products


def normalize_user(
    raw: object, base: UserProfile | None = None
) -> UserProfile:
    """Shallow-merge a raw user object over *base* (or the defaults).

    Only known keys are taken; values of the wrong type keep the base
    value.
    """
    current = base or UserProfile(
        name=Settings.DEFAULT_USER_NAME, theme=Settings.DEFAULT_THEME
    )
    if not isinstance(raw, dict):
        return UserProfile(
            name=current.name, avatar=current.avatar, theme=current.theme
        )
    data = cast(dict[str, Any], raw)

    avatar = current.avatar
    if "avatar" in data:
        avatar = _optional_str(data["avatar"])

    theme = data.get("theme", current.theme)
    if theme not in Settings.THEMES:
        theme = current.theme

    return UserProfile(
        name=_non_empty_str(data.get("name"), current.name),
        avatar=avatar,
        theme=theme,
    )


def normalize_filters(raw: object) -> FilterState:
    """Merge a raw filter object over the default FilterState."""
    state = FilterState()
    if not isinstance(raw, dict):
        return state
    data = cast(dict[str, Any], raw)

    search = data.get("search")
    if isinstance(search, str):
        state.search = search
    state.category = _non_empty_str(data.get("category"), state.category)
    state.sort = _non_empty_str(data.get("sort"), state.sort)
    show_mine = data.get("showMyProducts", data.get("show_my_products"))
    if isinstance(show_mine, bool):
        state.show_my_products = show_mine
    return state


# ── Import documents ─────────────────────────────────────


@dataclass
class ImportDocument:
    """A parsed and normalised import file."""

    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    user: dict[str, Any] | None = None


@dataclass
class ParseResult:
    """Tagged outcome of parsing external JSON.

    Exactly one of ``value`` (when ``ok``) or ``error`` is meaningful.
    """

    ok: bool
    value: ImportDocument | None = None
    error: str = ""

    @classmethod
    def success(cls, value: ImportDocument) -> "ParseResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "ParseResult":
        return cls(ok=False, error=error)


def parse_import_document(
    text: str | bytes,
    id_factory: Callable[[], str] = generate_id,
    now: str | None = None,
) -> ParseResult:
    """Parse an export-shaped JSON document.

    A ``products`` array is required; ``user`` is optional and must be an
    object when present.  Never raises on bad input.
    """
    try:
        data: object = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        return ParseResult.failure(f"Invalid JSON: {exc}")

    if not isinstance(data, dict):
        return ParseResult.failure("Import document must be a JSON object")
    document = cast(dict[str, Any], data)

    raw_products = document.get("products")
    if not isinstance(raw_products, list):
        return ParseResult.failure(
            "Import document has no 'products' array"
        )

    raw_user = document.get("user")
    user: dict[str, Any] | None = None
    if isinstance(raw_user, dict):
        user = cast(dict[str, Any], raw_user)
    elif raw_user is not None:
        logger.warning("Ignoring non-object 'user' in import document")

    products = normalize_products(
        cast(list[object], raw_products), id_factory, now
    )
    return ParseResult.success(ImportDocument(products=products, user=user))
