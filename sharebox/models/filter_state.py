# sharebox/models/filter_state.py

"""Active filter and sort configuration for the catalog view."""

from dataclasses import dataclass


@dataclass
class FilterState:
    """Search, category, sort and ownership filters."""

    search: str = ""
    category: str = "all"
    sort: str = "newest"
    show_my_products: bool = False

    @property
    def is_active(self) -> bool:
        """True when any filter narrows the product list."""
        return bool(
            self.search.strip()
            or self.category != "all"
            or self.show_my_products
        )

    def to_dict(self) -> dict[str, object]:
        """Serialise to the camelCase storage shape."""
        return {
            "search": self.search,
            "category": self.category,
            "sort": self.sort,
            "showMyProducts": self.show_my_products,
        }
