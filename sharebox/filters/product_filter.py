# sharebox/filters/product_filter.py

"""Filter and sort derivation for the catalog view."""

import logging

from sharebox.filters.normalizer import parse_timestamp
from sharebox.models.filter_state import FilterState
from sharebox.models.product import Product

logger = logging.getLogger("sharebox.filters")


class ProductFilter:
    """Pure functions that derive the display list from store state."""

    @staticmethod
    def filter_by_search(
        products: list[Product], search: str
    ) -> list[Product]:
        """Keep products whose title or description contains *search*.

        Matching is a case-insensitive substring test on the trimmed term.
        A blank term keeps everything.
        """
        term = search.strip().lower()
        if not term:
            return list(products)
        return [
            p
            for p in products
            if term in p.title.lower() or term in p.description.lower()
        ]

    @staticmethod
    def filter_by_category(
        products: list[Product], category: str
    ) -> list[Product]:
        """Keep exact category matches; ``"all"`` is a no-op."""
        if not category or category == "all":
            return list(products)
        return [p for p in products if p.category == category]

    @staticmethod
    def filter_by_owner(
        products: list[Product], user_name: str
    ) -> list[Product]:
        """Keep products attributed to *user_name* at query time."""
        return [p for p in products if p.created_by == user_name]

    @staticmethod
    def sort_products(
        products: list[Product], sort: str
    ) -> list[Product]:
        """Return a sorted copy; unknown sort keys fall back to newest.

        ``sorted`` is stable, so tied products keep their input order.
        """
        if sort == "price-low":
            return sorted(products, key=lambda p: p.price or 0)
        if sort == "price-high":
            return sorted(
                products, key=lambda p: p.price or 0, reverse=True
            )
        if sort == "most-liked":
            return sorted(
                products, key=lambda p: p.likes or 0, reverse=True
            )
        if sort != "newest":
            logger.debug("Unknown sort %r, using newest", sort)
        return sorted(
            products,
            key=lambda p: parse_timestamp(p.created_at),
            reverse=True,
        )

    @staticmethod
    def apply(
        products: list[Product],
        filters: FilterState,
        user_name: str,
    ) -> list[Product]:
        """Run the full search → category → owner → sort pipeline."""
        result = ProductFilter.filter_by_search(products, filters.search)
        result = ProductFilter.filter_by_category(result, filters.category)
        if filters.show_my_products:
            result = ProductFilter.filter_by_owner(result, user_name)
        result = ProductFilter.sort_products(result, filters.sort)

        logger.debug(
            "Filtered %d of %d products (filters=%s)",
            len(result),
            len(products),
            filters,
        )
        return result
