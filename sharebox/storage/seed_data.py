# sharebox/storage/seed_data.py

"""Fallback catalog used when no valid persisted state exists."""

from typing import Any

SAMPLE_PRODUCTS: list[dict[str, Any]] = [
    {
        "title": "Premium Wireless Headphones",
        "description": (
            "High-quality noise-cancelling headphones with 30h battery life"
        ),
        "price": 199.99,
        "category": "Electronics",
        "likes": 15,
        "comments": ["Amazing sound quality!", "Very comfortable"],
    },
    {
        "title": "Designer Cotton T-Shirt",
        "description": "100% organic cotton, perfect fit for everyday wear",
        "price": 29.99,
        "category": "Clothing",
        "likes": 8,
        "comments": ["Love the fabric", "True to size"],
    },
    {
        "title": "Smart Watch Pro",
        "description": (
            "Track your fitness and stay connected with this advanced "
            "smart watch"
        ),
        "price": 249.99,
        "category": "Electronics",
        "likes": 12,
        "comments": ["Great battery life", "Love the design"],
    },
    {
        "title": "Leather Wallet",
        "description": "Genuine leather wallet with multiple card slots",
        "price": 39.99,
        "category": "Clothing",
        "likes": 5,
        "comments": ["Looks elegant", "Good quality"],
    },
    {
        "title": "Running Shoes",
        "description": "Lightweight running shoes with superior cushioning",
        "price": 89.99,
        "category": "Sports",
        "likes": 7,
        "comments": ["Very comfortable", "Great for running"],
    },
]


def sample_products() -> list[dict[str, Any]]:
    """Return fresh copies of the seed records (ids assigned on load)."""
    return [
        {**item, "comments": list(item["comments"])}
        for item in SAMPLE_PRODUCTS
    ]
