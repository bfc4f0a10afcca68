# sharebox/models/product.py

"""Product data model for the shared catalog."""

from dataclasses import dataclass, field


@dataclass
class Product:
    """A single catalog entry shared by a user."""

    id: str
    title: str
    description: str = ""
    price: float = 0
    category: str = "Other"
    image: str | None = None
    likes: int = 0
    comments: list[str] = field(default_factory=lambda: list[str]())
    created_at: str = ""
    created_by: str = "Guest User"

    def to_dict(self) -> dict[str, object]:
        """Serialise to the camelCase shape used in storage and exports."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "image": self.image,
            "likes": self.likes,
            "comments": list(self.comments),
            "createdAt": self.created_at,
            "createdBy": self.created_by,
        }
