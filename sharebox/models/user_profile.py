# sharebox/models/user_profile.py

"""Profile of the local catalog user."""

from dataclasses import dataclass


@dataclass
class UserProfile:
    """Display identity and preferences of the current user.

    ``name`` doubles as the ownership key for "my products" filtering;
    it is not a stable identifier.
    """

    name: str = "Guest User"
    avatar: str | None = None
    theme: str = "light"

    def to_dict(self) -> dict[str, object]:
        """Serialise for storage and exports."""
        return {
            "name": self.name,
            "avatar": self.avatar,
            "theme": self.theme,
        }
