from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

DEFAULT_BREED = "Unknown"


@dataclass(frozen=True)
class Dog:
    name: str
    breed: str = DEFAULT_BREED
    is_liked: bool = False
    image_url: Optional[str] = None

    @property
    def name_key(self) -> str:
        """Return the case-insensitive key used for uniqueness checks."""
        return self.name.casefold()

    def with_liked_toggled(self) -> Dog:
        """Return a copy with ``is_liked`` flipped and nothing else changed."""
        return replace(self, is_liked=not self.is_liked)

    def to_dict(self) -> dict:
        """Return a JSON-serializable representation.

        Returns:
            Dictionary with the dog's public fields.
        """
        return {
            "name": self.name,
            "breed": self.breed,
            "is_liked": self.is_liked,
            "image_url": self.image_url,
        }
