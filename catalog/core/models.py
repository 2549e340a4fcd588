"""Data models for catalog records."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Category:
    """A named category referenced by items."""

    id: int
    name: str


@dataclass
class Item:
    """An item in the catalog.

    ``image_name`` is the stable name of a blob in the image store, or an
    empty string when the item has no image. ``id`` is assigned on insert.
    """

    name: str
    category: str
    image_name: str = ""
    id: Optional[int] = None

    def to_dict(self) -> dict:
        # the identifier is never part of the external representation
        return {
            "name": self.name,
            "category": self.category,
            "image": self.image_name,
        }

    def to_record(self) -> dict:
        """Serialize for the file-backed store (identifier included)."""
        return {"id": self.id, **self.to_dict()}

    @classmethod
    def from_dict(cls, data: dict) -> "Item":
        return cls(
            id=data.get("id"),
            name=data["name"],
            category=data["category"],
            image_name=data.get("image") or "",
        )


@dataclass
class StoredImage:
    """Metadata for a blob held by the image store."""

    name: str
    size: int  # bytes
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def hash(self) -> str:
        return self.name.rsplit(".", 1)[0]
