# src/models/product.py

"""Canonical product model shared by every catalog source."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Rating:
    """Average rating out of 5 plus the number backing it."""

    rate: float = 0.0
    count: int = 0


@dataclass(frozen=True)
class Product:
    """A single normalised product listing from any catalog source."""

    id: str
    title: str
    price: float
    description: str = ""
    category: str = ""
    image: str = ""
    rating: Rating = field(default_factory=Rating)
    source: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the plain-dict shape used for JSON output."""
        return {
            "id": self.id,
            "title": self.title,
            "price": self.price,
            "description": self.description,
            "category": self.category,
            "image": self.image,
            "rating": {
                "rate": self.rating.rate,
                "count": self.rating.count,
            },
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Product":
        """Rebuild a product from :meth:`to_dict` output.

        Raises ``KeyError``/``TypeError``/``ValueError`` on malformed input.
        """
        rating: dict[str, Any] = data.get("rating") or {}
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            price=float(data["price"]),
            description=str(data.get("description", "")),
            category=str(data.get("category", "")),
            image=str(data.get("image", "")),
            rating=Rating(
                rate=float(rating.get("rate", 0) or 0),
                count=int(rating.get("count", 0) or 0),
            ),
            source=str(data.get("source", "")),
        )
