# src/sources/fakestore_source.py

"""Catalog source for fakestoreapi.com."""

from typing import Any, cast

from src.errors import CatalogLoadError
from src.models.product import Product, Rating
from src.sources.base_source import BaseCatalogSource


class FakeStoreSource(BaseCatalogSource):
    """Fake Store API: a flat JSON array of products.

    Each record already carries a ``rating: {rate, count}`` object where
    ``count`` is the number of reviews.
    """

    def __init__(
        self,
        source_id: str = "fakestoreapi",
        url: str = "https://fakestoreapi.com/products",
    ) -> None:
        super().__init__(source_id, url)

    def _parse_item(self, item: dict[str, Any]) -> Product:
        """Parse a single API item into a Product."""
        rating: dict[str, Any] = item.get("rating", {}) or {}
        return Product(
            id=self.make_id(item["id"]),
            title=str(item.get("title", "")),
            price=float(item.get("price", 0) or 0),
            description=str(item.get("description", "") or ""),
            category=str(item.get("category", "") or ""),
            image=str(item.get("image", "") or ""),
            rating=Rating(
                rate=float(rating.get("rate", 0) or 0),
                count=int(rating.get("count", 0) or 0),
            ),
            source=self.source_id,
        )

    def _parse_payload(self, payload: Any) -> list[Product]:
        if not isinstance(payload, list):
            msg = f"{self.source_id}: expected a JSON array"
            raise CatalogLoadError(msg, source=self.source_id)
        items = cast(list[dict[str, Any]], payload)
        return [self._parse_item(item) for item in items]
