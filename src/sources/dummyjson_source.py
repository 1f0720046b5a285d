# src/sources/dummyjson_source.py

"""Catalog source for dummyjson.com."""

from typing import Any, cast

from src.errors import CatalogLoadError
from src.models.product import Product, Rating
from src.sources.base_source import BaseCatalogSource


class DummyJsonSource(BaseCatalogSource):
    """DummyJSON: ``{"products": [...]}`` with a scalar rating.

    DummyJSON has no review count.  Its ``stock`` value is used as the
    rating count instead.
    """

    def __init__(
        self,
        source_id: str = "dummyjson",
        url: str = "https://dummyjson.com/products",
    ) -> None:
        super().__init__(source_id, url)

    @staticmethod
    def _pick_image(item: dict[str, Any]) -> str:
        """Thumbnail first, then the first gallery image."""
        thumbnail = item.get("thumbnail")
        if thumbnail:
            return str(thumbnail)
        images: list[Any] = item.get("images", []) or []
        return str(images[0]) if images else ""

    def _parse_item(self, item: dict[str, Any]) -> Product:
        """Parse a single API item into a Product."""
        return Product(
            id=self.make_id(item["id"]),
            title=str(item.get("title", "")),
            price=float(item.get("price", 0) or 0),
            description=str(item.get("description", "") or ""),
            category=str(item.get("category", "") or ""),
            image=self._pick_image(item),
            rating=Rating(
                rate=float(item.get("rating", 0) or 0),
                count=int(item.get("stock", 0) or 0),
            ),
            source=self.source_id,
        )

    def _parse_payload(self, payload: Any) -> list[Product]:
        raw_products: Any = (
            payload.get("products") if isinstance(payload, dict) else None
        )
        if not isinstance(raw_products, list):
            msg = f"{self.source_id}: missing 'products' array"
            raise CatalogLoadError(msg, source=self.source_id)
        items = cast(list[dict[str, Any]], raw_products)
        return [self._parse_item(item) for item in items]
