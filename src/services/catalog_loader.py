# src/services/catalog_loader.py

"""Loads and merges the catalogs of every registered source."""

import asyncio
import importlib
import logging
from typing import Any

from src.config.settings import Settings
from src.errors import CatalogLoadError
from src.models.product import Product

logger = logging.getLogger("storefront.catalog")


def load_source_class(dotted_path: str) -> type[Any]:
    """Dynamically import a source class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


class CatalogLoader:
    """Fetches all sources concurrently and returns one ordered catalog.

    The load is all-or-nothing: if any source fails (or the whole load
    exceeds ``timeout``) a :class:`CatalogLoadError` is raised and no
    products are returned.
    """

    def __init__(
        self,
        sources: list[dict[str, str]] | None = None,
        timeout: float | None = None,
    ) -> None:
        self.sources = (
            sources if sources is not None else Settings.CATALOG_SOURCES
        )
        self.timeout = (
            timeout if timeout is not None
            else Settings.CATALOG_LOAD_TIMEOUT
        )

    async def _fetch_one(self, source: dict[str, str]) -> list[Product]:
        """Instantiate one source and run its blocking fetch in a thread."""
        try:
            source_cls = load_source_class(source["loader"])
            instance = source_cls(source["id"], source["url"])
        except (ImportError, AttributeError, KeyError, ValueError) as exc:
            msg = f"{source.get('id', '?')}: cannot load source ({exc})"
            raise CatalogLoadError(msg, source=source.get("id")) from exc
        products: list[Product] = await asyncio.to_thread(instance.fetch)
        return products

    async def load_catalog(self) -> list[Product]:
        """Fetch every source and concatenate them in registry order.

        Raises:
            CatalogLoadError: when any source fails or the load times out.
        """
        tasks = [self._fetch_one(src) for src in self.sources]
        try:
            batches = await asyncio.wait_for(
                asyncio.gather(*tasks, return_exceptions=True),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            logger.error(
                "Catalog load timed out after %.1fs", self.timeout
            )
            msg = f"Catalog load timed out after {self.timeout:.0f}s"
            raise CatalogLoadError(msg) from exc

        products: list[Product] = []
        errors: list[BaseException] = []
        for src, batch in zip(self.sources, batches):
            if isinstance(batch, BaseException):
                errors.append(batch)
                logger.error(
                    "Catalog source '%s' failed: %s",
                    src.get("id", "?"),
                    batch,
                    exc_info=batch,
                )
            else:
                products.extend(batch)

        if errors:
            first = errors[0]
            if isinstance(first, CatalogLoadError):
                raise first
            msg = f"Catalog load failed: {first}"
            raise CatalogLoadError(msg) from first

        logger.info(
            "Catalog loaded: %d products from %d sources",
            len(products),
            len(self.sources),
        )
        return products
