# src/services/storefront_coordinator.py

"""Reactive glue between the catalog, the cart and whatever renders them."""

import logging
from typing import Protocol

from src.config.settings import Settings
from src.errors import CatalogLoadError, ProductNotFoundError
from src.models.cart import CartLine, CartTotals
from src.models.product import Product
from src.services.catalog_loader import CatalogLoader
from src.storage.local_storage import LocalStorage
from src.store.cart_store import CartEvent
from src.store.persistent_cart import PersistentCartStore

logger = logging.getLogger("storefront.coordinator")

CHECKOUT_MESSAGE = (
    "Thanks for your purchase! This is a demo store, "
    "so no real payment has been taken."
)


class StorefrontView(Protocol):
    """Rendering surface driven by :class:`StorefrontCoordinator`."""

    def render_catalog(self, products: list[Product]) -> None: ...

    def render_cart_badge(self, count: int) -> None: ...

    def render_cart(
        self, lines: tuple[CartLine, ...], totals: CartTotals,
    ) -> None: ...

    def render_loading(self, loading: bool) -> None: ...

    def show_message(self, message: str) -> None: ...

    def show_error(self, message: str, retryable: bool = False) -> None: ...

    def show_product_detail(self, product: Product) -> None: ...

    def close_cart_view(self) -> None: ...


class StorefrontCoordinator:
    """Owns the catalog and filter state and projects them onto a view.

    Cart changes arrive as :class:`CartEvent` notifications and only
    ever re-render the cart badge and, when open, the cart listing.
    The catalog is re-rendered on load and on filter change only.
    """

    def __init__(
        self,
        view: StorefrontView,
        loader: CatalogLoader | None = None,
        storage: LocalStorage | None = None,
    ) -> None:
        self.view = view
        self.loader = loader or CatalogLoader()
        self.catalog: list[Product] = []
        self.current_filter: str = Settings.FILTER_ALL
        self.is_loading: bool = False
        self.cart_open: bool = False
        self.cart = PersistentCartStore(self.find_product, storage=storage)
        self._unsubscribe = self.cart.subscribe(self._on_cart_changed)
        self.view.render_cart_badge(self.cart.totals().total_item_count)

    # ── Catalog ──────────────────────────────────────────

    async def load_catalog(self) -> bool:
        """Replace the catalog with a fresh load; safe to call again to retry.

        Returns ``True`` on success.  On failure the previous catalog
        stays in place and a retryable error is shown.
        """
        self.is_loading = True
        self.view.render_loading(True)
        try:
            products = await self.loader.load_catalog()
        except CatalogLoadError as exc:
            logger.error("Catalog load failed: %s", exc)
            self.view.show_error(
                "Sorry, the products could not be loaded. "
                "Please try again.",
                retryable=True,
            )
            return False
        finally:
            self.is_loading = False
            self.view.render_loading(False)

        self.catalog = products
        self.view.render_catalog(self.visible_products())
        return True

    def set_filter(self, source: str) -> None:
        """Show ``all`` products or only those from one source."""
        valid = [Settings.FILTER_ALL, *Settings.source_ids()]
        if source not in valid:
            msg = f"Unknown source filter '{source}'"
            raise ValueError(msg)
        self.current_filter = source
        self.view.render_catalog(self.visible_products())

    def visible_products(self) -> list[Product]:
        """The catalog filtered by the current source, in load order."""
        if self.current_filter == Settings.FILTER_ALL:
            return list(self.catalog)
        return [p for p in self.catalog if p.source == self.current_filter]

    def find_product(self, product_id: str) -> Product | None:
        for product in self.catalog:
            if product.id == product_id:
                return product
        return None

    def product_detail(self, product_id: str) -> Product | None:
        """Open the detail view for a product; unknown ids are reported."""
        product = self.find_product(product_id)
        if product is None:
            logger.error("Product not found: %s", product_id)
            self.view.show_error(f"Product not found: {product_id}")
            return None
        self.view.show_product_detail(product)
        return product

    # ── Cart intents ─────────────────────────────────────

    def add_to_cart(self, product_id: str) -> bool:
        try:
            line = self.cart.add_item(product_id)
        except ProductNotFoundError as exc:
            self._report_missing(exc)
            return False
        self.view.show_message(f"{line.product.title} added to cart!")
        return True

    def increase_quantity(self, product_id: str) -> bool:
        try:
            self.cart.increase_quantity(product_id)
        except ProductNotFoundError as exc:
            self._report_missing(exc)
            return False
        return True

    def decrease_quantity(self, product_id: str) -> bool:
        try:
            self.cart.decrease_quantity(product_id)
        except ProductNotFoundError as exc:
            self._report_missing(exc)
            return False
        return True

    def remove_from_cart(self, product_id: str) -> None:
        self.cart.remove_item(product_id)

    def open_cart(self) -> None:
        self.cart_open = True
        self._render_cart()

    def close_cart(self) -> None:
        self.cart_open = False
        self.view.close_cart_view()

    def checkout(self) -> bool:
        """Acknowledge, clear and close. An empty cart does nothing."""
        if self.cart.is_empty():
            return False
        totals = self.cart.totals()
        logger.info(
            "Checkout: %d items, total %.2f",
            totals.total_item_count,
            totals.total,
        )
        self.view.show_message(CHECKOUT_MESSAGE)
        self.cart.clear()
        self.close_cart()
        return True

    # ── Reactive projection ──────────────────────────────

    def _on_cart_changed(self, event: CartEvent) -> None:
        logger.debug("Cart event %s (%s)", event.kind, event.product_id)
        self.view.render_cart_badge(self.cart.totals().total_item_count)
        if self.cart_open:
            self._render_cart()

    def _render_cart(self) -> None:
        self.view.render_cart(self.cart.lines, self.cart.totals())

    def _report_missing(self, exc: ProductNotFoundError) -> None:
        logger.error("%s", exc)
        self.view.show_error(str(exc))

    def close(self) -> None:
        """Detach from the cart store."""
        self._unsubscribe()
