# src/ui/app.py

"""Terminal storefront: catalog browser with a persistent cart."""

import logging
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    LoadingIndicator,
    Static,
)

from src.config.settings import Settings
from src.models.cart import CartLine, CartTotals
from src.models.product import Product
from src.services.catalog_loader import CatalogLoader
from src.services.storefront_coordinator import StorefrontCoordinator
from src.storage.local_storage import LocalStorage
from src.ui.formatting import format_price, render_stars, source_label
from src.ui.screens import CartScreen, ProductDetailScreen

logger = logging.getLogger("storefront.ui")


class StorefrontApp(App[object]):
    """Terminal UI for the storefront; the coordinator's render target."""

    CSS = """
    #title { padding: 0 1; text-style: bold; }
    #toolbar { height: auto; }
    #toolbar Button { margin-right: 1; }
    #cart_badge { width: auto; padding: 1 2; }
    #status { padding: 0 1; color: $text-muted; }
    CartScreen, ProductDetailScreen { align: center middle; }
    #cart_dialog, #detail_dialog {
        width: 80%; height: auto; max-height: 90%;
        border: thick $primary; background: $surface; padding: 1 2;
    }
    #cart_table { height: auto; max-height: 20; }
    #cart_actions { height: auto; margin-top: 1; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("a", "add_selected", "Add to cart"),
        Binding("v", "quick_view", "Quick view"),
        Binding("c", "open_cart", "Cart"),
        Binding("r", "reload", "Reload"),
    ]

    def __init__(
        self,
        loader: CatalogLoader | None = None,
        storage: LocalStorage | None = None,
    ) -> None:
        super().__init__()
        self.settings = Settings()
        self._loader = loader
        self._storage = storage
        self.visible: list[Product] = []
        self._cart_screen: CartScreen | None = None
        self.coordinator: StorefrontCoordinator | None = None

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        filter_buttons = [
            Button("All", variant="primary", id="filter_all"),
            *[
                Button(src["label"], id=f"filter_{src['id']}")
                for src in self.settings.CATALOG_SOURCES
            ],
        ]
        yield Header()
        yield Container(
            Static("🛍  Storefront", id="title"),
            Horizontal(
                *filter_buttons,
                Static("🛒 0", id="cart_badge"),
                Button("Cart", id="cart_btn"),
                id="toolbar",
            ),
            Static("Loading products...", id="status"),
            LoadingIndicator(id="loader"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="catalog_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure the catalog table, restore the cart, start loading."""
        # App-level queries only see the active screen; these widgets
        # must stay reachable while a modal is on top.
        self._table = cast(
            DataTable[str | Text],
            self.query_one("#catalog_table", DataTable),
        )
        self._status = self.query_one("#status", Static)
        self._badge = self.query_one("#cart_badge", Static)
        self._loader_widget = self.query_one("#loader", LoadingIndicator)
        self._table.add_columns("Title", "Price", "Rating", "Reviews", "Store")
        self.coordinator = StorefrontCoordinator(
            self, loader=self._loader, storage=self._storage,
        )
        self.action_reload()

    def _require_coordinator(self) -> StorefrontCoordinator:
        if self.coordinator is None:
            msg = "StorefrontApp is not mounted"
            raise RuntimeError(msg)
        return self.coordinator

    # ── StorefrontView ───────────────────────────────────

    def render_catalog(self, products: list[Product]) -> None:
        self.visible = products
        table = self._table
        table.clear()
        status = self._status
        if not products:
            status.update("No products found.")
            return
        for p in products:
            table.add_row(
                p.title[:60],
                Text(format_price(p.price), style="bold green"),
                render_stars(p.rating.rate),
                str(p.rating.count) if p.rating.count else "N/A",
                source_label(p.source),
            )
        status.update(f"{len(products)} products")

    def render_cart_badge(self, count: int) -> None:
        self._badge.update(f"🛒 {count}")

    def render_cart(
        self, lines: tuple[CartLine, ...], totals: CartTotals,
    ) -> None:
        if self._cart_screen is not None:
            self._cart_screen.refresh_lines(lines, totals)

    def render_loading(self, loading: bool) -> None:
        self._loader_widget.display = loading
        self._table.display = not loading
        if loading:
            self._status.update("Loading products...")

    def show_message(self, message: str) -> None:
        self.notify(message)

    def show_error(self, message: str, retryable: bool = False) -> None:
        hint = " Press 'r' to retry." if retryable else ""
        self.notify(f"{message}{hint}", severity="error")
        if retryable:
            self._status.update(f"❌ {message}{hint}")

    def show_product_detail(self, product: Product) -> None:
        self.push_screen(
            ProductDetailScreen(product, self._require_coordinator())
        )

    def close_cart_view(self) -> None:
        screen = self._cart_screen
        self._cart_screen = None
        if screen is not None and self.screen is screen:
            self.pop_screen()

    # ── Events & actions ─────────────────────────────────

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle filter and cart button clicks."""
        button_id = event.button.id or ""
        if button_id == "cart_btn":
            self.action_open_cart()
        elif button_id.startswith("filter_"):
            source = button_id.removeprefix("filter_")
            self._require_coordinator().set_filter(source)
            for button in self.query("#toolbar Button"):
                if (button.id or "").startswith("filter_"):
                    cast(Button, button).variant = (
                        "primary" if button is event.button else "default"
                    )

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Enter on a catalog row opens the quick view."""
        if event.data_table.id == "catalog_table":
            self.action_quick_view()

    def _selected_product(self) -> Product | None:
        row = self._table.cursor_row
        if 0 <= row < len(self.visible):
            return self.visible[row]
        return None

    def action_add_selected(self) -> None:
        """Add the highlighted product to the cart."""
        product = self._selected_product()
        if product is None:
            self.notify("Select a product first", severity="warning")
            return
        self._require_coordinator().add_to_cart(product.id)

    def action_quick_view(self) -> None:
        """Open the detail view of the highlighted product."""
        product = self._selected_product()
        if product is None:
            return
        self._require_coordinator().product_detail(product.id)

    def action_open_cart(self) -> None:
        """Show the cart modal."""
        if self._cart_screen is not None:
            return
        self._cart_screen = CartScreen(self._require_coordinator())
        self.push_screen(self._cart_screen)

    def action_reload(self) -> None:
        """(Re)load the catalog in the background; also the retry path."""
        coordinator = self._require_coordinator()
        if coordinator.is_loading:
            return
        self.run_worker(
            coordinator.load_catalog(),
            exclusive=True,
            group="catalog",
        )
