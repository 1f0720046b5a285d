# src/ui/screens.py

"""Modal screens: the cart and the product quick view."""

from typing import TYPE_CHECKING, cast

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, DataTable, Static

from src.models.cart import CartLine, CartTotals
from src.models.product import Product
from src.ui.formatting import format_price, render_stars, source_label

if TYPE_CHECKING:
    from src.services.storefront_coordinator import StorefrontCoordinator


class CartScreen(ModalScreen[None]):
    """Cart listing with per-line controls, totals and checkout."""

    BINDINGS = [
        Binding("plus,equals_sign", "increase", "+1"),
        Binding("minus", "decrease", "-1"),
        Binding("delete,backspace", "remove", "Remove"),
        Binding("escape", "close", "Close"),
    ]

    def __init__(self, coordinator: "StorefrontCoordinator") -> None:
        super().__init__()
        self.coordinator = coordinator
        self.lines: tuple[CartLine, ...] = ()

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static("Your cart", id="cart_title"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="cart_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            Static("", id="cart_empty"),
            Static("", id="cart_subtotal"),
            Static("", id="cart_total"),
            Horizontal(
                Button("Checkout", variant="success", id="checkout_btn"),
                Button("Close", id="close_cart_btn"),
                id="cart_actions",
            ),
            id="cart_dialog",
        )

    def on_mount(self) -> None:
        table = cast(
            DataTable[str | Text],
            self.query_one("#cart_table", DataTable),
        )
        table.add_columns("Product", "Price", "Qty", "Line total")
        self.coordinator.open_cart()

    def refresh_lines(
        self, lines: tuple[CartLine, ...], totals: CartTotals,
    ) -> None:
        """Redraw the listing and the totals."""
        self.lines = lines
        table = cast(
            DataTable[str | Text],
            self.query_one("#cart_table", DataTable),
        )
        table.clear()
        for line in lines:
            table.add_row(
                line.product.title[:50],
                format_price(line.product.price),
                str(line.quantity),
                Text(format_price(line.line_total), style="bold"),
            )
        empty_text = "" if lines else "Your cart is empty"
        self.query_one("#cart_empty", Static).update(empty_text)
        self.query_one("#cart_subtotal", Static).update(
            f"Subtotal: {format_price(totals.subtotal)}"
        )
        self.query_one("#cart_total", Static).update(
            f"Total: {format_price(totals.total)}"
        )

    def _selected_id(self) -> str | None:
        table = self.query_one("#cart_table", DataTable)
        row = table.cursor_row
        if 0 <= row < len(self.lines):
            return self.lines[row].id
        return None

    def action_increase(self) -> None:
        product_id = self._selected_id()
        if product_id is not None:
            self.coordinator.increase_quantity(product_id)

    def action_decrease(self) -> None:
        product_id = self._selected_id()
        if product_id is not None:
            self.coordinator.decrease_quantity(product_id)

    def action_remove(self) -> None:
        product_id = self._selected_id()
        if product_id is not None:
            self.coordinator.remove_from_cart(product_id)

    def action_close(self) -> None:
        self.coordinator.close_cart()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "checkout_btn":
            self.coordinator.checkout()
        elif event.button.id == "close_cart_btn":
            self.coordinator.close_cart()


class ProductDetailScreen(ModalScreen[None]):
    """Quick view of one product with an add-to-cart button."""

    BINDINGS = [
        Binding("escape", "close", "Close"),
        Binding("a", "add", "Add to cart"),
    ]

    def __init__(
        self,
        product: Product,
        coordinator: "StorefrontCoordinator",
    ) -> None:
        super().__init__()
        self.product = product
        self.coordinator = coordinator

    def compose(self) -> ComposeResult:
        p = self.product
        count = str(p.rating.count) if p.rating.count else "N/A"
        yield Vertical(
            Static(Text(p.title, style="bold"), id="detail_title"),
            Static(format_price(p.price), id="detail_price"),
            Static(
                f"{render_stars(p.rating.rate)} ({count} reviews)",
                id="detail_rating",
            ),
            Static(
                f"{p.category} · {source_label(p.source)}",
                id="detail_category",
            ),
            Static(p.description, id="detail_description"),
            Static(Text(p.image, style="dim"), id="detail_image"),
            Horizontal(
                Button("Add to cart", variant="primary", id="detail_add_btn"),
                Button("Close", id="detail_close_btn"),
            ),
            id="detail_dialog",
        )

    def action_add(self) -> None:
        self.coordinator.add_to_cart(self.product.id)

    def action_close(self) -> None:
        self.dismiss()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "detail_add_btn":
            self.action_add()
        elif event.button.id == "detail_close_btn":
            self.dismiss()
