# src/store/cart_store.py

"""In-memory shopping cart with quantity invariants and change events."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from src.errors import ProductNotFoundError
from src.models.cart import CartLine, CartTotals
from src.models.product import Product

logger = logging.getLogger("storefront.cart")

ProductResolver = Callable[[str], Product | None]


@dataclass(frozen=True)
class CartEvent:
    """Emitted to listeners after every state change."""

    kind: str  # "added", "increased", "decreased", "removed", "cleared", "replaced"
    product_id: str | None = None


CartListener = Callable[[CartEvent], None]


class CartStore:
    """Owns the ordered list of cart lines.

    Invariants:
    - at most one line per product id;
    - every line has ``quantity >= 1``;
    - line order is insertion order.

    Operations that reference a missing product or line raise
    :class:`ProductNotFoundError` *before* touching state, so a failed
    call is always a no-op.
    """

    def __init__(
        self,
        resolve_product: ProductResolver,
        lines: Iterable[CartLine] = (),
    ) -> None:
        self._resolve_product = resolve_product
        self._lines: list[CartLine] = []
        self._listeners: list[CartListener] = []
        self._load_lines(lines)

    # ── Reads ────────────────────────────────────────────

    @property
    def lines(self) -> tuple[CartLine, ...]:
        """Snapshot of the current lines, in insertion order."""
        return tuple(self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def get_line(self, product_id: str) -> CartLine | None:
        index = self._index_of(product_id)
        return self._lines[index] if index is not None else None

    def totals(self) -> CartTotals:
        """Compute count, subtotal and total from the current lines."""
        count = sum(line.quantity for line in self._lines)
        subtotal = round(
            sum(line.product.price * line.quantity for line in self._lines),
            2,
        )
        return CartTotals(
            total_item_count=count,
            subtotal=subtotal,
            total=subtotal,
        )

    # ── Observers ────────────────────────────────────────

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: CartEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    # ── Mutations ────────────────────────────────────────

    def add_item(self, product_id: str) -> CartLine:
        """Add one unit of a catalog product.

        Raises:
            ProductNotFoundError: if the id does not resolve to a product.
        """
        product = self._resolve_product(product_id)
        if product is None:
            logger.warning(
                "add_item ignored, unknown product '%s'", product_id
            )
            raise ProductNotFoundError(product_id)

        index = self._index_of(product_id)
        if index is not None:
            line = self._lines[index].with_quantity(
                self._lines[index].quantity + 1
            )
            self._lines[index] = line
        else:
            line = CartLine(product=product, quantity=1)
            self._lines.append(line)
        logger.debug(
            "Added '%s' (quantity now %d)", product_id, line.quantity
        )
        self._notify(CartEvent("added", product_id))
        return line

    def increase_quantity(self, product_id: str) -> CartLine:
        """Increment an existing line by one."""
        index = self._require_index(product_id)
        line = self._lines[index].with_quantity(
            self._lines[index].quantity + 1
        )
        self._lines[index] = line
        self._notify(CartEvent("increased", product_id))
        return line

    def decrease_quantity(self, product_id: str) -> CartLine | None:
        """Decrement an existing line; a line at 1 is removed.

        Returns the updated line, or ``None`` when the line was removed.
        """
        index = self._require_index(product_id)
        current = self._lines[index]
        if current.quantity <= 1:
            self.remove_item(product_id)
            return None
        line = current.with_quantity(current.quantity - 1)
        self._lines[index] = line
        self._notify(CartEvent("decreased", product_id))
        return line

    def remove_item(self, product_id: str) -> bool:
        """Delete the line for ``product_id``. Missing ids are ignored.

        Returns ``True`` if a line was removed.
        """
        before = len(self._lines)
        self._lines = [
            line for line in self._lines if line.id != product_id
        ]
        removed = len(self._lines) != before
        self._notify(CartEvent("removed", product_id))
        return removed

    def clear(self) -> None:
        """Empty the cart."""
        self._lines.clear()
        logger.info("Cart cleared")
        self._notify(CartEvent("cleared"))

    def replace_lines(self, lines: Iterable[CartLine]) -> None:
        """Swap in a whole new line list (used when hydrating)."""
        self._lines = []
        self._load_lines(lines)
        self._notify(CartEvent("replaced"))

    # ── Helpers ──────────────────────────────────────────

    def _load_lines(self, lines: Iterable[CartLine]) -> None:
        """Append lines, merging duplicate ids and dropping empty lines."""
        for line in lines:
            if line.quantity < 1:
                continue
            index = self._index_of(line.id)
            if index is None:
                self._lines.append(line)
            else:
                merged = self._lines[index].quantity + line.quantity
                self._lines[index] = self._lines[index].with_quantity(merged)

    def _index_of(self, product_id: str) -> int | None:
        for i, line in enumerate(self._lines):
            if line.id == product_id:
                return i
        return None

    def _require_index(self, product_id: str) -> int:
        index = self._index_of(product_id)
        if index is None:
            logger.warning("No cart line for product '%s'", product_id)
            raise ProductNotFoundError(product_id)
        return index
