# src/store/persistent_cart.py

"""Write-through persistence around :class:`CartStore`."""

import json
import logging
from collections.abc import Callable
from typing import Any

from src.config.settings import Settings
from src.errors import CartPersistenceError
from src.models.cart import CartLine, CartTotals
from src.storage.local_storage import LocalStorage
from src.store.cart_store import CartListener, CartStore, ProductResolver

logger = logging.getLogger("storefront.cart.persistence")


def serialize_lines(lines: tuple[CartLine, ...]) -> str:
    """Encode cart lines as the JSON array stored under the cart key."""
    return json.dumps(
        [line.to_dict() for line in lines], ensure_ascii=False
    )


def deserialize_lines(raw: str) -> list[CartLine]:
    """Decode a stored cart.

    Raises:
        CartPersistenceError: if the data is not a valid list of lines.
    """
    try:
        data: Any = json.loads(raw)
        if not isinstance(data, list):
            msg = "stored cart is not a JSON array"
            raise CartPersistenceError(msg)
        return [CartLine.from_dict(entry) for entry in data]
    except CartPersistenceError:
        raise
    except (
        ValueError,
        TypeError,
        KeyError,
        AttributeError,
        OverflowError,
        RecursionError,
    ) as exc:
        raise CartPersistenceError(f"corrupt cart data: {exc}") from exc


class PersistentCartStore:
    """Same API as :class:`CartStore`, plus durable storage.

    The stored snapshot is read exactly once, at construction.  Every
    mutating call writes the full snapshot before returning, so the next
    read of the storage always sees the latest state.  Storage failures
    never reach the caller: unreadable data hydrates to an empty cart and
    failed writes are logged.
    """

    def __init__(
        self,
        resolve_product: ProductResolver,
        storage: LocalStorage | None = None,
        key: str | None = None,
        inner: CartStore | None = None,
    ) -> None:
        self.storage = storage or LocalStorage()
        self.key = key or Settings.CART_STORAGE_KEY
        self._inner = inner or CartStore(resolve_product)
        self._inner.replace_lines(self._hydrate())

    # ── Persistence ──────────────────────────────────────

    def _hydrate(self) -> list[CartLine]:
        try:
            raw = self.storage.get_item(self.key)
            if raw is None:
                return []
            lines = deserialize_lines(raw)
        except (CartPersistenceError, OSError, ValueError) as exc:
            logger.warning(
                "Ignoring unreadable stored cart in %s: %s",
                self.storage.file_path,
                exc,
            )
            return []
        logger.info("Restored %d cart lines from storage", len(lines))
        return lines

    def _persist(self) -> None:
        try:
            self.storage.set_item(
                self.key, serialize_lines(self._inner.lines)
            )
        except (OSError, TypeError, ValueError) as exc:
            logger.error(
                "Cart write to %s failed: %s",
                self.storage.file_path,
                exc,
                exc_info=True,
            )

    # ── Delegated reads ──────────────────────────────────

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return self._inner.lines

    def is_empty(self) -> bool:
        return self._inner.is_empty()

    def get_line(self, product_id: str) -> CartLine | None:
        return self._inner.get_line(product_id)

    def totals(self) -> CartTotals:
        return self._inner.totals()

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        return self._inner.subscribe(listener)

    # ── Write-through mutations ──────────────────────────

    # Written even when a listener raises after the state changed.

    def add_item(self, product_id: str) -> CartLine:
        try:
            return self._inner.add_item(product_id)
        finally:
            self._persist()

    def increase_quantity(self, product_id: str) -> CartLine:
        try:
            return self._inner.increase_quantity(product_id)
        finally:
            self._persist()

    def decrease_quantity(self, product_id: str) -> CartLine | None:
        try:
            return self._inner.decrease_quantity(product_id)
        finally:
            self._persist()

    def remove_item(self, product_id: str) -> bool:
        try:
            return self._inner.remove_item(product_id)
        finally:
            self._persist()

    def clear(self) -> None:
        try:
            self._inner.clear()
        finally:
            self._persist()
