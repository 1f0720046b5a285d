# src/models/cart.py

"""Cart line and totals models."""

from dataclasses import dataclass, replace
from typing import Any

from src.models.product import Product


@dataclass(frozen=True)
class CartLine:
    """One product in the cart together with its quantity (always >= 1)."""

    product: Product
    quantity: int = 1

    @property
    def id(self) -> str:
        return self.product.id

    @property
    def line_total(self) -> float:
        return round(self.product.price * self.quantity, 2)

    def with_quantity(self, quantity: int) -> "CartLine":
        """Return a copy of this line with a new quantity."""
        return replace(self, quantity=quantity)

    def to_dict(self) -> dict[str, Any]:
        """Flatten into the persisted shape: product fields + quantity."""
        data = self.product.to_dict()
        data["quantity"] = self.quantity
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CartLine":
        """Rebuild a line from :meth:`to_dict` output.

        Raises ``ValueError`` when the stored quantity is not positive.
        """
        quantity = int(data["quantity"])
        if quantity < 1:
            msg = f"Invalid quantity {quantity} for {data.get('id')}"
            raise ValueError(msg)
        return cls(product=Product.from_dict(data), quantity=quantity)


@dataclass(frozen=True)
class CartTotals:
    """Aggregates derived from the cart lines."""

    total_item_count: int = 0
    subtotal: float = 0.0
    total: float = 0.0
