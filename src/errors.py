# src/errors.py

"""Exception taxonomy shared by the storefront core, server and UI."""


class StorefrontError(Exception):
    """Base class for every error raised on purpose by the storefront."""


class CatalogLoadError(StorefrontError):
    """A catalog source could not be fetched or parsed.

    The whole load is aborted; callers keep whatever catalog they had.
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class ProductNotFoundError(StorefrontError):
    """A cart or detail operation referenced an unknown product id."""

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class CartPersistenceError(StorefrontError):
    """Reading or writing the persisted cart failed."""


class ValidationError(StorefrontError):
    """Admin API payload is missing or has invalid required fields."""


class RecordNotFoundError(StorefrontError):
    """Admin API referenced a category or product row that does not exist."""


class PaymentError(StorefrontError):
    """The payment processor rejected the request or errored."""
