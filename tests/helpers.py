# tests/helpers.py

"""Small builders shared by several test modules."""

import json
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

from src.models.product import Product, Rating

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def make_product(
    product_id: str,
    price: float = 10.0,
    source: str | None = None,
    title: str | None = None,
) -> Product:
    """Create a Product whose source defaults to the id prefix."""
    return Product(
        id=product_id,
        title=title or f"Product {product_id}",
        price=price,
        category="misc",
        rating=Rating(rate=4.0, count=10),
        source=source or product_id.split("_", 1)[0],
    )


def make_response(body: Any, status_code: int = 200) -> MagicMock:
    """Mock curl_cffi response with a JSON (or raw string) body."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = body if isinstance(body, str) else json.dumps(body)
    return resp


def load_fixture(name: str) -> Any:
    with open(FIXTURES_DIR / name, encoding="utf-8") as f:
        return json.load(f)
