# src/server/admin_api.py

"""Admin CRUD endpoints for categories and products."""

import logging
from typing import Any

from flask import Blueprint, Response, current_app, jsonify, request

from src.errors import ValidationError
from src.storage.catalog_db import CatalogDB

logger = logging.getLogger("storefront.server.admin")

admin_bp = Blueprint("admin_api", __name__, url_prefix="/api")


def _db() -> CatalogDB:
    db: CatalogDB = current_app.extensions["catalog_db"]
    return db


def _json_body() -> dict[str, Any]:
    data: Any = request.get_json(silent=True)
    if not isinstance(data, dict):
        msg = "Request body must be a JSON object"
        raise ValidationError(msg)
    return data


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def validate_category(data: dict[str, Any]) -> dict[str, Any]:
    """Return clean category fields or raise :class:`ValidationError`."""
    name = str(data.get("name") or "").strip()
    if not name:
        msg = "Category name is required"
        raise ValidationError(msg)
    return {
        "name": name,
        "description": _optional_text(data.get("description")),
    }


def validate_product(data: dict[str, Any]) -> dict[str, Any]:
    """Return clean product fields or raise :class:`ValidationError`.

    ``category_id``, ``name`` and a positive ``price`` are required;
    ``stock`` defaults to 0.
    """
    raw_category = data.get("category_id")
    name = str(data.get("name") or "").strip()
    raw_price = data.get("price")
    if not raw_category or not name or raw_price in (None, "", 0):
        msg = "Category, name and price are required"
        raise ValidationError(msg)

    try:
        category_id = int(raw_category)
    except (TypeError, ValueError) as exc:
        msg = "category_id must be an integer"
        raise ValidationError(msg) from exc

    try:
        price = float(raw_price)
    except (TypeError, ValueError) as exc:
        msg = "price must be a number"
        raise ValidationError(msg) from exc
    if price <= 0:
        msg = "price must be greater than zero"
        raise ValidationError(msg)

    raw_stock = data.get("stock") or 0
    try:
        stock = int(raw_stock)
    except (TypeError, ValueError) as exc:
        msg = "stock must be an integer"
        raise ValidationError(msg) from exc
    if stock < 0:
        msg = "stock cannot be negative"
        raise ValidationError(msg)

    return {
        "category_id": category_id,
        "name": name,
        "price": price,
        "description": _optional_text(data.get("description")),
        "stock": stock,
    }


# ── Categories ───────────────────────────────────────────


@admin_bp.get("/categories")
def list_categories() -> Response:
    return jsonify(_db().list_categories())


@admin_bp.get("/categories/<int:category_id>")
def get_category(category_id: int) -> Response:
    return jsonify(_db().get_category(category_id))


@admin_bp.post("/categories")
def create_category() -> tuple[Response, int]:
    fields = validate_category(_json_body())
    created = _db().create_category(**fields)
    return jsonify(created), 201


@admin_bp.put("/categories/<int:category_id>")
def update_category(category_id: int) -> Response:
    fields = validate_category(_json_body())
    return jsonify(_db().update_category(category_id, **fields))


@admin_bp.delete("/categories/<int:category_id>")
def delete_category(category_id: int) -> Response:
    _db().delete_category(category_id)
    return jsonify(
        {"success": True, "message": "Category deleted"}
    )


# ── Products ─────────────────────────────────────────────


@admin_bp.get("/products")
def list_products() -> Response:
    return jsonify(_db().list_products())


@admin_bp.get("/products/<int:product_id>")
def get_product(product_id: int) -> Response:
    return jsonify(_db().get_product(product_id))


@admin_bp.post("/products")
def create_product() -> tuple[Response, int]:
    fields = validate_product(_json_body())
    created = _db().create_product(**fields)
    return jsonify(created), 201


@admin_bp.put("/products/<int:product_id>")
def update_product(product_id: int) -> Response:
    fields = validate_product(_json_body())
    return jsonify(_db().update_product(product_id, **fields))


@admin_bp.delete("/products/<int:product_id>")
def delete_product(product_id: int) -> Response:
    _db().delete_product(product_id)
    logger.info("Product %d deleted via admin API", product_id)
    return jsonify(
        {"success": True, "message": "Product deleted"}
    )
