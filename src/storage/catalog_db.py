# src/storage/catalog_db.py

"""SQLite-backed category/product store behind the admin API."""

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any

from src.config.settings import Settings
from src.errors import RecordNotFoundError, ValidationError

logger = logging.getLogger("storefront.catalog_db")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS categories (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT    NOT NULL,
    description TEXT,
    created_at  TEXT    NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS products (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    category_id INTEGER NOT NULL
                REFERENCES categories(id) ON DELETE RESTRICT,
    name        TEXT    NOT NULL,
    description TEXT,
    price       REAL    NOT NULL,
    stock       INTEGER NOT NULL DEFAULT 0,
    created_at  TEXT    NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at  TEXT    NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_products_category
    ON products(category_id);
"""

_PRODUCT_SELECT = (
    "SELECT p.id, p.category_id, p.name, p.description, p.price, "
    "       p.stock, p.created_at, p.updated_at, "
    "       c.name AS category_name "
    "FROM products p "
    "JOIN categories c ON p.category_id = c.id "
)


def _row_to_dict(row: sqlite3.Row | None) -> dict[str, Any] | None:
    return dict(row) if row is not None else None


class CatalogDB:
    """CRUD over ``categories`` and ``products`` with parameterised queries.

    Products are always read joined to their category name.  Foreign-key
    violations (unknown category, deleting a category still in use) are
    reported as :class:`ValidationError`.
    """

    def __init__(self, db_path: Path | str | None = None) -> None:
        path = db_path or Settings.CATALOG_DB_PATH
        if str(path) != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys=ON")
        self._conn.executescript(_SCHEMA)
        self._lock = threading.Lock()
        logger.debug("CatalogDB opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def _write(self, sql: str, params: tuple[Any, ...]) -> sqlite3.Cursor:
        """Run one write statement in its own transaction."""
        with self._lock:
            try:
                cur = self._conn.execute(sql, params)
                self._conn.commit()
            except sqlite3.IntegrityError as exc:
                self._conn.rollback()
                raise ValidationError(self._integrity_message(exc)) from exc
        return cur

    @staticmethod
    def _integrity_message(exc: sqlite3.IntegrityError) -> str:
        text = str(exc)
        if "FOREIGN KEY" in text:
            return "Category does not exist or is still in use"
        return f"Constraint violated: {text}"

    # ── Categories ───────────────────────────────────────

    def list_categories(self) -> list[dict[str, Any]]:
        with self._lock:
            rows = self._conn.execute(
                "SELECT id, name, description, created_at "
                "FROM categories ORDER BY name",
            ).fetchall()
        return [dict(r) for r in rows]

    def get_category(self, category_id: int) -> dict[str, Any]:
        with self._lock:
            row = self._conn.execute(
                "SELECT id, name, description, created_at "
                "FROM categories WHERE id = ?",
                (category_id,),
            ).fetchone()
        found = _row_to_dict(row)
        if found is None:
            msg = f"Category {category_id} not found"
            raise RecordNotFoundError(msg)
        return found

    def create_category(
        self, name: str, description: str | None = None,
    ) -> dict[str, Any]:
        cur = self._write(
            "INSERT INTO categories (name, description) VALUES (?, ?)",
            (name, description),
        )
        logger.info("Created category %d '%s'", cur.lastrowid, name)
        return self.get_category(int(cur.lastrowid or 0))

    def update_category(
        self,
        category_id: int,
        name: str,
        description: str | None = None,
    ) -> dict[str, Any]:
        cur = self._write(
            "UPDATE categories SET name = ?, description = ? WHERE id = ?",
            (name, description, category_id),
        )
        if cur.rowcount == 0:
            msg = f"Category {category_id} not found"
            raise RecordNotFoundError(msg)
        return self.get_category(category_id)

    def delete_category(self, category_id: int) -> None:
        cur = self._write(
            "DELETE FROM categories WHERE id = ?", (category_id,),
        )
        if cur.rowcount == 0:
            msg = f"Category {category_id} not found"
            raise RecordNotFoundError(msg)
        logger.info("Deleted category %d", category_id)

    # ── Products ─────────────────────────────────────────

    def list_products(self) -> list[dict[str, Any]]:
        with self._lock:
            rows = self._conn.execute(
                _PRODUCT_SELECT + "ORDER BY p.name",
            ).fetchall()
        return [dict(r) for r in rows]

    def get_product(self, product_id: int) -> dict[str, Any]:
        with self._lock:
            row = self._conn.execute(
                _PRODUCT_SELECT + "WHERE p.id = ?",
                (product_id,),
            ).fetchone()
        found = _row_to_dict(row)
        if found is None:
            msg = f"Product {product_id} not found"
            raise RecordNotFoundError(msg)
        return found

    def create_product(
        self,
        category_id: int,
        name: str,
        price: float,
        description: str | None = None,
        stock: int = 0,
    ) -> dict[str, Any]:
        cur = self._write(
            "INSERT INTO products "
            "(category_id, name, description, price, stock) "
            "VALUES (?, ?, ?, ?, ?)",
            (category_id, name, description, price, stock),
        )
        logger.info("Created product %d '%s'", cur.lastrowid, name)
        return self.get_product(int(cur.lastrowid or 0))

    def update_product(
        self,
        product_id: int,
        category_id: int,
        name: str,
        price: float,
        description: str | None = None,
        stock: int = 0,
    ) -> dict[str, Any]:
        cur = self._write(
            "UPDATE products "
            "SET category_id = ?, name = ?, description = ?, price = ?, "
            "    stock = ?, updated_at = CURRENT_TIMESTAMP "
            "WHERE id = ?",
            (category_id, name, description, price, stock, product_id),
        )
        if cur.rowcount == 0:
            msg = f"Product {product_id} not found"
            raise RecordNotFoundError(msg)
        return self.get_product(product_id)

    def delete_product(self, product_id: int) -> None:
        cur = self._write(
            "DELETE FROM products WHERE id = ?", (product_id,),
        )
        if cur.rowcount == 0:
            msg = f"Product {product_id} not found"
            raise RecordNotFoundError(msg)
        logger.info("Deleted product %d", product_id)
