# tests/test_persistent_cart.py

"""Tests for the write-through cart persistence layer."""

import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

from src.errors import CartPersistenceError
from src.models.cart import CartLine
from src.storage.local_storage import LocalStorage
from src.store.persistent_cart import (
    PersistentCartStore,
    deserialize_lines,
    serialize_lines,
)
from tests.helpers import make_product

CATALOG = {
    "fakestoreapi_1": make_product("fakestoreapi_1", price=9.99),
    "dummyjson_5": make_product("dummyjson_5", price=4.00),
}


class TestSerialization(unittest.TestCase):
    """Stored cart format."""

    def test_stored_shape_is_product_fields_plus_quantity(self) -> None:
        raw = serialize_lines((CartLine(CATALOG["dummyjson_5"], 2),))
        data = json.loads(raw)
        self.assertEqual(len(data), 1)
        self.assertEqual(data[0]["id"], "dummyjson_5")
        self.assertEqual(data[0]["quantity"], 2)
        self.assertEqual(data[0]["rating"], {"rate": 4.0, "count": 10})

    def test_not_an_array(self) -> None:
        with self.assertRaises(CartPersistenceError):
            deserialize_lines('{"id": "x"}')

    def test_garbage(self) -> None:
        with self.assertRaises(CartPersistenceError):
            deserialize_lines("{{{")

    def test_infinite_quantity_is_corrupt(self) -> None:
        raw = serialize_lines((CartLine(CATALOG["dummyjson_5"], 1),))
        raw = raw.replace('"quantity": 1', '"quantity": 1e999')
        with self.assertRaises(CartPersistenceError):
            deserialize_lines(raw)

    def test_deeply_nested_json_is_corrupt(self) -> None:
        with self.assertRaises(CartPersistenceError):
            deserialize_lines("[" * 100_000 + "]" * 100_000)

    def test_zero_quantity_is_corrupt(self) -> None:
        raw = serialize_lines((CartLine(CATALOG["dummyjson_5"], 1),))
        raw = raw.replace('"quantity": 1', '"quantity": 0')
        with self.assertRaises(CartPersistenceError):
            deserialize_lines(raw)


class TestPersistentCartStore(unittest.TestCase):
    """Hydration and write-through behaviour."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.storage = LocalStorage(Path(self._tmp.name) / "storage.json")

    def _cart(self) -> PersistentCartStore:
        return PersistentCartStore(CATALOG.get, storage=self.storage)

    def test_every_mutation_is_written(self) -> None:
        cart = self._cart()
        cart.add_item("fakestoreapi_1")
        cart.add_item("fakestoreapi_1")
        cart.add_item("dummyjson_5")
        stored = json.loads(self.storage.get_item("cart") or "[]")
        self.assertEqual(
            [(e["id"], e["quantity"]) for e in stored],
            [("fakestoreapi_1", 2), ("dummyjson_5", 1)],
        )

    def test_reload_restores_same_cart(self) -> None:
        cart = self._cart()
        cart.add_item("fakestoreapi_1")
        cart.add_item("dummyjson_5")
        cart.increase_quantity("dummyjson_5")

        restored = PersistentCartStore(lambda _pid: None, storage=self.storage)
        self.assertEqual(restored.lines, cart.lines)
        self.assertEqual(restored.totals(), cart.totals())

    def test_clear_persists_empty_list(self) -> None:
        cart = self._cart()
        cart.add_item("dummyjson_5")
        cart.clear()
        self.assertEqual(self.storage.get_item("cart"), "[]")

    def test_decrease_to_zero_persists_removal(self) -> None:
        cart = self._cart()
        cart.add_item("dummyjson_5")
        cart.decrease_quantity("dummyjson_5")
        self.assertTrue(self._cart().is_empty())

    def test_corrupt_storage_hydrates_empty(self) -> None:
        self.storage.set_item("cart", "not json at all")
        with self.assertLogs("storefront.cart.persistence", level="WARNING"):
            cart = self._cart()
        self.assertTrue(cart.is_empty())

    def test_unparseable_cart_values_hydrate_empty(self) -> None:
        for raw in (
            '[{"id": "x_1", "title": "X", "price": 1, "quantity": 1e999}]',
            "[" * 100_000 + "]" * 100_000,
        ):
            with self.subTest(raw=raw[:20]):
                self.storage.set_item("cart", raw)
                with self.assertLogs(
                    "storefront.cart.persistence", level="WARNING"
                ):
                    cart = self._cart()
                self.assertTrue(cart.is_empty())

    def test_write_happens_even_if_listener_raises(self) -> None:
        cart = self._cart()

        def broken_listener(_event: object) -> None:
            raise RuntimeError("render failed")

        cart.subscribe(broken_listener)
        with self.assertRaises(RuntimeError):
            cart.add_item("dummyjson_5")
        stored = json.loads(self.storage.get_item("cart") or "[]")
        self.assertEqual([e["id"] for e in stored], ["dummyjson_5"])

        with self.assertRaises(RuntimeError):
            cart.clear()
        self.assertEqual(self.storage.get_item("cart"), "[]")

    def test_corrupt_storage_file_hydrates_empty(self) -> None:
        self.storage.file_path.write_text("[]", encoding="utf-8")
        cart = self._cart()
        self.assertTrue(cart.is_empty())

    def test_reads_storage_once(self) -> None:
        storage = MagicMock()
        storage.get_item.return_value = None
        cart = PersistentCartStore(CATALOG.get, storage=storage)
        cart.add_item("dummyjson_5")
        cart.remove_item("dummyjson_5")
        _ = cart.lines
        storage.get_item.assert_called_once_with("cart")
        self.assertEqual(storage.set_item.call_count, 2)

    def test_write_failure_is_logged_not_raised(self) -> None:
        storage = MagicMock()
        storage.get_item.return_value = None
        storage.set_item.side_effect = OSError("disk full")
        cart = PersistentCartStore(CATALOG.get, storage=storage)
        with self.assertLogs("storefront.cart.persistence", level="ERROR"):
            cart.add_item("dummyjson_5")
        self.assertEqual(cart.totals().total_item_count, 1)

    def test_listeners_see_changes(self) -> None:
        cart = self._cart()
        kinds: list[str] = []
        cart.subscribe(lambda event: kinds.append(event.kind))
        cart.add_item("dummyjson_5")
        cart.remove_item("dummyjson_5")
        self.assertEqual(kinds, ["added", "removed"])


if __name__ == "__main__":
    unittest.main()
