# tests/test_cart_store.py

"""Tests for the in-memory CartStore and its invariants."""

import random
import unittest

from src.errors import ProductNotFoundError
from src.models.cart import CartLine
from src.models.product import Product
from src.store.cart_store import CartEvent, CartStore
from tests.helpers import make_product

CATALOG: dict[str, Product] = {
    "fakestoreapi_1": make_product("fakestoreapi_1", price=9.99),
    "fakestoreapi_2": make_product("fakestoreapi_2", price=22.3),
    "dummyjson_5": make_product("dummyjson_5", price=4.00),
    "dummyjson_7": make_product("dummyjson_7", price=0.5),
}


def _store() -> CartStore:
    return CartStore(CATALOG.get)


class TestCartStoreOperations(unittest.TestCase):
    """Single-operation behaviour."""

    def test_add_new_item_appends_with_quantity_one(self) -> None:
        store = _store()
        line = store.add_item("dummyjson_5")
        self.assertEqual(line.quantity, 1)
        self.assertEqual([l.id for l in store.lines], ["dummyjson_5"])

    def test_add_existing_item_increments(self) -> None:
        store = _store()
        store.add_item("dummyjson_5")
        store.add_item("dummyjson_5")
        self.assertEqual(len(store.lines), 1)
        self.assertEqual(store.lines[0].quantity, 2)

    def test_add_unknown_product_raises_and_changes_nothing(self) -> None:
        store = _store()
        store.add_item("dummyjson_5")
        with self.assertRaises(ProductNotFoundError) as ctx:
            store.add_item("nope_1")
        self.assertEqual(ctx.exception.product_id, "nope_1")
        self.assertEqual(len(store.lines), 1)

    def test_lines_keep_insertion_order(self) -> None:
        store = _store()
        for pid in ("dummyjson_7", "fakestoreapi_1", "dummyjson_5"):
            store.add_item(pid)
        store.add_item("dummyjson_7")
        self.assertEqual(
            [l.id for l in store.lines],
            ["dummyjson_7", "fakestoreapi_1", "dummyjson_5"],
        )

    def test_increase_quantity(self) -> None:
        store = _store()
        store.add_item("fakestoreapi_2")
        store.increase_quantity("fakestoreapi_2")
        self.assertEqual(store.lines[0].quantity, 2)

    def test_increase_missing_line_raises(self) -> None:
        store = _store()
        with self.assertRaises(ProductNotFoundError):
            store.increase_quantity("fakestoreapi_2")
        self.assertTrue(store.is_empty())

    def test_decrease_above_one_decrements(self) -> None:
        store = _store()
        store.add_item("fakestoreapi_2")
        store.add_item("fakestoreapi_2")
        line = store.decrease_quantity("fakestoreapi_2")
        self.assertIsNotNone(line)
        self.assertEqual(store.lines[0].quantity, 1)

    def test_decrease_at_one_removes_line(self) -> None:
        """Cart with dummyjson_5 at 1, decrease -> empty cart."""
        store = _store()
        store.add_item("dummyjson_5")
        self.assertIsNone(store.decrease_quantity("dummyjson_5"))
        self.assertTrue(store.is_empty())
        self.assertEqual(store.totals().total_item_count, 0)

    def test_decrease_missing_line_raises(self) -> None:
        store = _store()
        with self.assertRaises(ProductNotFoundError):
            store.decrease_quantity("dummyjson_5")

    def test_remove_item_is_idempotent(self) -> None:
        store = _store()
        store.add_item("dummyjson_5")
        self.assertTrue(store.remove_item("dummyjson_5"))
        self.assertFalse(store.remove_item("dummyjson_5"))
        self.assertTrue(store.is_empty())

    def test_clear(self) -> None:
        store = _store()
        store.add_item("dummyjson_5")
        store.add_item("fakestoreapi_1")
        store.clear()
        self.assertEqual(store.lines, ())

    def test_lines_snapshot_is_immutable(self) -> None:
        store = _store()
        store.add_item("dummyjson_5")
        snapshot = store.lines
        store.add_item("fakestoreapi_1")
        self.assertEqual(len(snapshot), 1)
        self.assertIsInstance(snapshot, tuple)


class TestCartTotals(unittest.TestCase):
    """Derived count and subtotal."""

    def test_worked_example(self) -> None:
        """9.99 twice plus 4.00 once -> 2 lines, 3 items, 23.98."""
        store = _store()
        store.add_item("fakestoreapi_1")
        store.add_item("fakestoreapi_1")
        store.add_item("dummyjson_5")
        totals = store.totals()
        self.assertEqual(len(store.lines), 2)
        self.assertEqual(totals.total_item_count, 3)
        self.assertEqual(totals.subtotal, 23.98)
        self.assertEqual(totals.total, totals.subtotal)

    def test_empty_cart_totals(self) -> None:
        totals = _store().totals()
        self.assertEqual(totals.total_item_count, 0)
        self.assertEqual(totals.subtotal, 0.0)
        self.assertEqual(totals.total, 0.0)

    def test_line_total(self) -> None:
        line = CartLine(product=CATALOG["fakestoreapi_1"], quantity=3)
        self.assertEqual(line.line_total, 29.97)


class TestCartEvents(unittest.TestCase):
    """Observer notifications."""

    def test_every_mutation_notifies(self) -> None:
        store = _store()
        events: list[CartEvent] = []
        store.subscribe(events.append)
        store.add_item("dummyjson_5")
        store.increase_quantity("dummyjson_5")
        store.decrease_quantity("dummyjson_5")
        store.remove_item("dummyjson_5")
        store.clear()
        self.assertEqual(
            [e.kind for e in events],
            ["added", "increased", "decreased", "removed", "cleared"],
        )
        self.assertEqual(events[0].product_id, "dummyjson_5")

    def test_failed_operation_does_not_notify(self) -> None:
        store = _store()
        events: list[CartEvent] = []
        store.subscribe(events.append)
        with self.assertRaises(ProductNotFoundError):
            store.add_item("missing_1")
        self.assertEqual(events, [])

    def test_unsubscribe(self) -> None:
        store = _store()
        events: list[CartEvent] = []
        unsubscribe = store.subscribe(events.append)
        unsubscribe()
        store.add_item("dummyjson_5")
        self.assertEqual(events, [])


class TestCartInvariants(unittest.TestCase):
    """Randomised operation sequences keep every invariant."""

    OPS = ("add", "increase", "decrease", "remove")

    def _apply(self, store: CartStore, op: str, pid: str) -> None:
        try:
            if op == "add":
                store.add_item(pid)
            elif op == "increase":
                store.increase_quantity(pid)
            elif op == "decrease":
                store.decrease_quantity(pid)
            else:
                store.remove_item(pid)
        except ProductNotFoundError:
            pass

    def test_random_sequences(self) -> None:
        rng = random.Random(20240521)
        ids = [*CATALOG, "unknown_1"]
        for _ in range(200):
            store = _store()
            for _ in range(rng.randint(1, 40)):
                self._apply(store, rng.choice(self.OPS), rng.choice(ids))

                line_ids = [l.id for l in store.lines]
                self.assertEqual(len(line_ids), len(set(line_ids)))
                self.assertTrue(all(l.quantity >= 1 for l in store.lines))
                self.assertNotIn("unknown_1", line_ids)

                totals = store.totals()
                self.assertEqual(
                    totals.total_item_count,
                    sum(l.quantity for l in store.lines),
                )
                self.assertAlmostEqual(
                    totals.subtotal,
                    sum(l.product.price * l.quantity for l in store.lines),
                    places=6,
                )

    def test_decrease_at_one_equals_remove(self) -> None:
        rng = random.Random(7)
        for _ in range(50):
            a, b = _store(), _store()
            for _ in range(rng.randint(0, 10)):
                pid = rng.choice(list(CATALOG))
                a.add_item(pid)
                b.add_item(pid)
            a.add_item("dummyjson_7")
            b.add_item("dummyjson_7")
            a.remove_item("dummyjson_7")
            a.add_item("dummyjson_7")
            b.remove_item("dummyjson_7")
            b.add_item("dummyjson_7")
            # both now hold dummyjson_7 at quantity 1, at the end
            a.decrease_quantity("dummyjson_7")
            b.remove_item("dummyjson_7")
            self.assertEqual(a.lines, b.lines)


class TestCartHydrationMerge(unittest.TestCase):
    """Initial lines are normalised on construction."""

    def test_duplicate_and_empty_lines_are_normalised(self) -> None:
        product = CATALOG["dummyjson_5"]
        store = CartStore(
            CATALOG.get,
            lines=[
                CartLine(product, 2),
                CartLine(CATALOG["fakestoreapi_1"], 0),
                CartLine(product, 1),
            ],
        )
        self.assertEqual(len(store.lines), 1)
        self.assertEqual(store.lines[0].quantity, 3)


if __name__ == "__main__":
    unittest.main()
