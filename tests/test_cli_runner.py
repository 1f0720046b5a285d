# tests/test_cli_runner.py

"""Tests for the headless CLI commands."""

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import AsyncMock, patch

from src.cli.runner import (
    cli_list_catalog,
    resolve_filter,
    run_health_check,
    show_cart,
)
from src.errors import CatalogLoadError
from src.models.cart import CartLine
from src.services.health_checker import HealthResult
from src.storage.local_storage import LocalStorage
from src.store.persistent_cart import serialize_lines
from tests.helpers import make_product

LOADER = "src.cli.runner.CatalogLoader"

PRODUCTS = [
    make_product("fakestoreapi_1", price=9.99),
    make_product("dummyjson_5", price=4.00),
]


class TestResolveFilter(unittest.TestCase):
    def test_none_means_all(self) -> None:
        self.assertEqual(resolve_filter(None), "all")

    def test_known_source(self) -> None:
        self.assertEqual(resolve_filter("dummyjson"), "dummyjson")

    def test_unknown_source_exits(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            resolve_filter("ebay")
        self.assertEqual(ctx.exception.code, 1)


class TestListCatalog(unittest.IsolatedAsyncioTestCase):
    async def test_json_output(self) -> None:
        buf = io.StringIO()
        with patch(LOADER) as loader_cls, redirect_stdout(buf):
            loader_cls.return_value.load_catalog = AsyncMock(
                return_value=PRODUCTS
            )
            code = await cli_list_catalog(None, "json")
        self.assertEqual(code, 0)
        data = json.loads(buf.getvalue())
        self.assertEqual(
            [p["id"] for p in data], ["fakestoreapi_1", "dummyjson_5"]
        )

    async def test_source_filter(self) -> None:
        buf = io.StringIO()
        with patch(LOADER) as loader_cls, redirect_stdout(buf):
            loader_cls.return_value.load_catalog = AsyncMock(
                return_value=PRODUCTS
            )
            await cli_list_catalog("dummyjson", "json")
        self.assertEqual(
            [p["id"] for p in json.loads(buf.getvalue())], ["dummyjson_5"]
        )

    async def test_table_output(self) -> None:
        with patch(LOADER) as loader_cls, patch(
            "src.cli.runner.Console"
        ) as console_cls:
            loader_cls.return_value.load_catalog = AsyncMock(
                return_value=PRODUCTS
            )
            code = await cli_list_catalog(None, "table")
        self.assertEqual(code, 0)
        table = console_cls.return_value.print.call_args.args[0]
        self.assertEqual(table.row_count, 2)

    async def test_load_failure_returns_one(self) -> None:
        with patch(LOADER) as loader_cls:
            loader_cls.return_value.load_catalog = AsyncMock(
                side_effect=CatalogLoadError("down")
            )
            self.assertEqual(await cli_list_catalog(None, "json"), 1)


class TestShowCart(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.storage = LocalStorage(Path(self._tmp.name) / "storage.json")

    def test_empty_cart(self) -> None:
        with patch("src.cli.runner.Console") as console_cls:
            self.assertEqual(show_cart(self.storage), 0)
        console_cls.return_value.print.assert_not_called()

    def test_saved_cart_is_listed(self) -> None:
        self.storage.set_item(
            "cart",
            serialize_lines((
                CartLine(PRODUCTS[0], 2),
                CartLine(PRODUCTS[1], 1),
            )),
        )
        with patch("src.cli.runner.Console") as console_cls:
            self.assertEqual(show_cart(self.storage), 0)
        table = console_cls.return_value.print.call_args.args[0]
        # two lines plus subtotal and total rows
        self.assertEqual(table.row_count, 4)


class TestHealthCheck(unittest.IsolatedAsyncioTestCase):
    async def _run(self, *statuses: str) -> int:
        results = [
            HealthResult(f"s{i}", status, 10.0, "")
            for i, status in enumerate(statuses)
        ]
        with patch(
            "src.services.health_checker.HealthChecker.check_all",
            new=AsyncMock(return_value=results),
        ), patch("src.cli.runner.Console"):
            return await run_health_check()

    async def test_all_ok(self) -> None:
        self.assertEqual(await self._run("ok", "slow"), 0)

    async def test_any_down(self) -> None:
        self.assertEqual(await self._run("ok", "down"), 1)


if __name__ == "__main__":
    unittest.main()
