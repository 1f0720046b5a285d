# src/cli/runner.py

"""Headless CLI: list the catalog, show the saved cart, check sources."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from src.config.settings import Settings
from src.errors import CatalogLoadError
from src.models.product import Product
from src.services.catalog_loader import CatalogLoader
from src.storage.local_storage import LocalStorage
from src.store.persistent_cart import PersistentCartStore
from src.ui.formatting import format_price, render_stars, source_label

logger = logging.getLogger("storefront.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def resolve_filter(source: str | None) -> str:
    """Validate a ``--source`` value; ``None`` means all sources.

    Raises ``SystemExit`` on unknown ids.
    """
    if source is None:
        return Settings.FILTER_ALL
    valid = [Settings.FILTER_ALL, *Settings.source_ids()]
    if source not in valid:
        _err.print(f"[red]Unknown source: {source}[/red]")
        _err.print(f"[dim]Available: {', '.join(valid)}[/dim]")
        raise SystemExit(1)
    return source


def _print_catalog_table(products: list[Product]) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title="Catalog",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim")
    table.add_column("Title", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Rating", justify="center")
    table.add_column("Category", style="magenta")
    table.add_column("Store")

    for p in products:
        table.add_row(
            p.id,
            p.title[:50],
            format_price(p.price),
            f"{render_stars(p.rating.rate)} ({p.rating.count or 'N/A'})",
            p.category,
            source_label(p.source),
        )

    Console().print(table)


async def cli_list_catalog(source: str | None, output_format: str) -> int:
    """Load the catalog and print it. Exit code 0 on success, 1 on failure."""
    selected = resolve_filter(source)
    _err.print("[bold]Loading catalog...[/bold]")

    try:
        products = await CatalogLoader().load_catalog()
    except CatalogLoadError as exc:
        logger.error("CLI catalog load failed: %s", exc)
        _err.print(f"[red]Could not load the catalog: {exc}[/red]")
        return 1

    if selected != Settings.FILTER_ALL:
        products = [p for p in products if p.source == selected]
    _err.print(f"[green]✓ {len(products)} products[/green]")

    if output_format == "table":
        _print_catalog_table(products)
    else:
        json.dump(
            [p.to_dict() for p in products],
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    return 0


def show_cart(storage: LocalStorage | None = None) -> int:
    """Print the persisted cart and its totals."""
    # Only reading: no catalog is loaded, so nothing can be added.
    cart = PersistentCartStore(lambda _pid: None, storage=storage)
    if cart.is_empty():
        _err.print("[yellow]Your cart is empty.[/yellow]")
        return 0

    table = Table(title="Cart", title_style="bold cyan")
    table.add_column("Product", max_width=50)
    table.add_column("Price", justify="right")
    table.add_column("Qty", justify="right")
    table.add_column("Line total", justify="right", style="green")
    for line in cart.lines:
        table.add_row(
            line.product.title[:50],
            format_price(line.product.price),
            str(line.quantity),
            format_price(line.line_total),
        )
    totals = cart.totals()
    table.add_section()
    table.add_row(
        "Subtotal", "", str(totals.total_item_count),
        format_price(totals.subtotal),
    )
    table.add_row("Total", "", "", format_price(totals.total))
    Console().print(table)
    return 0


async def run_health_check() -> int:
    """Run connectivity health check on all catalog sources."""
    from src.services.health_checker import HealthChecker

    _err.print("[bold]Running catalog source health check...[/bold]")
    checker = HealthChecker()
    results = await checker.check_all()

    table = Table(
        title="Source Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Source", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = f"{r.latency_ms:.0f}ms" if r.latency_ms > 0 else "-"
        table.add_row(r.source_id, status, latency, r.message)

    Console().print(table)
    return 1 if any_down else 0
