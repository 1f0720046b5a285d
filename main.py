# main.py

"""Entry point for the storefront (TUI, headless CLI or server)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("storefront.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_ids = ", ".join(Settings.source_ids())

    parser = argparse.ArgumentParser(
        prog="storefront",
        description="Demo storefront: catalog, cart and payment server.",
        epilog=f"Available sources: {valid_ids}",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--list",
        action="store_true",
        default=False,
        dest="list_catalog",
        help="Print the merged catalog and exit.",
    )
    mode.add_argument(
        "--cart",
        action="store_true",
        default=False,
        help="Print the saved cart with totals and exit.",
    )
    mode.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on all catalog sources.",
    )
    mode.add_argument(
        "--serve",
        action="store_true",
        default=False,
        help="Run the payment and admin API server.",
    )
    parser.add_argument(
        "-s",
        "--source",
        default=None,
        help="Only list products from this source (with --list).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format for --list (default: json).",
    )
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual storefront."""
    from src.ui.app import StorefrontApp

    try:
        app = StorefrontApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("storefront TUI shutting down")


def _run_list(args: argparse.Namespace) -> None:
    """Print the catalog and exit."""
    from src.cli.runner import cli_list_catalog

    exit_code = asyncio.run(
        cli_list_catalog(
            source=args.source,
            output_format=args.output_format,
        )
    )
    sys.exit(exit_code)


def _run_cart() -> None:
    """Print the persisted cart and exit."""
    from src.cli.runner import show_cart

    sys.exit(show_cart())


def _run_health_check() -> None:
    """Run catalog source connectivity health check."""
    from src.cli.runner import run_health_check

    exit_code = asyncio.run(run_health_check())
    sys.exit(exit_code)


def _run_server() -> None:
    """Serve the payment proxy and admin API."""
    from src.server.app import run_server

    run_server()


def main() -> None:
    """Route to TUI (no flags), a headless command, or the server."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.serve:
        log_file = setup_logging(
            "server", console_level=logging.INFO, attach=("werkzeug",)
        )
    elif args.list_catalog or args.cart or args.health:
        log_file = setup_logging("cli")
    else:
        log_file = setup_logging("tui")
    logger.info("storefront starting, log file: %s", log_file)

    if args.serve:
        _run_server()
    elif args.list_catalog:
        _run_list(args)
    elif args.cart:
        _run_cart()
    elif args.health:
        _run_health_check()
    else:
        _run_tui()


if __name__ == "__main__":
    main()
