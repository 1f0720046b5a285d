# src/ui/formatting.py

"""Display helpers shared by the TUI and the CLI."""

import math

from src.config.settings import Settings


def format_price(price: float) -> str:
    """``9.5`` -> ``'€9.50'``."""
    return f"{Settings.CURRENCY_SYMBOL}{price:.2f}"


def render_stars(rate: float) -> str:
    """Five-star bar, half ratings rounded up (``3.5`` -> 4 stars)."""
    filled = max(0, min(5, math.floor(rate + 0.5)))
    return "★" * filled + "☆" * (5 - filled)


def source_label(source_id: str) -> str:
    """Human label for a source id, falling back to the id itself."""
    for src in Settings.CATALOG_SOURCES:
        if src["id"] == source_id:
            return src["label"]
    return source_id
