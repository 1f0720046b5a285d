# src/services/health_checker.py

"""Catalog source connectivity health checker."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

from src.config.settings import Settings
from src.errors import CatalogLoadError
from src.services.catalog_loader import load_source_class

logger = logging.getLogger("storefront.health")


@dataclass
class HealthResult:
    """Result of a single source health check."""

    source_id: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def _down(source_id: str, latency_ms: float, message: str) -> HealthResult:
    return HealthResult(
        source_id=source_id,
        status="down",
        latency_ms=latency_ms,
        message=message,
    )


def probe_source(source: dict[str, str]) -> HealthResult:
    """GET one catalog source once, time it and check the payload parses.

    No retries: a single failed request marks the source down.
    """
    source_id = source["id"]

    try:
        instance = load_source_class(source["loader"])(
            source_id, source["url"]
        )
    except (ImportError, AttributeError, KeyError, ValueError) as exc:
        return _down(source_id, 0.0, f"Failed to load source: {exc}")

    try:
        return _timed_probe(instance, source)
    finally:
        instance.session.close()


def _timed_probe(instance: Any, source: dict[str, str]) -> HealthResult:
    source_id = source["id"]
    start = time.monotonic()
    try:
        resp = instance.session.get(
            source["url"],
            headers=Settings.DEFAULT_HEADERS,
            timeout=Settings.HEALTH_TIMEOUT,
        )
    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return _down(source_id, elapsed_ms, str(exc)[:80])
    elapsed_ms = (time.monotonic() - start) * 1000

    if resp.status_code != 200:
        return _down(source_id, elapsed_ms, f"HTTP {resp.status_code}")

    try:
        products = instance.parse_body(resp.text)
    except (
        CatalogLoadError,
        ValueError,
        TypeError,
        KeyError,
        AttributeError,
    ) as exc:
        return _down(source_id, elapsed_ms, f"Bad payload: {exc}"[:80])

    if elapsed_ms > Settings.HEALTH_SLOW_MS:
        status, message = "slow", "High latency"
    else:
        status, message = "ok", f"{len(products)} products"
    return HealthResult(
        source_id=source_id,
        status=status,
        latency_ms=elapsed_ms,
        message=message,
    )


class HealthChecker:
    """Runs concurrent health probes against all catalog sources."""

    def __init__(self, sources: list[dict[str, str]] | None = None) -> None:
        self.sources = (
            sources if sources is not None else Settings.CATALOG_SOURCES
        )

    async def check_all(self) -> list[HealthResult]:
        """Probe every registered source concurrently."""
        results: list[HealthResult] = list(
            await asyncio.gather(
                *(asyncio.to_thread(probe_source, src) for src in self.sources)
            )
        )
        for r in results:
            log = logger.warning if r.status == "down" else logger.info
            log(
                "Health check %s: %s (%.0fms) %s",
                r.source_id,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
