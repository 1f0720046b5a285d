# src/sources/base_source.py

"""Abstract base class for all catalog sources."""

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.errors import CatalogLoadError
from src.models.product import Product


class BaseCatalogSource(ABC):
    """Fetches one upstream product API and maps it to :class:`Product`.

    Subclasses only describe the payload shape; fetching, retries and
    error wrapping live here.  Unlike a best-effort search, a catalog
    fetch never degrades to an empty list: every failure is raised as
    :class:`CatalogLoadError` so the loader can abort the whole load.
    """

    def __init__(self, source_id: str, url: str) -> None:
        self.source_id = source_id
        self.url = url
        self.logger = logging.getLogger(
            f"storefront.sources.{source_id}"
        )
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def make_id(self, raw_id: Any) -> str:
        """Namespace a source-local id so ids never collide across sources."""
        return f"{self.source_id}_{raw_id}"

    def _fetch_get(self, url: str) -> curl_requests.Response | None:
        """GET with retries and linear backoff. ``None`` when exhausted."""
        headers: dict[str, str] = dict(self.settings.DEFAULT_HEADERS)
        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = self.session.get(
                    url,
                    headers=headers,
                    timeout=self._request_timeout,
                )
                if resp.status_code == 200:
                    return resp
                self.logger.warning(
                    "[%s] HTTP %d on attempt %d",
                    self.source_id,
                    resp.status_code,
                    attempt + 1,
                )
            except Exception as exc:
                self.logger.warning(
                    "[%s] Request error on attempt %d: %s",
                    self.source_id,
                    attempt + 1,
                    exc,
                    exc_info=True,
                )
            time.sleep(self.settings.REQUEST_DELAY * (attempt + 1))
        return None

    def fetch(self) -> list[Product]:
        """Fetch and normalise the whole catalog of this source.

        Raises:
            CatalogLoadError: on network failure, non-200 after all
                retries, invalid JSON or an unexpected payload shape.
        """
        try:
            return self._load()
        finally:
            self.session.close()

    def _load(self) -> list[Product]:
        resp = self._fetch_get(self.url)
        if resp is None:
            msg = f"{self.source_id}: request to {self.url} failed"
            raise CatalogLoadError(msg, source=self.source_id)

        try:
            products = self.parse_body(resp.text)
        except CatalogLoadError:
            raise
        except (ValueError, TypeError, KeyError, AttributeError) as exc:
            self.logger.error(
                "[%s] Could not parse catalog payload: %s",
                self.source_id,
                exc,
                exc_info=True,
            )
            msg = f"{self.source_id}: malformed catalog payload ({exc})"
            raise CatalogLoadError(msg, source=self.source_id) from exc

        self.logger.info(
            "[%s] Loaded %d products", self.source_id, len(products)
        )
        return products

    def parse_body(self, text: str) -> list[Product]:
        """Decode a response body and map it to products.

        Raises ``CatalogLoadError`` for a wrong payload shape and
        ``ValueError``/``KeyError``/``TypeError`` for malformed data.
        """
        payload: Any = json.loads(text)
        return self._parse_payload(payload)

    @abstractmethod
    def _parse_payload(self, payload: Any) -> list[Product]:
        """Map the decoded JSON body to canonical products."""
        ...
