from __future__ import annotations

import logging
from typing import Dict, Optional
from urllib.parse import urljoin

import httpx

from gdziestoja.config import DEFAULT_BASE_URL, DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)


class PageFetcher:
    """Sequential HTML fetcher bound to one site.

    Non-2xx responses raise httpx.HTTPStatusError and network problems raise
    httpx.TransportError; nothing is retried.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = 20.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = float(timeout)
        self.headers = headers or {"User-Agent": DEFAULT_USER_AGENT}
        self._client = httpx.Client(
            timeout=self.timeout,
            headers=self.headers,
            follow_redirects=True,
            transport=transport,
        )

    def absolute_url(self, href: str) -> str:
        return urljoin(self.base_url + "/", href.strip())

    def get(self, url: str) -> str:
        target = self.absolute_url(url)
        logger.debug("GET %s", target)
        r = self._client.get(target)
        r.raise_for_status()
        return r.text

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "PageFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
