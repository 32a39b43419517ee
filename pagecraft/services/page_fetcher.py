"""
Canonical page fetcher.

Reads ``GET {base}/page-components/page/{page_key}`` for static previews.
Fails open: an unconfigured base URL, a transport error, a non-2xx status
or an unexpected body all produce an empty component list.
"""

import logging
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from pagecraft.services.component_model import Component

logger = logging.getLogger(__name__)


class PageFetcher:
    """HTTP client for the public page components endpoint."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def fetch(self, page_key: str) -> list[Component]:
        """
        Fetch the persisted components of a page.

        Returns:
            Components in response order, or an empty list on any failure
        """
        if not self.base_url:
            logger.warning("PAGE_API_BASE_URL is not configured; rendering an empty page")
            return []

        url = f"{self.base_url}/page-components/page/{quote(page_key, safe='')}"
        try:
            response = await self._client.get(url, headers={"Cache-Control": "no-store"})
            if response.status_code >= 400:
                logger.warning(f"Page fetch for '{page_key}' returned HTTP {response.status_code}")
                return []
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Page fetch for '{page_key}' failed: {e}")
            return []

        rows = body.get("data") if isinstance(body, dict) else body
        if not isinstance(rows, list):
            return []

        try:
            return [Component.from_row(row) for row in rows]
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            logger.warning(f"Page fetch for '{page_key}' returned invalid rows: {e}")
            return []

    async def aclose(self) -> None:
        """Close the underlying client if this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()
