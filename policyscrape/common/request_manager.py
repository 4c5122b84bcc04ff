"""Request manager for fetching carrier pages.

This module provides AsyncRequestManager, which encapsulates the HTTP
client and turns every kind of fetch failure into a TransientException.

The request manager is responsible for:
- Maintaining the HTTP client (httpx.AsyncClient)
- Converting HTTP responses to Response objects
- Mapping non-2xx statuses, timeouts and connection errors to exceptions

Scrapers only depend on the PageFetcher protocol, so tests can substitute
an in-memory fetcher.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from policyscrape.common.exceptions import (
    HTMLResponseAssumptionException,
    RequestTimeoutException,
    RequestTransportException,
)
from policyscrape.data_types import Response

logger = logging.getLogger(__name__)


class PageFetcher(Protocol):
    """Anything that can turn a URL into a Response."""

    async def fetch(self, url: str) -> Response:
        """Fetch ``url`` with GET.

        Raises:
            TransientException: If the page could not be retrieved.
        """
        ...


class AsyncRequestManager:
    """Manages HTTP requests for the asynchronous scrapers.

    This class encapsulates:

    - httpx.AsyncClient lifecycle
    - Request resolution (URL fetching, redirects followed)
    - Response transformation

    Example::

        async with AsyncRequestManager(timeout=30.0) as manager:
            response = await manager.fetch("https://example.com/page")
    """

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize the request manager.

        Args:
            timeout: Request timeout in seconds. None means no timeout.
        """
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            timeout=timeout, follow_redirects=True
        )

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncRequestManager:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def fetch(self, url: str) -> Response:
        """Fetch a page with GET.

        Args:
            url: Absolute URL of the page.

        Returns:
            Response containing the page.

        Raises:
            HTMLResponseAssumptionException: If the status code is not 2xx.
            RequestTimeoutException: If the request times out.
            RequestTransportException: If the connection fails.
        """
        logger.debug(f"Fetching {url}")
        try:
            http_response = await self._client.get(url)
        except httpx.TimeoutException as e:
            logger.debug(f"Timed out fetching {url}")
            raise RequestTimeoutException(
                url=url, timeout_seconds=self.timeout
            ) from e
        except httpx.HTTPError as e:
            logger.debug(f"Error fetching {url}: {e!r}")
            raise RequestTransportException(
                url=url, reason=str(e) or type(e).__name__
            ) from e

        if not http_response.is_success:
            logger.debug(f"HTTP {http_response.status_code} from {url}")
            raise HTMLResponseAssumptionException(
                status_code=http_response.status_code,
                expected_codes=[200],
                url=url,
            )

        logger.debug(f"Fetched {url}")
        return Response(
            status_code=http_response.status_code,
            content=http_response.content,
            text=http_response.text,
            url=str(http_response.url),
        )
