"""Test utilities for the scraper tests.

This module provides an in-memory PageFetcher and small helpers for
building parsed pages without a server.
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from lxml import html

from policyscrape.common.checked_html import CheckedHtmlElement
from policyscrape.common.exceptions import (
    HTMLResponseAssumptionException,
    TransientException,
)
from policyscrape.common.lxml_page_element import LxmlPageElement
from policyscrape.data_types import Response


class StaticPageFetcher:
    """PageFetcher that serves pages from a dict.

    Values may be HTML strings or TransientException instances to raise.
    URLs that are not in ``pages`` get ``default`` if one is given, and a
    404 otherwise.

    Attributes:
        requests: Every URL fetched, in order.
    """

    def __init__(
        self,
        pages: Mapping[str, str | TransientException],
        default: str | None = None,
    ) -> None:
        self.pages = dict(pages)
        self.default = default
        self.requests: list[str] = []

    async def fetch(self, url: str) -> Response:
        self.requests.append(url)
        page = self.pages.get(url, self.default)
        if page is None:
            raise HTMLResponseAssumptionException(
                status_code=404, expected_codes=[200], url=url
            )
        if isinstance(page, TransientException):
            raise page
        return make_response(page, url)


def make_response(text: str, url: str = "https://example.com/page") -> Response:
    """Wrap HTML text in a 200 Response."""
    return Response(
        status_code=200,
        content=text.encode("utf-8"),
        text=text,
        url=url,
    )


def page_from_html(
    text: str, url: str = "https://example.com/page"
) -> LxmlPageElement:
    """Parse HTML text straight into a LxmlPageElement."""
    doc = html.fromstring(text)
    return LxmlPageElement(CheckedHtmlElement(doc, url), url)


def collect_records_async() -> tuple[
    Callable[[Any, Any], Awaitable[None]], list[tuple[Any, Any]]
]:
    """Create an async on_record callback that collects (key, record) pairs.

    Example:
        callback, seen = collect_records_async()
        orchestrator = BatchOrchestrator(scrapers, on_record=callback)
        await orchestrator.run(entries)
        assert len(seen) == 2
    """
    seen: list[tuple[Any, Any]] = []

    async def callback(key: Any, record: Any) -> None:
        seen.append((key, record))

    return callback, seen
