"""LxmlPageElement implementation wrapping CheckedHtmlElement.

This module provides the implementation of the PageElement protocol used
by every carrier scraper, and parse_page() which turns a fetched Response
into one.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from lxml import etree
from lxml import html as lxml_html

from policyscrape.common.checked_html import CheckedHtmlElement
from policyscrape.common.exceptions import ScraperAssumptionException
from policyscrape.common.page_element import PageElement
from policyscrape.data_types import Response

logger = logging.getLogger(__name__)

_EMPTY_DOCUMENT = b"<html></html>"


class LxmlPageElement:
    """Implementation of PageElement protocol wrapping CheckedHtmlElement.

    Attributes:
        _element: The underlying CheckedHtmlElement.
        _url: The URL the page was fetched from, for error context.
    """

    def __init__(self, element: CheckedHtmlElement, url: str = ""):
        self._element = element
        self._url = url

    def _wrap(self, element: etree._Element) -> LxmlPageElement:
        return LxmlPageElement(CheckedHtmlElement(element, self._url), self._url)

    def query_css(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[LxmlPageElement]:
        """Query elements by CSS selector.

        Args:
            selector: CSS selector expression.
            description: Human-readable description of what's being selected.
            min_count: Minimum number of elements expected (default: 1).
            max_count: Maximum number of elements expected (None = unlimited).

        Returns:
            List of matching LxmlPageElement instances.

        Raises:
            HTMLStructuralAssumptionException: If count doesn't match expectations.
        """
        checked_elements = self._element.checked_css(
            selector, description, min_count, max_count
        )
        return [LxmlPageElement(elem, self._url) for elem in checked_elements]

    def css_text(self, selector: str, description: str = "") -> str:
        """Concatenated, trimmed text of every element matching a selector.

        Args:
            selector: CSS selector expression.
            description: Human-readable description; defaults to the selector.

        Returns:
            The joined text of all matches, or "" when nothing matches.
        """
        return joined_text(
            self.query_css(selector, description or selector, min_count=0)
        )

    def text_content(self) -> str:
        return self._element.text_content()

    def get_attribute(self, name: str) -> str | None:
        return self._element.get(name)

    def tag_name(self) -> str:
        return self._element.tag.lower()

    def parent(self) -> LxmlPageElement | None:
        """Get the parent element.

        Returns:
            The parent element, or None if this is the document root.
        """
        parent = self._element.getparent()
        if parent is None:
            return None
        return self._wrap(parent)

    def next_sibling(self) -> LxmlPageElement | None:
        """Get the next sibling element.

        Text between elements belongs to lxml's tail, so it is skipped
        naturally; comments and processing instructions are skipped here.

        Returns:
            The next sibling element, or None if there is none.
        """
        sibling = self._element.getnext()
        while sibling is not None and not isinstance(sibling.tag, str):
            sibling = sibling.getnext()
        if sibling is None:
            return None
        return self._wrap(sibling)

    def children(self, tag: str | None = None) -> list[LxmlPageElement]:
        """Get the direct child elements.

        Args:
            tag: Optional tag name to filter on (e.g. "td").

        Returns:
            Child elements in document order.
        """
        if tag is None:
            kids = [
                child
                for child in self._element.iterchildren()
                if isinstance(child.tag, str)
            ]
        else:
            kids = list(self._element.iterchildren(tag))
        return [self._wrap(child) for child in kids]


def joined_text(elements: Sequence[PageElement]) -> str:
    """Concatenate the text of several elements and trim the result."""
    return "".join(element.text_content() for element in elements).strip()


def parse_page(response: Response) -> LxmlPageElement:
    """Parse a fetched page into a LxmlPageElement.

    Passes raw bytes to lxml so it can auto-detect encoding from the HTML
    meta charset tag. A body with no elements in it (blank, whitespace or
    comments only) parses as an empty document rather than an error, so
    such a page simply has nothing to extract.

    Args:
        response: The fetched page.

    Returns:
        LxmlPageElement rooted at the document element.

    Raises:
        ScraperAssumptionException: If the content cannot be parsed as HTML.
    """
    content = response.content if response.content.strip() else _EMPTY_DOCUMENT
    try:
        root = lxml_html.fromstring(content)
    except etree.ParserError:
        logger.debug(f"No elements in page from {response.url}")
        root = lxml_html.fromstring(_EMPTY_DOCUMENT)
    except ValueError as e:
        raise ScraperAssumptionException(
            f"Failed to parse HTML: {e}",
            request_url=response.url,
            context={"error": str(e)},
        ) from e

    logger.debug(f"Parsed {len(content)} bytes from {response.url}")
    return LxmlPageElement(CheckedHtmlElement(root, response.url), response.url)
