"""PageElement protocol for carrier data extraction.

This module provides the interface extraction strategies program against:
CSS querying with count validation, text extraction, and jQuery-style DOM
navigation (parent, next sibling, children). PageElement is always backed
by static parsed HTML (LXML); fetching the HTML is the request manager's
job.
"""

from __future__ import annotations

from typing import Protocol


class PageElement(Protocol):
    """Protocol for driver-agnostic data extraction from HTML elements.

    All query methods support count validation and raise
    HTMLStructuralAssumptionException if the actual count doesn't match
    expectations. Strategies that must tolerate missing nodes pass
    ``min_count=0``.
    """

    def query_css(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[PageElement]:
        """Query elements by CSS selector.

        Args:
            selector: CSS selector expression.
            description: Human-readable description of what's being selected.
            min_count: Minimum number of elements expected (default: 1).
            max_count: Maximum number of elements expected (None = unlimited).

        Returns:
            List of matching PageElement instances.

        Raises:
            HTMLStructuralAssumptionException: If count doesn't match expectations.
        """
        ...

    def css_text(self, selector: str, description: str = "") -> str:
        """Concatenated, trimmed text of every element matching a selector.

        Returns an empty string when nothing matches.
        """
        ...

    def text_content(self) -> str:
        """Extract the visible text content of the element and its descendants."""
        ...

    def get_attribute(self, name: str) -> str | None:
        """Extract an attribute value, or None if it doesn't exist."""
        ...

    def tag_name(self) -> str:
        """Get the element's tag name as a lowercase string."""
        ...

    def parent(self) -> PageElement | None:
        """Get the parent element, or None at the document root."""
        ...

    def next_sibling(self) -> PageElement | None:
        """Get the next sibling element, skipping text and comments."""
        ...

    def children(self, tag: str | None = None) -> list[PageElement]:
        """Get the direct child elements, optionally filtered by tag name."""
        ...
