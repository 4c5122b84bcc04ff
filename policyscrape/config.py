"""Runtime settings for carrier scraping.

Defaults point at the public scraping-interview deployment. The CLI maps
its options onto ScrapeSettings; library callers construct one directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from policyscrape.data_types import Carrier

DEFAULT_BASE_URLS: dict[Carrier, str] = {
    Carrier.MOCK_INDEMNITY: "https://scraping-interview.onrender.com/mock_indemnity/",
    Carrier.PLACEHOLDER_CARRIER: "https://scraping-interview.onrender.com/placeholder_carrier/",
}

# Upper bound on pages fetched for one paginated customer.
DEFAULT_MAX_PAGES = 100

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class ScrapeSettings:
    """Settings shared by every scraper in a batch.

    Attributes:
        base_urls: Base URL per carrier. Customer ids (and page paths) are
            appended with a single "/" whether or not the base ends in one.
        max_pages: Page ceiling for paginated carriers. None disables it.
        timeout: HTTP timeout in seconds. None disables it.
    """

    base_urls: dict[Carrier, str] = field(
        default_factory=lambda: dict(DEFAULT_BASE_URLS)
    )
    max_pages: int | None = DEFAULT_MAX_PAGES
    timeout: float | None = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if self.max_pages is not None and self.max_pages < 1:
            raise ValueError(
                f"max_pages must be at least 1 or None, got {self.max_pages}"
            )

    def base_url(self, carrier: Carrier) -> str:
        """Base URL for ``carrier``, falling back to the default."""
        return self.base_urls.get(carrier, DEFAULT_BASE_URLS[carrier])

    def with_base_url(self, carrier: Carrier, url: str) -> ScrapeSettings:
        """Return a copy with one carrier's base URL replaced."""
        return replace(self, base_urls={**self.base_urls, carrier: url})
