"""Data types shared by the request manager, scrapers and drivers.

This module defines the small, immutable vocabulary the rest of the package
is written in:

1. Carrier - the closed set of supported carriers
2. Pagination - how a carrier spreads a customer's policies across pages
3. Response - a fetched page
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Carrier(Enum):
    """Carriers the scrapers know how to read.

    The values double as the tags accepted in batch input JSON.
    """

    MOCK_INDEMNITY = "MOCK_INDEMNITY"
    PLACEHOLDER_CARRIER = "PLACEHOLDER_CARRIER"


class Pagination(Enum):
    """How a carrier lays out one customer's data.

    Values:
        SINGLE_PAGE: Everything is on ``{base}/{customer_id}``.
        PAGED: Policies are split over ``{base}/{customer_id}/policies/{n}``
            for n = 1, 2, ... until an empty or missing page.
    """

    SINGLE_PAGE = "single_page"
    PAGED = "paged"


# (carrier, customer id) - the deduplication key for a batch.
CarrierKey = tuple[Carrier, str]


@dataclass
class Response:
    """HTTP response from fetching a page.

    Modeled after httpx.Response to provide a familiar interface.

    Attributes:
        status_code: HTTP status code (200, 404, etc.).
        content: Raw response bytes.
        text: Decoded response text.
        url: Final URL after any redirects.
    """

    status_code: int
    content: bytes
    text: str
    url: str
