"""Carrier scraper: fetch, parse and extract one customer's record.

A CarrierScraper pairs a CarrierDefinition with a PageFetcher and a base
URL. Single-page carriers need one fetch whose failure propagates to the
caller. Paged carriers walk ``{base}/{customer_id}/policies/{n}`` from
n = 1 until:

1. a page comes back with no policy rows,
2. a page cannot be fetched (any TransientException), or
3. ``max_pages`` pages have been read.

In every case the policies gathered so far are returned. Agent and
customer come from the first page fetched successfully and are never
overwritten.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from typing_extensions import assert_never

from policyscrape.carriers import CarrierDefinition
from policyscrape.common.data_models import (
    Agent,
    CarrierRecord,
    Customer,
    Policy,
)
from policyscrape.common.exceptions import (
    HTMLResponseAssumptionException,
    TransientException,
)
from policyscrape.common.lxml_page_element import parse_page
from policyscrape.common.request_manager import PageFetcher
from policyscrape.config import DEFAULT_MAX_PAGES
from policyscrape.data_types import Carrier, Pagination


class StopReason(Enum):
    """Why a pagination loop ended."""

    EMPTY_PAGE = "empty_page"
    FETCH_FAILED = "fetch_failed"
    PAGE_LIMIT = "page_limit"


@dataclass
class PaginationState:
    """Progress of one paged scrape.

    Attributes:
        page: The next page number to fetch (1-indexed).
        agent: Agent from the first page fetched, if any.
        customer: Customer from the first page fetched, if any.
        policies: Policies from every non-empty page, in order.
        pages_read: Number of pages fetched and parsed successfully.
        stop_reason: Set once the loop has ended.
    """

    page: int = 1
    agent: Agent | None = None
    customer: Customer | None = None
    policies: list[Policy] = field(default_factory=list)
    pages_read: int = 0
    stop_reason: StopReason | None = None

    def to_record(self) -> CarrierRecord:
        """Build the record, filling in empty shells for anything unseen."""
        return CarrierRecord(
            agent=self.agent or Agent.empty(),
            customer=self.customer or Customer.empty(),
            policies=list(self.policies),
        )


def join_url(base_url: str, *parts: str | int) -> str:
    """Append path segments to a base URL with exactly one "/" between each."""
    segments = [base_url.rstrip("/")]
    segments.extend(str(part).strip("/") for part in parts)
    return "/".join(segments)


class CarrierScraper:
    """Scrapes one carrier, one customer at a time.

    Example::

        async with AsyncRequestManager(timeout=30.0) as manager:
            scraper = CarrierScraper(
                get_definition(Carrier.PLACEHOLDER_CARRIER),
                base_url="https://scraping-interview.onrender.com/placeholder_carrier/",
                fetcher=manager,
            )
            record = await scraper.scrape("f02dkl4e")
    """

    def __init__(
        self,
        definition: CarrierDefinition,
        base_url: str,
        fetcher: PageFetcher,
        max_pages: int | None = DEFAULT_MAX_PAGES,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the scraper.

        Args:
            definition: Extraction strategy and pagination mode.
            base_url: Carrier base URL; customer ids are appended to it.
            fetcher: Fetches pages; usually an AsyncRequestManager.
            max_pages: Page ceiling for paged carriers. None means no ceiling.
            logger: Where diagnostics go. Defaults to this module's logger.
        """
        if max_pages is not None and max_pages < 1:
            raise ValueError(
                f"max_pages must be at least 1 or None, got {max_pages}"
            )
        self.definition = definition
        self.base_url = base_url
        self.fetcher = fetcher
        self.max_pages = max_pages
        self.logger = (
            logger if logger is not None else logging.getLogger(__name__)
        )

    @property
    def carrier(self) -> Carrier:
        return self.definition.carrier

    def customer_url(self, customer_id: str) -> str:
        return join_url(self.base_url, customer_id)

    def page_url(self, customer_id: str, page: int) -> str:
        return join_url(self.base_url, customer_id, "policies", page)

    async def scrape(self, customer_id: str) -> CarrierRecord:
        """Scrape everything the carrier shows for ``customer_id``.

        Raises:
            TransientException: Single-page carriers only, if the page
                cannot be fetched.
        """
        match self.definition.pagination:
            case Pagination.SINGLE_PAGE:
                return await self.scrape_single_page(customer_id)
            case Pagination.PAGED:
                state = await self.paginate(customer_id)
                return state.to_record()
            case _:
                assert_never(self.definition.pagination)

    async def scrape_single_page(self, customer_id: str) -> CarrierRecord:
        """Fetch ``{base}/{customer_id}`` and extract the whole record from it.

        Raises:
            TransientException: If the page cannot be fetched.
        """
        self.logger.debug(
            f"[{self.carrier.value}] Scraping customer {customer_id}"
        )
        url = self.customer_url(customer_id)
        try:
            response = await self.fetcher.fetch(url)
        except TransientException as e:
            self.logger.debug(
                f"[{self.carrier.value}] Failed to fetch {url}: {e}"
            )
            raise

        page = parse_page(response)
        record = CarrierRecord(
            agent=self.definition.extract_agent(page),
            customer=self.definition.extract_customer(page),
            policies=self.definition.extract_policies(page),
        )
        self.logger.info(
            f"[{self.carrier.value}] Scraped customer {customer_id}: "
            f"{len(record.policies)} policies"
        )
        return record

    async def paginate(self, customer_id: str) -> PaginationState:
        """Walk the numbered policy pages for ``customer_id``.

        Never raises for fetch failures: a page that cannot be fetched ends
        the walk just like an empty page does.

        Returns:
            The final PaginationState, with ``stop_reason`` set.
        """
        self.logger.debug(
            f"[{self.carrier.value}] Paginating customer {customer_id}"
        )
        state = PaginationState()

        while state.stop_reason is None:
            if (
                self.max_pages is not None
                and state.pages_read >= self.max_pages
            ):
                self.logger.warning(
                    f"[{self.carrier.value}] Stopped customer {customer_id} "
                    f"at the {self.max_pages}-page limit with "
                    f"{len(state.policies)} policies"
                )
                state.stop_reason = StopReason.PAGE_LIMIT
                break

            url = self.page_url(customer_id, state.page)
            try:
                response = await self.fetcher.fetch(url)
            except TransientException as e:
                self._log_fetch_stop(customer_id, state.page, e)
                state.stop_reason = StopReason.FETCH_FAILED
                break

            page = parse_page(response)
            state.pages_read += 1
            if state.agent is None:
                state.agent = self.definition.extract_agent(page)
            if state.customer is None:
                state.customer = self.definition.extract_customer(page)

            page_policies = self.definition.extract_policies(page)
            if not page_policies:
                self.logger.debug(
                    f"[{self.carrier.value}] No policies on page "
                    f"{state.page} for customer {customer_id}"
                )
                state.stop_reason = StopReason.EMPTY_PAGE
                break

            state.policies.extend(page_policies)
            self.logger.debug(
                f"[{self.carrier.value}] Read {len(page_policies)} policies "
                f"from page {state.page} for customer {customer_id}"
            )
            state.page += 1

        self.logger.info(
            f"[{self.carrier.value}] Scraped customer {customer_id}: "
            f"{len(state.policies)} policies over {state.pages_read} pages "
            f"({state.stop_reason.value})"
        )
        return state

    def _log_fetch_stop(
        self, customer_id: str, page: int, error: TransientException
    ) -> None:
        # A 404 is how the carrier says "no such page"; anything else may
        # be an outage that is being read as end of data.
        if (
            isinstance(error, HTMLResponseAssumptionException)
            and error.status_code == 404
        ):
            self.logger.debug(
                f"[{self.carrier.value}] No page {page} for customer "
                f"{customer_id}; treating as end of data"
            )
        else:
            self.logger.warning(
                f"[{self.carrier.value}] Could not fetch page {page} for "
                f"customer {customer_id}, treating as end of data: {error}"
            )
