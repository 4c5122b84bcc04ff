"""Batch orchestrator: scrape a list of (carrier, customer) requests.

The orchestrator walks the request entries in order, scrapes each distinct
(carrier, customer id) pair exactly once, and reassembles the results in
input order. Duplicate entries repeat the same record.

Fetches are awaited one at a time. A failure that a carrier scraper lets
propagate aborts the whole batch; no partial output is produced.

Example::

    entries = parse_entries(
        '[{"carrier": "MOCK_INDEMNITY", "customerId": "a0dfjw9a"}]'
    )
    records = await scrape_batch(entries)
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping

from policyscrape.carriers import CARRIERS, get_definition
from policyscrape.common.data_models import (
    CarrierRecord,
    RequestEntry,
    dump_records,
)
from policyscrape.common.exceptions import UnknownCarrierException
from policyscrape.common.request_manager import (
    AsyncRequestManager,
    PageFetcher,
)
from policyscrape.config import ScrapeSettings
from policyscrape.data_types import Carrier, CarrierKey
from policyscrape.driver.carrier_scraper import CarrierScraper

# Async callback invoked once per newly scraped key.
RecordCallback = Callable[[CarrierKey, CarrierRecord], Awaitable[None]]


class ResultSet:
    """Records scraped so far, keyed by (carrier, customer id).

    Each key is stored at most once; adding a key twice is a bug in the
    caller and raises KeyError.
    """

    def __init__(self) -> None:
        self._records: dict[CarrierKey, CarrierRecord] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __len__(self) -> int:
        return len(self._records)

    def add(self, key: CarrierKey, record: CarrierRecord) -> None:
        if key in self._records:
            raise KeyError(f"{key!r} has already been scraped")
        self._records[key] = record

    def get(self, key: CarrierKey) -> CarrierRecord | None:
        return self._records.get(key)


class BatchOrchestrator:
    """Runs a batch of request entries against a set of carrier scrapers.

    Attributes:
        scrapers: One CarrierScraper per carrier the batch may name.
        on_record: Optional async callback called after each new key is
            scraped, before the next entry is processed.
        scrape_count: Number of scrapes dispatched by the last run().
    """

    def __init__(
        self,
        scrapers: Mapping[Carrier, CarrierScraper],
        on_record: RecordCallback | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.scrapers = dict(scrapers)
        self.on_record = on_record
        self.logger = (
            logger if logger is not None else logging.getLogger(__name__)
        )
        self.scrape_count = 0

    def scraper_for(self, carrier: Carrier) -> CarrierScraper:
        """The scraper registered for ``carrier``.

        Raises:
            UnknownCarrierException: If the batch has no scraper for it.
        """
        try:
            return self.scrapers[carrier]
        except KeyError:
            raise UnknownCarrierException(carrier) from None

    async def run(self, entries: Iterable[RequestEntry]) -> list[CarrierRecord]:
        """Scrape every distinct entry and return records in input order.

        Args:
            entries: The batch, in the order results should come back.

        Returns:
            One record per entry. Duplicate entries share one record.

        Raises:
            TransientException: If a single-page carrier cannot be fetched.
                The batch stops at that entry.
            UnknownCarrierException: If an entry names a carrier with no
                scraper.
        """
        entries = list(entries)
        results = ResultSet()
        self.scrape_count = 0
        self.logger.debug(f"Starting batch of {len(entries)} entries")

        for entry in entries:
            if entry.key in results:
                self.logger.debug(
                    f"[{entry.carrier.value}] Customer {entry.customer_id} "
                    "already scraped, reusing result"
                )
                continue

            scraper = self.scraper_for(entry.carrier)
            record = await scraper.scrape(entry.customer_id)
            self.scrape_count += 1
            results.add(entry.key, record)
            if self.on_record:
                await self.on_record(entry.key, record)

        records = [
            record
            for record in (results.get(entry.key) for entry in entries)
            if record is not None
        ]
        self.logger.info(
            f"Batch finished: {len(records)} records from "
            f"{self.scrape_count} scrapes"
        )
        return records

    async def run_json(self, entries: Iterable[RequestEntry]) -> str:
        """Like run(), but return the records as a JSON array string."""
        return dump_records(await self.run(entries))


def build_scrapers(
    settings: ScrapeSettings,
    fetcher: PageFetcher,
    logger: logging.Logger | None = None,
) -> dict[Carrier, CarrierScraper]:
    """One CarrierScraper per registered carrier, sharing ``fetcher``."""
    return {
        carrier: CarrierScraper(
            definition,
            base_url=settings.base_url(carrier),
            fetcher=fetcher,
            max_pages=settings.max_pages,
            logger=logger,
        )
        for carrier, definition in CARRIERS.items()
    }


async def scrape_batch(
    entries: Iterable[RequestEntry],
    settings: ScrapeSettings | None = None,
    on_record: RecordCallback | None = None,
) -> list[CarrierRecord]:
    """Scrape a batch over a fresh HTTP client, closed when done.

    Args:
        entries: The batch, in output order.
        settings: Base URLs, page ceiling and timeout. Defaults apply when
            omitted.
        on_record: Optional async callback, see BatchOrchestrator.

    Returns:
        The records, in input order.
    """
    settings = settings or ScrapeSettings()
    async with AsyncRequestManager(timeout=settings.timeout) as manager:
        orchestrator = BatchOrchestrator(
            build_scrapers(settings, manager), on_record=on_record
        )
        return await orchestrator.run(entries)


async def scrape_customer(
    carrier: Carrier,
    customer_id: str,
    settings: ScrapeSettings | None = None,
) -> CarrierRecord:
    """Scrape a single customer from a single carrier.

    Raises:
        TransientException: If ``carrier`` is single-page and its page
            cannot be fetched.
        UnknownCarrierException: If ``carrier`` has no definition.
    """
    settings = settings or ScrapeSettings()
    definition = get_definition(carrier)
    async with AsyncRequestManager(timeout=settings.timeout) as manager:
        scraper = CarrierScraper(
            definition,
            base_url=settings.base_url(carrier),
            fetcher=manager,
            max_pages=settings.max_pages,
        )
        return await scraper.scrape(customer_id)
