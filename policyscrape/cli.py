"""policyscrape CLI: run scraping batches and list carriers.

Usage:
    policyscrape carriers                       # List known carriers
    policyscrape run                            # Scrape the demo batch
    policyscrape run batch.json                 # Scrape a batch file
    cat batch.json | policyscrape run -         # Scrape a batch from stdin
    policyscrape run batch.json -v --max-pages 10 \\
        --base-url MOCK_INDEMNITY=http://localhost:8080/mock_indemnity/
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TextIO

import click
from pydantic import ValidationError

from policyscrape.carriers import CARRIERS
from policyscrape.common.data_models import (
    RequestEntry,
    dump_records,
    parse_entries,
)
from policyscrape.common.exceptions import (
    ScraperAssumptionException,
    TransientException,
)
from policyscrape.config import (
    DEFAULT_MAX_PAGES,
    DEFAULT_TIMEOUT,
    ScrapeSettings,
)
from policyscrape.data_types import Carrier
from policyscrape.driver.batch import scrape_batch

DEMO_ENTRIES = [
    RequestEntry(carrier=Carrier.MOCK_INDEMNITY, customer_id="a0dfjw9a"),
    RequestEntry(carrier=Carrier.PLACEHOLDER_CARRIER, customer_id="f02dkl4e"),
]


def parse_base_url(value: str) -> tuple[Carrier, str]:
    """Parse a ``CARRIER=URL`` option value.

    Raises:
        click.BadParameter: If the format is invalid or the carrier is
            unknown.
    """
    if "=" not in value:
        raise click.BadParameter(
            f"Invalid base URL '{value}'. Expected format: 'CARRIER=URL'"
        )

    name, url = value.split("=", 1)
    try:
        carrier = Carrier(name.strip().upper())
    except ValueError:
        known = ", ".join(c.value for c in Carrier)
        raise click.BadParameter(
            f"Unknown carrier '{name}'. Known carriers: {known}"
        ) from None
    if not url.strip():
        raise click.BadParameter(f"Empty base URL for {carrier.value}")
    return carrier, url.strip()


def _base_url_callback(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> list[tuple[Carrier, str]]:
    return [parse_base_url(value) for value in values]


def read_entries(input_file: TextIO | None) -> list[RequestEntry]:
    """Load batch entries from a file, or the demo batch without one.

    Raises:
        click.BadParameter: If the input is not a valid UTF-8 JSON batch.
    """
    if input_file is None:
        return list(DEMO_ENTRIES)
    try:
        return parse_entries(input_file.read())
    except (ValidationError, UnicodeDecodeError) as e:
        raise click.BadParameter(
            f"Invalid batch input: {e}", param_hint="INPUT"
        ) from e


@click.group()
@click.version_option(package_name="policyscrape")
def cli() -> None:
    """policyscrape - insurance carrier policy scraper."""


@cli.command()
def carriers() -> None:
    """List the carriers that can be scraped."""
    settings = ScrapeSettings()
    for carrier, definition in CARRIERS.items():
        click.echo(
            f"{carrier.value:<20} {definition.pagination.value:<12} "
            f"{settings.base_url(carrier)}"
        )


@cli.command()
@click.argument(
    "input_file",
    metavar="[INPUT]",
    type=click.File("r", encoding="utf-8"),
    required=False,
)
@click.option(
    "--base-url",
    "base_urls",
    multiple=True,
    callback=_base_url_callback,
    metavar="CARRIER=URL",
    help="Override a carrier's base URL. May be repeated.",
)
@click.option(
    "--max-pages",
    type=click.IntRange(min=0),
    default=DEFAULT_MAX_PAGES,
    show_default=True,
    help="Page ceiling for paginated carriers; 0 disables it.",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0),
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="HTTP timeout in seconds; 0 disables it.",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging.")
def run(
    input_file: TextIO | None,
    base_urls: list[tuple[Carrier, str]],
    max_pages: int,
    timeout: float,
    verbose: bool,
) -> None:
    """Scrape a batch and print the records as a JSON array.

    INPUT is a JSON file (or - for stdin) holding a list of
    {"carrier": ..., "customerId": ...} objects. Without INPUT a demo
    batch of one customer per carrier is scraped.

    \b
    Examples:
        policyscrape run
        policyscrape run batch.json --max-pages 10
        policyscrape run batch.json --base-url MOCK_INDEMNITY=http://localhost:8080/mock_indemnity/
    """
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    entries = read_entries(input_file)

    settings = ScrapeSettings(
        max_pages=max_pages or None, timeout=timeout or None
    )
    for carrier, url in base_urls:
        settings = settings.with_base_url(carrier, url)

    try:
        records = asyncio.run(scrape_batch(entries, settings))
    except TransientException as e:
        raise click.ClickException(f"Batch aborted: {e}") from e
    except ScraperAssumptionException as e:
        raise click.ClickException(
            f"Unexpected page layout, batch aborted:\n{e}"
        ) from e

    click.echo(dump_records(records))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
