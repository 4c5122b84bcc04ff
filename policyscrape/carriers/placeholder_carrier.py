"""Extraction strategy for Placeholder Carrier.

Placeholder Carrier spreads a customer's policies over numbered pages at
``{base}/{customer_id}/policies/{n}``. Every page repeats the agency and
customer panels:

- ``.agency-details`` holds four ``.nice-formatted-kv`` blocks (agent name,
  producer code, agency name, agency code), each value in a ``<span>``.
- ``.customer-details`` holds label/value ``<div>`` blocks. The address
  block has no span; its text is "Address: <value>".
- Policies are ``.policy-info-row`` table rows with five cells. There is no
  last-payment column.
"""

from __future__ import annotations

from policyscrape.carriers.base import (
    CarrierDefinition,
    joined_text,
    nth_descendant_text,
    nth_text,
    parse_premium,
)
from policyscrape.common.data_models import Agent, Customer, Policy
from policyscrape.common.page_element import PageElement
from policyscrape.data_types import Carrier, Pagination

ADDRESS_LABEL = "Address:"


def extract_agent(page: PageElement) -> Agent:
    lines = page.query_css(
        ".agency-details .nice-formatted-kv", "agency detail lines", min_count=0
    )
    return Agent(
        name=nth_descendant_text(lines, 0, "span"),
        producer_code=nth_descendant_text(lines, 1, "span"),
        agency_name=nth_descendant_text(lines, 2, "span"),
        agency_code=nth_descendant_text(lines, 3, "span"),
    )


def extract_customer(page: PageElement) -> Customer:
    blocks = page.query_css(
        ".customer-details div", "customer detail blocks", min_count=0
    )

    name = ""
    name_labels = page.query_css(
        '.customer-details label[for="name"]', "customer name label", min_count=0
    )
    if name_labels:
        name_block = name_labels[0].parent()
        if name_block is not None:
            name = name_block.css_text("span")

    email_labels = page.query_css(
        '.customer-details label:contains("Email")',
        "customer email label",
        min_count=0,
    )
    email_values = [
        sibling
        for sibling in (label.next_sibling() for label in email_labels)
        if sibling is not None
    ]

    return Customer(
        name=name,
        id=nth_descendant_text(blocks, 2, "span"),
        email=joined_text(email_values),
        address=_address(blocks),
    )


def _address(blocks: list[PageElement]) -> str:
    if not blocks:
        return ""
    text = blocks[-1].text_content().strip()
    return text.replace(ADDRESS_LABEL, "", 1).strip()


def extract_policies(page: PageElement) -> list[Policy]:
    """Read the ``.policy-info-row`` rows on one page, in page order."""
    policies = []
    for row in page.query_css(".policy-info-row", "policy rows", min_count=0):
        cells = row.children("td")
        policies.append(
            Policy(
                id=nth_text(cells, 0),
                premium=parse_premium(nth_text(cells, 1)),
                status=nth_text(cells, 2),
                effective_date=nth_text(cells, 3),
                termination_date=nth_text(cells, 4),
                last_payment_date="",
            )
        )
    return policies


DEFINITION = CarrierDefinition(
    carrier=Carrier.PLACEHOLDER_CARRIER,
    pagination=Pagination.PAGED,
    extract_agent=extract_agent,
    extract_customer=extract_customer,
    extract_policies=extract_policies,
)
