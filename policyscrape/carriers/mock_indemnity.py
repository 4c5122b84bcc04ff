"""Extraction strategy for Mock Indemnity.

Mock Indemnity renders one page per customer at ``{base}/{customer_id}``.
Agent and customer fields are ``<dd class="value-...">`` entries inside
definition lists; the agent's list comes first, so the first
``.value-name`` is the agent and the second is the customer. Policies are
``<li>`` items of ``#policy-list``, one classed element per field.
"""

from __future__ import annotations

from policyscrape.carriers.base import CarrierDefinition, nth_text, parse_premium
from policyscrape.common.data_models import Agent, Customer, Policy
from policyscrape.common.page_element import PageElement
from policyscrape.data_types import Carrier, Pagination


def _names(page: PageElement) -> list[PageElement]:
    return page.query_css("dl .value-name", "agent and customer names", min_count=0)


def extract_agent(page: PageElement) -> Agent:
    return Agent(
        name=nth_text(_names(page), 0),
        producer_code=page.css_text("dl .value-producerCode"),
        agency_name=page.css_text("dl .value-agencyName"),
        agency_code=page.css_text("dl .value-agencyCode"),
    )


def extract_customer(page: PageElement) -> Customer:
    return Customer(
        name=nth_text(_names(page), 1),
        id=page.css_text("dl .value-id"),
        email=page.css_text("dl .value-email"),
        address=page.css_text("dl .value-address"),
    )


def extract_policies(page: PageElement) -> list[Policy]:
    """Read every ``#policy-list li`` row, in page order."""
    rows = page.query_css("#policy-list li", "policy rows", min_count=0)
    return [
        Policy(
            id=row.css_text(".id"),
            premium=parse_premium(row.css_text(".premium")),
            status=row.css_text(".status"),
            effective_date=row.css_text(".effectiveDate"),
            termination_date=row.css_text(".terminationDate"),
            last_payment_date=row.css_text(".lastPaymentDate"),
        )
        for row in rows
    ]


DEFINITION = CarrierDefinition(
    carrier=Carrier.MOCK_INDEMNITY,
    pagination=Pagination.SINGLE_PAGE,
    extract_agent=extract_agent,
    extract_customer=extract_customer,
    extract_policies=extract_policies,
)
