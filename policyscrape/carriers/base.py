"""Shared pieces for carrier extraction strategies."""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from dataclasses import dataclass

from policyscrape.common.data_models import Agent, Customer, Policy
from policyscrape.common.lxml_page_element import joined_text
from policyscrape.common.page_element import PageElement
from policyscrape.data_types import Carrier, Pagination

# Leading decimal number: sign, digits with optional fraction (or a bare
# fraction), optional exponent. Anything after it is ignored.
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class CarrierDefinition:
    """How to read one carrier.

    Each strategy function is a pure projection of one parsed page; the
    carrier scraper decides which pages to fetch based on ``pagination``.

    Attributes:
        carrier: The carrier tag this definition serves.
        pagination: Single page per customer, or numbered policy pages.
        extract_agent: Page -> Agent.
        extract_customer: Page -> Customer.
        extract_policies: Page -> the policies on that page.
    """

    carrier: Carrier
    pagination: Pagination
    extract_agent: Callable[[PageElement], Agent]
    extract_customer: Callable[[PageElement], Customer]
    extract_policies: Callable[[PageElement], list[Policy]]


def parse_premium(text: str) -> float:
    """Read a premium amount from page text.

    Takes the longest leading decimal number and ignores whatever follows
    it, so "120.50 USD" reads as 120.5. Text without a leading number,
    including the empty string, reads as 0.

    Examples:
        >>> parse_premium("123.45")
        123.45
        >>> parse_premium("")
        0.0
        >>> parse_premium("$1,200")
        0.0
    """
    match = _LEADING_NUMBER.match(text.strip())
    if match is None:
        return 0.0
    value = float(match.group())
    if value == 0 or not math.isfinite(value):
        # "-0" reads as plain 0.
        return 0.0
    return value


def nth_text(elements: list[PageElement], index: int) -> str:
    """Trimmed text of ``elements[index]``, or "" if there is no such element."""
    if index >= len(elements):
        return ""
    return elements[index].text_content().strip()


def nth_descendant_text(
    elements: list[PageElement], index: int, selector: str
) -> str:
    """Text of the ``selector`` matches inside ``elements[index]``.

    Returns "" if there is no such element or nothing inside matches.
    """
    if index >= len(elements):
        return ""
    return elements[index].css_text(selector)


__all__ = [
    "CarrierDefinition",
    "joined_text",
    "nth_descendant_text",
    "nth_text",
    "parse_premium",
]
