"""Pydantic data models for scraped carrier data.

These models define the normalized schema every carrier is mapped onto.
Python attributes are snake_case; the JSON produced by ``dump_records``
and accepted by ``parse_entries`` uses the camelCase aliases.
"""

from __future__ import annotations

import json
from collections.abc import Iterable

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_serializer,
)

from policyscrape.data_types import Carrier, CarrierKey


class ScrapedData(BaseModel):
    """Base class for normalized records.

    Records are immutable once extracted and may be built from either
    the snake_case field names or their camelCase aliases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Dump with camelCase keys, as written to batch output."""
        return self.model_dump(mode="json", by_alias=True)


class Policy(ScrapedData):
    """A single policy row."""

    id: str = Field("", description="Policy identifier")
    premium: float = Field(
        0.0, description="Premium amount; 0 when the page text is not numeric"
    )
    status: str = Field("", description="Policy status, e.g. Active")
    effective_date: str = Field("", alias="effectiveDate")
    termination_date: str = Field("", alias="terminationDate")
    last_payment_date: str = Field(
        "",
        alias="lastPaymentDate",
        description="Always empty for PLACEHOLDER_CARRIER",
    )

    @field_serializer("premium")
    def _serialize_premium(self, premium: float) -> int | float:
        # Whole amounts are written as integers: 980, not 980.0.
        return int(premium) if float(premium).is_integer() else premium


class Agent(ScrapedData):
    """The agent of record for a customer."""

    name: str = Field("", description="Agent name")
    producer_code: str = Field("", alias="producerCode")
    agency_name: str = Field("", alias="agencyName")
    agency_code: str = Field("", alias="agencyCode")

    @classmethod
    def empty(cls) -> Agent:
        """An agent shell with every field set to the empty string."""
        return cls()


class Customer(ScrapedData):
    """The customer a batch entry asks about."""

    name: str = Field("", description="Customer name")
    id: str = Field("", description="Customer identifier as shown on the page")
    email: str = Field("", description="Contact email")
    address: str = Field("", description="Postal address")

    @classmethod
    def empty(cls) -> Customer:
        """A customer shell with every field set to the empty string."""
        return cls()


class CarrierRecord(ScrapedData):
    """Everything scraped for one (carrier, customer) pair.

    Policies keep page order, then in-page order.
    """

    agent: Agent
    customer: Customer
    policies: list[Policy] = Field(default_factory=list)


class RequestEntry(BaseModel):
    """One line of batch input: which carrier to ask about which customer."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    carrier: Carrier
    customer_id: str = Field(..., alias="customerId")

    @property
    def key(self) -> CarrierKey:
        """The (carrier, customer id) pair used for deduplication."""
        return (self.carrier, self.customer_id)


_ENTRIES_ADAPTER = TypeAdapter(list[RequestEntry])


def parse_entries(raw: str | bytes) -> list[RequestEntry]:
    """Validate batch input JSON.

    Args:
        raw: A JSON array of ``{"carrier": ..., "customerId": ...}`` objects.

    Returns:
        The entries, in input order.

    Raises:
        pydantic.ValidationError: If the JSON is malformed, not a list, or
            names an unknown carrier.
    """
    return _ENTRIES_ADAPTER.validate_json(raw)


def dump_records(records: Iterable[CarrierRecord]) -> str:
    """Serialize records as a pretty-printed JSON array."""
    return json.dumps(
        [record.to_json_dict() for record in records],
        indent=2,
        ensure_ascii=False,
    )
