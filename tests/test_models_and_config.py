"""Tests for the data models, batch input parsing and ScrapeSettings."""

import pytest
from pydantic import ValidationError

from policyscrape.carriers import CARRIERS, get_definition
from policyscrape.common.data_models import (
    Agent,
    CarrierRecord,
    Customer,
    Policy,
    dump_records,
    parse_entries,
)
from policyscrape.common.exceptions import UnknownCarrierException
from policyscrape.config import DEFAULT_BASE_URLS, ScrapeSettings
from policyscrape.data_types import Carrier


class TestDataModels:
    """Tests for the normalized record models."""

    def test_models_accept_camel_case(self):
        """Models shall accept their camelCase aliases as well as field names."""
        policy = Policy.model_validate(
            {
                "id": "P-1",
                "premium": 5,
                "status": "Active",
                "effectiveDate": "a",
                "terminationDate": "b",
                "lastPaymentDate": "c",
            }
        )

        assert policy.effective_date == "a"
        assert policy.last_payment_date == "c"

    def test_models_are_frozen(self):
        """Records shall be immutable once built."""
        agent = Agent(name="A")
        with pytest.raises(ValidationError):
            agent.name = "B"

    def test_empty_shells(self):
        """Empty shells shall have every field set to the empty string."""
        assert Agent.empty().to_json_dict() == {
            "name": "",
            "producerCode": "",
            "agencyName": "",
            "agencyCode": "",
        }
        assert set(Customer.empty().to_json_dict().values()) == {""}

    def test_dump_records(self):
        """dump_records shall write camelCase keys with 2-space indentation."""
        record = CarrierRecord(
            agent=Agent.empty(),
            customer=Customer.empty(),
            policies=[Policy(id="P", premium=1.5)],
        )

        output = dump_records([record])

        assert '\n    "agent": {' in output
        assert '"lastPaymentDate": ""' in output
        assert '"premium": 1.5' in output

    def test_dump_records_whole_premium_and_unicode(self):
        """dump_records shall write whole premiums as integers and keep non-ASCII text."""
        record = CarrierRecord(
            agent=Agent(name="Zoë Brandão"),
            customer=Customer(name="José Núñez"),
            policies=[Policy(id="P", premium=980.0), Policy(id="Q", premium=-0.0)],
        )

        output = dump_records([record])

        assert '"premium": 980,' in output
        assert '"premium": 0,' in output
        assert "980.0" not in output
        assert '"name": "José Núñez"' in output
        assert "\\u" not in output


class TestParseEntries:
    """Tests for batch input validation."""

    def test_valid_entries(self):
        """parse_entries shall return entries in input order."""
        entries = parse_entries(
            '[{"carrier": "PLACEHOLDER_CARRIER", "customerId": "b"},'
            ' {"carrier": "MOCK_INDEMNITY", "customerId": "a"}]'
        )

        assert [e.key for e in entries] == [
            (Carrier.PLACEHOLDER_CARRIER, "b"),
            (Carrier.MOCK_INDEMNITY, "a"),
        ]

    @pytest.mark.parametrize(
        "raw",
        [
            '[{"carrier": "ACME", "customerId": "a"}]',
            '[{"carrier": "MOCK_INDEMNITY"}]',
            '{"carrier": "MOCK_INDEMNITY", "customerId": "a"}',
            "not json",
        ],
    )
    def test_invalid_entries(self, raw):
        """parse_entries shall reject unknown carriers and malformed input."""
        with pytest.raises(ValidationError):
            parse_entries(raw)

    def test_empty_customer_id_accepted(self):
        """parse_entries shall accept any string as a customer id, including ""."""
        entries = parse_entries(
            '[{"carrier": "MOCK_INDEMNITY", "customerId": ""}]'
        )

        assert [e.key for e in entries] == [(Carrier.MOCK_INDEMNITY, "")]


class TestRegistry:
    """Tests for the carrier registry."""

    def test_every_carrier_registered(self):
        """Every Carrier tag shall have a definition."""
        assert set(CARRIERS) == set(Carrier)
        for carrier in Carrier:
            assert get_definition(carrier).carrier is carrier

    def test_unknown_carrier(self):
        """get_definition shall raise UnknownCarrierException for a bad tag."""
        with pytest.raises(UnknownCarrierException):
            get_definition("ACME")


class TestScrapeSettings:
    """Tests for ScrapeSettings."""

    def test_defaults(self):
        """ScrapeSettings shall default to the public base URLs and a 100-page ceiling."""
        settings = ScrapeSettings()

        assert settings.max_pages == 100
        assert settings.timeout == 30.0
        for carrier in Carrier:
            assert settings.base_url(carrier) == DEFAULT_BASE_URLS[carrier]

    def test_with_base_url_copies(self):
        """with_base_url shall return a changed copy and leave the original alone."""
        settings = ScrapeSettings()
        changed = settings.with_base_url(Carrier.MOCK_INDEMNITY, "http://x/")

        assert changed.base_url(Carrier.MOCK_INDEMNITY) == "http://x/"
        assert (
            changed.base_url(Carrier.PLACEHOLDER_CARRIER)
            == DEFAULT_BASE_URLS[Carrier.PLACEHOLDER_CARRIER]
        )
        assert (
            settings.base_url(Carrier.MOCK_INDEMNITY)
            == DEFAULT_BASE_URLS[Carrier.MOCK_INDEMNITY]
        )

    def test_partial_base_urls_fall_back(self):
        """A carrier missing from base_urls shall use its default URL."""
        settings = ScrapeSettings(base_urls={Carrier.MOCK_INDEMNITY: "http://x"})

        assert (
            settings.base_url(Carrier.PLACEHOLDER_CARRIER)
            == DEFAULT_BASE_URLS[Carrier.PLACEHOLDER_CARRIER]
        )

    def test_invalid_max_pages(self):
        """A page ceiling below 1 shall be rejected."""
        with pytest.raises(ValueError):
            ScrapeSettings(max_pages=0)
