"""Carrier extraction strategies.

Each supported carrier has a module exposing ``extract_agent``,
``extract_customer``, ``extract_policies`` and a ``DEFINITION`` bundling
them with the carrier's pagination mode. CARRIERS maps every Carrier tag
to its definition; lookups go through get_definition().
"""

from policyscrape.carriers import mock_indemnity, placeholder_carrier
from policyscrape.carriers.base import CarrierDefinition, parse_premium
from policyscrape.common.exceptions import UnknownCarrierException
from policyscrape.data_types import Carrier

CARRIERS: dict[Carrier, CarrierDefinition] = {
    definition.carrier: definition
    for definition in (mock_indemnity.DEFINITION, placeholder_carrier.DEFINITION)
}


def get_definition(carrier: Carrier) -> CarrierDefinition:
    """Look up the extraction strategy for a carrier tag.

    Raises:
        UnknownCarrierException: If no strategy is registered for ``carrier``.
    """
    try:
        return CARRIERS[carrier]
    except KeyError:
        raise UnknownCarrierException(carrier) from None


__all__ = [
    "CARRIERS",
    "CarrierDefinition",
    "get_definition",
    "parse_premium",
]
