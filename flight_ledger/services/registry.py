"""
Flight registry: the canonical FlightDetails record per flight identifier.
"""

from typing import Optional

from ..errors import FlightNotFound
from ..models.codec import decode_flight, encode_flight
from ..models.flight import FlightDetails
from ..store.keys import FlightKey
from ..store.transaction import StagedTransaction


class FlightRegistry:
    """Reads and writes flight records within one call."""

    def __init__(self, txn: StagedTransaction):
        self.txn = txn

    def exists(self, flight_id: str) -> bool:
        return self.txn.has(FlightKey(flight_id))

    def find(self, flight_id: str) -> Optional[FlightDetails]:
        raw = self.txn.get(FlightKey(flight_id))
        return decode_flight(raw) if raw is not None else None

    def require(self, flight_id: str) -> FlightDetails:
        """
        Fetch a flight that must exist.

        Raises:
            FlightNotFound: If no record is stored for flight_id
        """
        flight = self.find(flight_id)
        if flight is None:
            raise FlightNotFound(f"Flight not found: {flight_id}")
        return flight

    def save(self, flight: FlightDetails) -> None:
        self.txn.set(FlightKey(flight.id), encode_flight(flight))
