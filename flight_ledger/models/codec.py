"""
JSON codecs for values kept in the key-value store.

Each logical key family stores exactly one value shape; these helpers are the
only place those shapes are turned into strings and back.
"""

from typing import List

from pydantic import TypeAdapter

from .flight import FlightDetails
from .passenger import PassengerRecord
from .types import Address, FlightId

_flight_ids = TypeAdapter(List[FlightId])
_passenger_records = TypeAdapter(List[PassengerRecord])
_address = TypeAdapter(Address)


def encode_flight(flight: FlightDetails) -> str:
    return flight.model_dump_json()


def decode_flight(raw: str) -> FlightDetails:
    return FlightDetails.model_validate_json(raw)


def encode_flight_ids(ids: List[str]) -> str:
    return _flight_ids.dump_json(ids).decode()


def decode_flight_ids(raw: str) -> List[str]:
    return _flight_ids.validate_json(raw)


def encode_passenger_records(records: List[PassengerRecord]) -> str:
    return _passenger_records.dump_json(records).decode()


def decode_passenger_records(raw: str) -> List[PassengerRecord]:
    return _passenger_records.validate_json(raw)


def encode_address(address: str) -> str:
    return _address.dump_json(address).decode()


def decode_address(raw: str) -> str:
    return _address.validate_json(raw)
