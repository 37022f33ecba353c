"""
Validated scalar types shared by the ledger models.

Flight identifiers are 32-byte values carried as 64 lowercase hex characters.
Route endpoints and booking tags are short interned tokens ("symbols").
Addresses are opaque account identifiers compared by exact equality.
"""

import secrets
from typing import Annotated, Any

from pydantic import BeforeValidator, StringConstraints, TypeAdapter

FLIGHT_ID_BYTES = 32
FLIGHT_ID_PATTERN = r"^[0-9a-f]{64}$"
SYMBOL_PATTERN = r"^[A-Za-z0-9_]{1,32}$"
ADDRESS_PATTERN = r"^[\x21-\x7e]{1,128}$"


def _coerce_flight_id(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        if len(value) != FLIGHT_ID_BYTES:
            raise ValueError(f"Flight id must be {FLIGHT_ID_BYTES} bytes, got {len(value)}")
        return bytes(value).hex()
    if isinstance(value, str):
        return value.strip().lower()
    return value


FlightId = Annotated[
    str,
    BeforeValidator(_coerce_flight_id),
    StringConstraints(pattern=FLIGHT_ID_PATTERN),
]

Symbol = Annotated[str, StringConstraints(pattern=SYMBOL_PATTERN)]

Address = Annotated[str, StringConstraints(pattern=ADDRESS_PATTERN)]

flight_id_adapter = TypeAdapter(FlightId)
symbol_adapter = TypeAdapter(Symbol)
address_adapter = TypeAdapter(Address)


def new_flight_id() -> str:
    """Generate a random flight identifier."""
    return secrets.token_bytes(FLIGHT_ID_BYTES).hex()


def flight_id_from_bytes(raw: bytes) -> str:
    """
    Convert a raw 32-byte identifier to its hex form.

    Raises:
        pydantic.ValidationError: If raw is not exactly 32 bytes
    """
    return flight_id_adapter.validate_python(raw)
