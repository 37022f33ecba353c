"""
Flight ledger Pydantic models package.

This package contains the records kept in the key-value store, the validated
scalar types they are built from, and the receipts returned by workflows.
"""

# Enums
from .enums import (
    FlightStatus,
    StorageTier,
)

# Scalar types
from .types import (
    FlightId,
    Symbol,
    Address,
    new_flight_id,
    flight_id_from_bytes,
)

# Stored records
from .flight import FlightDetails
from .passenger import PassengerRecord

# Receipts
from .receipt import (
    RefundQuote,
    TicketReceipt,
    CancellationReceipt,
)

__all__ = [
    # Enums
    "FlightStatus",
    "StorageTier",

    # Types
    "FlightId",
    "Symbol",
    "Address",
    "new_flight_id",
    "flight_id_from_bytes",

    # Records
    "FlightDetails",
    "PassengerRecord",

    # Receipts
    "RefundQuote",
    "TicketReceipt",
    "CancellationReceipt",
]
