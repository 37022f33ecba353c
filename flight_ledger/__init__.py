"""
Flight Ledger: a flight-booking ledger on top of a plain key-value store.

The ledger creates flights, sells and cancels tickets against an escrow amount,
moves flights through their status lifecycle, and answers lookups by route,
by passenger, or globally. All secondary indexes are maintained by hand on a
store that only offers has/get/set, and every public operation is applied
atomically: fully, or not at all.
"""

from .errors import (
    LedgerError,
    AlreadyInitialized,
    Unauthorized,
    FlightAlreadyExists,
    FlightNotFound,
    InvalidInput,
    FlightFull,
    InvalidFare,
    PassengerNotFound,
    InvalidStatus,
    NoPassengers,
    NotInitialized,
    ArithmeticOverflow,
)
from .services.ledger import FlightLedger

__version__ = "0.1.0"

__all__ = [
    "FlightLedger",
    "LedgerError",
    "AlreadyInitialized",
    "Unauthorized",
    "FlightAlreadyExists",
    "FlightNotFound",
    "InvalidInput",
    "FlightFull",
    "InvalidFare",
    "PassengerNotFound",
    "InvalidStatus",
    "NoPassengers",
    "NotInitialized",
    "ArithmeticOverflow",
]
