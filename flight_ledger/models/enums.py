"""
Enums for the flight ledger.
"""

from enum import Enum


class FlightStatus(str, Enum):
    """Flight lifecycle status. BOOKING is the only non-terminal state."""
    BOOKING = "booking"
    TAKEOFF = "takeoff"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not FlightStatus.BOOKING


class StorageTier(str, Enum):
    """Storage tier a logical key lives in."""
    INSTANCE = "instance"      # Small ledger-wide settings (admin)
    PERSISTENT = "persistent"  # Flights, passenger lists and indexes
