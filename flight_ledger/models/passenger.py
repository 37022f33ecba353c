"""
Passenger booking models for the flight ledger.
"""

from pydantic import BaseModel, Field

from ..utils.arithmetic import I128_MAX
from .types import Address, Symbol


class PassengerRecord(BaseModel):
    """
    One ticket held by a passenger on a flight.

    A passenger may hold several records on the same flight; each one is
    refunded separately on cancellation.
    """
    passenger: Address = Field(..., description="Ticket holder address")
    paid: int = Field(..., gt=0, le=I128_MAX, description="Fare charged at booking time")
    details: Symbol = Field(..., description="Opaque booking tag, e.g. seat class")
